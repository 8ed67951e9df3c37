"""Roles seeded by ``RoleService.initialize_predefined_roles``."""

PREDEFINED_ROLES = [
    {
        "name": "SUPER_ADMIN",
        "description": "Super Administrator with full system access",
        "permissions": ["*:*:*"],
    },
    {
        "name": "BRANCH_MANAGER",
        "description": "Branch Manager with branch-level access",
        "permissions": [
            "MANUFACTURING:*:*",
            "SALES:*:*",
            "INVENTORY:*:*",
            "PROCUREMENT:*:*",
            "QC:*:*",
            "SERVICE:*:*",
            "FINANCE:READ:*",
            "FINANCE:CREATE:INVOICE",
            "FINANCE:UPDATE:INVOICE",
            "HR:READ:*",
            "BI:READ:*",
            "ALERTS:*:*",
        ],
    },
    {
        "name": "PRODUCTION_MANAGER",
        "description": "Production Manager with manufacturing access",
        "permissions": [
            "MANUFACTURING:*:*",
            "INVENTORY:READ:*",
            "INVENTORY:UPDATE:STOCK",
            "QC:*:*",
            "PROCUREMENT:READ:*",
            "PROCUREMENT:CREATE:PR",
            "BI:READ:PRODUCTION",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "SALES_MANAGER",
        "description": "Sales Manager with sales and customer access",
        "permissions": [
            "SALES:*:*",
            "CUSTOMER:*:*",
            "INVENTORY:READ:*",
            "MANUFACTURING:READ:*",
            "SERVICE:READ:*",
            "BI:READ:SALES",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "INVENTORY_MANAGER",
        "description": "Inventory Manager with warehouse access",
        "permissions": [
            "INVENTORY:*:*",
            "PROCUREMENT:READ:*",
            "PROCUREMENT:CREATE:PR",
            "MANUFACTURING:READ:*",
            "SALES:READ:*",
            "BI:READ:INVENTORY",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "PROCUREMENT_MANAGER",
        "description": "Procurement Manager with supplier and purchase access",
        "permissions": [
            "PROCUREMENT:*:*",
            "SUPPLIER:*:*",
            "INVENTORY:READ:*",
            "MANUFACTURING:READ:*",
            "FINANCE:READ:PAYABLES",
            "BI:READ:PROCUREMENT",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "QC_MANAGER",
        "description": "Quality Control Manager with QC access",
        "permissions": [
            "QC:*:*",
            "MANUFACTURING:READ:*",
            "MANUFACTURING:UPDATE:PRODUCTION_ORDER",
            "INVENTORY:READ:*",
            "BI:READ:QC",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "SERVICE_MANAGER",
        "description": "Service Manager with service and installation access",
        "permissions": [
            "SERVICE:*:*",
            "CUSTOMER:READ:*",
            "CUSTOMER:UPDATE:SERVICE_HISTORY",
            "INVENTORY:READ:*",
            "INVENTORY:UPDATE:SERVICE_PARTS",
            "SALES:READ:*",
            "BI:READ:SERVICE",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "FINANCE_MANAGER",
        "description": "Finance Manager with financial access",
        "permissions": [
            "FINANCE:*:*",
            "SALES:READ:*",
            "PROCUREMENT:READ:*",
            "MANUFACTURING:READ:COSTING",
            "HR:READ:PAYROLL",
            "BI:READ:FINANCE",
            "ALERTS:READ:*",
        ],
    },
    {
        "name": "HR_MANAGER",
        "description": "HR Manager with employee and payroll access",
        "permissions": ["HR:*:*", "EMPLOYEE:*:*", "BI:READ:HR", "ALERTS:READ:*"],
    },
    {
        "name": "SALES_EXECUTIVE",
        "description": "Sales Executive with lead and order access",
        "permissions": [
            "SALES:CREATE:LEAD",
            "SALES:UPDATE:LEAD",
            "SALES:READ:LEAD",
            "SALES:CREATE:ESTIMATE",
            "SALES:UPDATE:ESTIMATE",
            "SALES:READ:ESTIMATE",
            "SALES:CREATE:SALES_ORDER",
            "SALES:READ:SALES_ORDER",
            "CUSTOMER:CREATE:*",
            "CUSTOMER:UPDATE:*",
            "CUSTOMER:READ:*",
            "INVENTORY:READ:*",
            "ALERTS:READ:SALES",
        ],
    },
    {
        "name": "PRODUCTION_SUPERVISOR",
        "description": "Production Supervisor with production floor access",
        "permissions": [
            "MANUFACTURING:READ:*",
            "MANUFACTURING:UPDATE:PRODUCTION_ORDER",
            "MANUFACTURING:CREATE:SCRAP_RECORD",
            "MANUFACTURING:UPDATE:MATERIAL_CONSUMPTION",
            "QC:READ:*",
            "INVENTORY:READ:*",
            "ALERTS:READ:PRODUCTION",
        ],
    },
    {
        "name": "QC_INSPECTOR",
        "description": "QC Inspector with inspection access",
        "permissions": [
            "QC:CREATE:INSPECTION",
            "QC:UPDATE:INSPECTION",
            "QC:READ:INSPECTION",
            "QC:CREATE:REWORK",
            "MANUFACTURING:READ:PRODUCTION_ORDER",
            "ALERTS:READ:QC",
        ],
    },
    {
        "name": "WAREHOUSE_OPERATOR",
        "description": "Warehouse Operator with stock movement access",
        "permissions": [
            "INVENTORY:CREATE:STOCK_TRANSACTION",
            "INVENTORY:UPDATE:STOCK_TRANSACTION",
            "INVENTORY:READ:*",
            "PROCUREMENT:READ:GRN",
            "PROCUREMENT:UPDATE:GRN",
            "ALERTS:READ:INVENTORY",
        ],
    },
    {
        "name": "SERVICE_TECHNICIAN",
        "description": "Service Technician with field service access",
        "permissions": [
            "SERVICE:READ:SERVICE_REQUEST",
            "SERVICE:UPDATE:SERVICE_REQUEST",
            "SERVICE:CREATE:SERVICE_COMPLETION",
            "CUSTOMER:READ:*",
            "INVENTORY:READ:SERVICE_PARTS",
            "INVENTORY:UPDATE:SERVICE_PARTS",
            "ALERTS:READ:SERVICE",
        ],
    },
    {
        "name": "EMPLOYEE",
        "description": "Regular Employee with basic access",
        "permissions": [
            "EMPLOYEE_PORTAL:READ:PROFILE",
            "EMPLOYEE_PORTAL:UPDATE:PROFILE",
            "EMPLOYEE_PORTAL:READ:ATTENDANCE",
            "EMPLOYEE_PORTAL:CREATE:LEAVE_REQUEST",
            "EMPLOYEE_PORTAL:READ:PAYROLL",
            "EMPLOYEE_PORTAL:READ:KPI",
        ],
    },
]

__all__ = ["PREDEFINED_ROLES"]
