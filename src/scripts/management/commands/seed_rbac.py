"""Seed predefined roles, branches, and demo users with their role assignments."""

import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from access_control.models import Branch, Role, UserRole
from access_control.services import RoleService
from authentication.passwords import hash_password

logger = logging.getLogger(__name__)

BRANCHES = [
    {"code": "KL001", "name": "Kochi Branch", "city": "Kochi", "state": "Kerala"},
    {"code": "TN001", "name": "Chennai Branch", "city": "Chennai", "state": "Tamil Nadu"},
]

DEMO_USERS = [
    {
        "email": "admin@steelmanufacturing.com",
        "username": "system_admin",
        "password": "Admin123!",
        "first_name": "System",
        "last_name": "Administrator",
        "phone": "9999999999",
        "role": "SUPER_ADMIN",
        "branch": None,
    },
    {
        "email": "manager.kerala@steelmanufacturing.com",
        "username": "manager_kerala",
        "password": "Manager123!",
        "first_name": "Kerala",
        "last_name": "Manager",
        "phone": "9999999998",
        "role": "BRANCH_MANAGER",
        "branch": "KL001",
    },
    {
        "email": "production@steelmanufacturing.com",
        "username": "production_mgr",
        "password": "Production123!",
        "first_name": "Production",
        "last_name": "Manager",
        "phone": "9999999997",
        "role": "PRODUCTION_MANAGER",
        "branch": "KL001",
    },
    {
        "email": "sales@steelmanufacturing.com",
        "username": "sales_exec",
        "password": "Sales123!",
        "first_name": "Sales",
        "last_name": "Executive",
        "phone": "9999999996",
        "role": "SALES_EXECUTIVE",
        "branch": "KL001",
    },
    {
        "email": "qc@steelmanufacturing.com",
        "username": "qc_inspector",
        "password": "Quality123!",
        "first_name": "Quality",
        "last_name": "Inspector",
        "phone": "9999999995",
        "role": "QC_INSPECTOR",
        "branch": "KL001",
    },
    {
        "email": "service@steelmanufacturing.com",
        "username": "service_tech",
        "password": "Service123!",
        "first_name": "Service",
        "last_name": "Technician",
        "phone": "9999999994",
        "role": "SERVICE_TECHNICIAN",
        "branch": "KL001",
    },
    {
        "email": "employee@steelmanufacturing.com",
        "username": "test_employee",
        "password": "Employee123!",
        "first_name": "Test",
        "last_name": "Employee",
        "phone": "9999999993",
        "role": "EMPLOYEE",
        "branch": "TN001",
    },
]


class Command(BaseCommand):
    """Management command to seed roles, branches, and demo users."""

    help = (
        "Seed predefined RBAC roles and permissions, the default branches, and demo users. "
        "Safe to run repeatedly. Use --reset to remove the demo users first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete demo users, their sessions, and their role assignments before seeding.",
        )
        parser.add_argument(
            "--skip-users",
            action="store_true",
            help="Only seed roles and branches.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options.get("reset"):
            self._reset_demo_users()

        self.stdout.write("Seeding RBAC data...")
        roles = RoleService().initialize_predefined_roles()
        self.stdout.write(f"  roles: {len(roles)}")
        branches = self._create_branches()
        self.stdout.write(f"  branches: {len(branches)}")
        if not options.get("skip_users"):
            users = self._create_demo_users(branches)
            self.stdout.write(f"  users: {users}")
        logger.info("RBAC seed completed")
        self.stdout.write(self.style.SUCCESS("RBAC seed completed."))

    def _reset_demo_users(self) -> None:
        """Remove demo users; their sessions cascade, their assignments are deleted explicitly."""
        self.stdout.write("Resetting demo users...")
        User = get_user_model()
        emails = [entry["email"] for entry in DEMO_USERS]
        UserRole.objects.filter(user__email__in=emails).delete()
        User.objects.filter(email__in=emails).delete()
        self.stdout.write(self.style.WARNING("Demo users cleared."))

    @staticmethod
    def _create_branches() -> dict[str, Branch]:
        branches = {}
        for entry in BRANCHES:
            branch, _ = Branch.objects.update_or_create(
                code=entry["code"],
                defaults={"name": entry["name"], "city": entry["city"], "state": entry["state"], "is_active": True},
            )
            branches[branch.code] = branch
        return branches

    @staticmethod
    def _create_demo_users(branches: dict[str, Branch]) -> int:
        """Create demo users if missing; existing users keep their password."""
        User = get_user_model()
        for entry in DEMO_USERS:
            user, _ = User.objects.get_or_create(
                email=entry["email"],
                defaults={
                    "username": entry["username"],
                    "first_name": entry["first_name"],
                    "last_name": entry["last_name"],
                    "phone": entry["phone"],
                    "password_hash": hash_password(entry["password"]),
                },
            )
            UserRole.objects.update_or_create(
                user=user,
                role=Role.objects.get(name=entry["role"]),
                branch=branches.get(entry["branch"]) if entry["branch"] else None,
                defaults={"is_active": True},
            )
        return len(DEMO_USERS)
