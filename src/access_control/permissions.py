"""Authorize stage of the request gate as DRF permission classes.

``RBACPermission`` reads its requirement from the view (``rbac_module``,
``rbac_action``/HTTP method, ``rbac_resource``) or from class attributes set
by ``authorize()``. The request must already carry an ``Identity`` from
``SessionTokenMiddleware``; without one DRF answers 401.
"""

import logging
import uuid

from django.conf import settings
from rest_framework import permissions
from rest_framework.exceptions import ValidationError

from .branches import BranchResolver
from .engine import PermissionEngine

logger = logging.getLogger(__name__)

METHOD_ACTIONS = {
    "GET": "READ",
    "HEAD": "READ",
    "OPTIONS": "READ",
    "POST": "CREATE",
    "PUT": "UPDATE",
    "PATCH": "UPDATE",
    "DELETE": "DELETE",
}


def get_identity(request):
    return getattr(request, "identity", None)


def extract_branch_id(request, view) -> str | None:
    """Branch id from the URL (``branch_id``), the query (``branchId``), or the body."""
    branch_id = getattr(view, "kwargs", {}).get("branch_id") or request.query_params.get("branchId")
    if not branch_id:
        data = request.data
        if hasattr(data, "get"):
            branch_id = data.get("branchId")
    if not branch_id:
        return None
    try:
        return str(uuid.UUID(str(branch_id)))
    except ValueError:
        raise ValidationError({"branchId": ["Invalid branch ID"]}) from None


class RBACPermission(permissions.BasePermission):
    """Grant access when the identity holds ``module:action:resource``.

    On a miss, holders of the super-admin role are let through unless
    ``allow_super_admin`` is False. On success the identity is annotated with
    its accessible branches for downstream data filtering.
    """

    message = "Insufficient permissions for this operation."

    module: str | None = None
    action: str | None = None
    resource: str | None = None
    allow_super_admin: bool | None = None

    engine_class = PermissionEngine
    resolver_class = BranchResolver

    def __init__(self):
        self.engine = self.engine_class()
        self.resolver = self.resolver_class()

    def has_permission(self, request, view) -> bool:
        identity = get_identity(request)
        if identity is None:
            return False

        module = self.module or getattr(view, "rbac_module", None)
        if not module:
            return False
        action = self.action or getattr(view, "rbac_action", None) or METHOD_ACTIONS.get(request.method)
        if not action:
            return False
        resource = self.resource or getattr(view, "rbac_resource", None)
        branch_id = extract_branch_id(request, view)

        allowed = self.engine.has_permission(identity.user_id, module, action, resource, branch_id)
        if not allowed and self._super_admin_bypass(identity, view):
            allowed = True

        if not allowed:
            logger.info(
                "Permission denied: user_id=%s required=%s:%s:%s branch=%s",
                identity.user_id,
                module,
                action,
                resource or "*",
                branch_id,
            )
            return False

        identity.accessible_branches = self.resolver.accessible_branches(identity.user_id)
        return True

    def _super_admin_bypass(self, identity, view) -> bool:
        allow = self.allow_super_admin
        if allow is None:
            allow = getattr(view, "allow_super_admin", True)
        return bool(allow) and identity.has_role(settings.SUPER_ADMIN_ROLE)


def authorize(module: str, action: str, resource: str | None = None, allow_super_admin: bool = True):
    """Build an ``RBACPermission`` subclass bound to a fixed requirement."""
    name = f"Authorize{module.title()}{action.title()}{(resource or '').title()}".replace("_", "")
    return type(
        name,
        (RBACPermission,),
        {"module": module, "action": action, "resource": resource, "allow_super_admin": allow_super_admin},
    )


class HasAnyRole(permissions.BasePermission):
    """Role-name gate for endpoints restricted to specific roles."""

    message = "Insufficient role permissions."
    roles: tuple[str, ...] = ()

    def has_permission(self, request, view) -> bool:
        identity = get_identity(request)
        if identity is None:
            return False
        return not self.roles or any(identity.has_role(role) for role in self.roles)


def require_roles(*roles: str):
    return type("RequireRoles", (HasAnyRole,), {"roles": tuple(roles)})


class BranchAccessPermission(permissions.BasePermission):
    """Deny requests naming a branch outside the identity's accessible branches."""

    message = "Access denied to this branch."
    resolver_class = BranchResolver

    def has_permission(self, request, view) -> bool:
        identity = get_identity(request)
        if identity is None:
            return False
        branch_id = extract_branch_id(request, view)
        if branch_id is None:
            return True
        accessible = identity.accessible_branches
        if accessible is None:
            accessible = self.resolver_class().accessible_branches(identity.user_id)
        return uuid.UUID(branch_id) in {uuid.UUID(str(branch)) for branch in accessible}


__all__ = [
    "METHOD_ACTIONS",
    "RBACPermission",
    "HasAnyRole",
    "BranchAccessPermission",
    "authorize",
    "require_roles",
    "extract_branch_id",
    "get_identity",
]
