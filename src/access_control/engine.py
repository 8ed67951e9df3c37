"""Permission engine resolving (module, action, resource) grants through roles.

Grants are purely additive: there is no deny rule, the first matching
permission wins, and a user without any match is denied.
"""

from django.db.models import Prefetch, Q

from .models import WILDCARD, Permission, UserRole


class PermissionEngine:
    """Evaluate permissions over the current role/permission rows (no caching)."""

    def __init__(self, assignments=None):
        self.assignments = assignments if assignments is not None else UserRole.objects

    def active_assignments(self, user_id, branch_id=None):
        """Active assignments of active roles, with their active permissions prefetched.

        With ``branch_id``, assignments scoped to that branch are kept together
        with unscoped ones, since global roles apply in every branch.
        """
        queryset = self.assignments.filter(user_id=user_id, is_active=True, role__is_active=True)
        if branch_id:
            queryset = queryset.filter(Q(branch_id=branch_id) | Q(branch__isnull=True))
        return queryset.select_related("role", "branch").prefetch_related(
            Prefetch(
                "role__permissions",
                queryset=Permission.objects.filter(is_active=True),
                to_attr="active_permissions",
            )
        )

    def has_permission(self, user_id, module: str, action: str, resource: str | None = None, branch_id=None) -> bool:
        for assignment in self.active_assignments(user_id, branch_id):
            for permission in assignment.role.active_permissions:
                if permission.module == WILDCARD and permission.action == WILDCARD:
                    return True
                if permission.matches(module, action, resource):
                    return True
        return False

    def get_user_permissions(self, user_id, branch_id=None) -> dict:
        """Role summaries plus the de-duplicated permission strings reachable by the user."""
        roles = []
        permissions: set[str] = set()

        for assignment in self.active_assignments(user_id, branch_id):
            role = assignment.role
            branch = assignment.branch
            roles.append(
                {
                    "id": str(role.id),
                    "name": role.name,
                    "description": role.description,
                    "branch": {"id": str(branch.id), "name": branch.name, "code": branch.code} if branch else None,
                }
            )
            permissions.update(permission.as_string() for permission in role.active_permissions)

        return {"roles": roles, "permissions": sorted(permissions)}


__all__ = ["PermissionEngine"]
