"""Role administration: seeding, role upserts, assignments, and listings."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import ValidationError

from core.exceptions import NotFoundError, RoleInUseError

from .models import Branch, Permission, Role, RolePermission, UserRole
from .predefined import PREDEFINED_ROLES

logger = logging.getLogger(__name__)

User = get_user_model()


def _role_not_found() -> NotFoundError:
    return NotFoundError("Role not found", code="ROLE_NOT_FOUND")


class RoleService:
    @transaction.atomic
    def initialize_predefined_roles(self) -> list[Role]:
        """Upsert every predefined role with its permission set; safe to re-run."""
        roles = [
            self.create_or_update_role(definition["name"], definition["description"], definition["permissions"])
            for definition in PREDEFINED_ROLES
        ]
        logger.info("Predefined roles initialized: count=%d", len(roles))
        return roles

    @staticmethod
    def ensure_permission(value: str) -> Permission:
        module, action, resource = Permission.parse(value)
        suffix = f":{resource}" if resource else ""
        permission, _ = Permission.objects.get_or_create(
            module=module,
            action=action,
            resource=resource,
            defaults={"description": f"{action} access to {module}{suffix}"},
        )
        return permission

    @transaction.atomic
    def create_or_update_role(self, name: str, description: str | None, permissions) -> Role:
        """Upsert the role by name and replace its permission set."""
        role, created = Role.objects.update_or_create(
            name=name,
            defaults={"description": description or "", "is_active": True},
        )
        self._replace_permissions(role, permissions)
        logger.info("Role %s: role=%s permissions=%d", "created" if created else "updated", name, len(permissions))
        return role

    @transaction.atomic
    def update_role(self, role_id, name=None, description=None, permissions=None) -> Role:
        """Rename/re-describe a role; ``permissions=None`` keeps the current set."""
        role = Role.objects.filter(id=role_id).first()
        if role is None:
            raise _role_not_found()

        if name is not None and name != role.name:
            if Role.objects.filter(name=name).exclude(id=role.id).exists():
                raise ValidationError({"name": ["Role with this name already exists"]})
            role.name = name
        if description is not None:
            role.description = description
        role.save()

        if permissions is not None:
            self._replace_permissions(role, permissions)
        logger.info("Role updated: role_id=%s", role.id)
        return role

    @staticmethod
    def _replace_permissions(role: Role, permissions) -> None:
        permission_ids = dict.fromkeys(RoleService.ensure_permission(value).id for value in permissions)
        RolePermission.objects.filter(role=role).delete()
        RolePermission.objects.bulk_create(
            [RolePermission(role=role, permission_id=permission_id) for permission_id in permission_ids]
        )

    def delete_role(self, role_id) -> Role:
        """Soft delete; refused while any active assignment references the role."""
        role = Role.objects.filter(id=role_id).first()
        if role is None:
            raise _role_not_found()
        if UserRole.objects.filter(role=role, is_active=True).exists():
            raise RoleInUseError()

        role.is_active = False
        role.save(update_fields=["is_active", "updated_at"])
        logger.info("Role deleted: role_id=%s name=%s", role.id, role.name)
        return role

    def assign_role(self, user_id, role_id, branch_id=None) -> UserRole:
        """Create or reactivate the ``(user, role, branch)`` assignment."""
        if not User.objects.filter(id=user_id).exists():
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        role = Role.objects.filter(id=role_id, is_active=True).first()
        if role is None:
            raise _role_not_found()
        branch = None
        if branch_id:
            branch = Branch.objects.filter(id=branch_id).first()
            if branch is None:
                raise NotFoundError("Branch not found", code="BRANCH_NOT_FOUND")

        assignment, _ = UserRole.objects.update_or_create(
            user_id=user_id,
            role=role,
            branch=branch,
            defaults={"is_active": True},
        )
        logger.info(
            "Role assigned: user_id=%s role=%s branch_id=%s", user_id, role.name, branch.id if branch else None
        )
        return assignment

    def remove_role(self, user_id, role_id, branch_id=None) -> int:
        """Deactivate matching assignments; without ``branch_id`` every scope is revoked."""
        queryset = UserRole.objects.filter(user_id=user_id, role_id=role_id, is_active=True)
        if branch_id:
            queryset = queryset.filter(branch_id=branch_id)
        revoked = queryset.update(is_active=False)
        logger.info(
            "Role removed: user_id=%s role_id=%s branch_id=%s revoked=%d", user_id, role_id, branch_id, revoked
        )
        return revoked

    @staticmethod
    def list_roles():
        return Role.objects.filter(is_active=True).prefetch_related("permissions")

    @staticmethod
    def list_permissions():
        return Permission.objects.filter(is_active=True).order_by("module", "action", "resource")

    @staticmethod
    def group_by_module(permissions) -> dict[str, list]:
        grouped: dict[str, list] = {}
        for permission in permissions:
            grouped.setdefault(permission.module, []).append(permission)
        return grouped

    @staticmethod
    def users_with_roles(branch_filter, branch_id=None):
        """Active users with their active assignments, narrowed by branch.

        ``branch_filter`` restricts which assignments are visible to the
        caller; ``branch_id`` additionally keeps only users assigned there.
        """
        assignments = branch_filter.apply(
            UserRole.objects.filter(is_active=True).select_related("role", "branch")
        )
        if branch_id:
            assignments = assignments.filter(branch_id=branch_id)

        users = User.objects.filter(is_active=True)
        if branch_id or branch_filter.is_restricted:
            users = users.filter(id__in=assignments.values("user_id"))

        by_user: dict = {}
        for assignment in assignments:
            by_user.setdefault(assignment.user_id, []).append(assignment)
        return [(user, by_user.get(user.id, [])) for user in users.order_by("email")]


__all__ = ["RoleService"]
