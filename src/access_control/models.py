"""RBAC models: Branch, Role, Permission, and the user/role assignment edge."""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q

WILDCARD = "*"


class Branch(models.Model):
    """Tenant/location partition used for data isolation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=100)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.code


class Permission(models.Model):
    """A ``(module, action, resource)`` triple; ``*`` matches anything, NULL resource means any."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    module = models.CharField(max_length=50)
    action = models.CharField(max_length=50)
    resource = models.CharField(max_length=100, null=True, blank=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["module", "action", "resource"]
        constraints = [
            models.UniqueConstraint(
                fields=["module", "action", "resource"],
                name="permission_module_action_resource_uniq",
            ),
            models.UniqueConstraint(
                fields=["module", "action"],
                condition=Q(resource__isnull=True),
                name="permission_module_action_null_resource_uniq",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.as_string()

    @staticmethod
    def parse(value: str) -> tuple[str, str, str | None]:
        """Split ``MODULE:ACTION[:RESOURCE]``; a missing resource becomes None."""
        parts = value.split(":")
        module = parts[0] if parts else ""
        action = parts[1] if len(parts) > 1 else ""
        resource = parts[2] if len(parts) > 2 and parts[2] else None
        return module, action, resource

    def as_string(self) -> str:
        return f"{self.module}:{self.action}:{self.resource or WILDCARD}"

    def matches(self, module: str, action: str, resource: str | None = None) -> bool:
        if self.module not in (module, WILDCARD):
            return False
        if self.action not in (action, WILDCARD):
            return False
        return not self.resource or self.resource in (WILDCARD, resource)


class Role(models.Model):
    """Named bundle of permissions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    permissions = models.ManyToManyField(Permission, through="RolePermission", related_name="roles")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class RolePermission(models.Model):
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="role_permissions")
    permission = models.ForeignKey(Permission, on_delete=models.PROTECT, related_name="role_permissions")

    class Meta:
        unique_together = ("role", "permission")

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.role.name} -> {self.permission.as_string()}"


class UserRole(models.Model):
    """Assignment of a role to a user, optionally scoped to one branch.

    Revocation flips ``is_active``; rows are kept as history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="role_assignments"
    )
    role = models.ForeignKey(Role, on_delete=models.PROTECT, related_name="assignments")
    # PROTECT: a scoped assignment must never silently turn into a global one.
    branch = models.ForeignKey(
        Branch, on_delete=models.PROTECT, null=True, blank=True, related_name="role_assignments"
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "role", "branch"],
                name="user_role_branch_uniq",
            ),
            models.UniqueConstraint(
                fields=["user", "role"],
                condition=Q(branch__isnull=True),
                name="user_role_global_uniq",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        scope = self.branch.code if self.branch_id else "global"
        return f"{self.user_id} -> {self.role.name} ({scope})"


__all__ = ["WILDCARD", "Branch", "Permission", "Role", "RolePermission", "UserRole"]
