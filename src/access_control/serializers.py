"""Serializers for RBAC administration payloads (camelCase on the wire)."""

from rest_framework import serializers

from .models import Branch, Permission, Role, UserRole


class PermissionSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    permission = serializers.SerializerMethodField()

    class Meta:
        model = Permission
        fields = ["id", "module", "action", "resource", "description", "isActive", "permission"]
        read_only_fields = fields

    @staticmethod
    def get_permission(obj) -> str:
        return obj.as_string()


class RoleSerializer(serializers.ModelSerializer):
    """Role with its permission strings, e.g. ``SALES:READ:*``."""

    isActive = serializers.BooleanField(source="is_active", read_only=True)
    permissions = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Role
        fields = ["id", "name", "description", "isActive", "permissions", "createdAt", "updatedAt"]
        read_only_fields = fields

    @staticmethod
    def get_permissions(obj) -> list[str]:
        return sorted(permission.as_string() for permission in obj.permissions.all())


class BranchSerializer(serializers.ModelSerializer):
    class Meta:
        model = Branch
        fields = ["id", "code", "name", "city", "state"]
        read_only_fields = fields


class UserRoleSerializer(serializers.ModelSerializer):
    userId = serializers.UUIDField(source="user_id", read_only=True)
    roleId = serializers.UUIDField(source="role_id", read_only=True)
    branchId = serializers.UUIDField(source="branch_id", read_only=True, allow_null=True)
    role = serializers.CharField(source="role.name", read_only=True)
    branch = BranchSerializer(read_only=True, allow_null=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = UserRole
        fields = ["id", "userId", "roleId", "branchId", "role", "branch", "isActive"]
        read_only_fields = fields


class CreateRoleSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    permissions = serializers.ListField(child=serializers.CharField(), min_length=1)

    @staticmethod
    def validate_permissions(value):
        for entry in value:
            if len([part for part in entry.split(":")[:2] if part]) < 2:
                raise serializers.ValidationError(f"Invalid permission string: {entry}")
        return value


class UpdateRoleSerializer(CreateRoleSerializer):
    name = serializers.CharField(max_length=100, required=False)
    permissions = serializers.ListField(child=serializers.CharField(), required=False)


class RoleAssignmentSerializer(serializers.Serializer):
    userId = serializers.UUIDField()
    roleId = serializers.UUIDField()
    branchId = serializers.UUIDField(required=False, allow_null=True)


class CheckPermissionSerializer(serializers.Serializer):
    module = serializers.CharField(max_length=50)
    action = serializers.CharField(max_length=50)
    resource = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    branchId = serializers.UUIDField(required=False, allow_null=True)


def serialize_user_with_roles(user, assignments) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "roles": UserRoleSerializer(assignments, many=True).data,
    }


__all__ = [
    "BranchSerializer",
    "CheckPermissionSerializer",
    "CreateRoleSerializer",
    "PermissionSerializer",
    "RoleAssignmentSerializer",
    "RoleSerializer",
    "UpdateRoleSerializer",
    "UserRoleSerializer",
    "serialize_user_with_roles",
]
