"""RBAC administration endpoints under ``/rbac/``."""

from typing import Any

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import IsAuthenticated

from core.response import BaseAPIView, api_response

from .branches import BranchResolver
from .engine import PermissionEngine
from .mixins import BranchScopedQuerysetMixin
from .models import Branch
from .permissions import RBACPermission, extract_branch_id, get_identity, require_roles
from .serializers import (
    BranchSerializer,
    CheckPermissionSerializer,
    CreateRoleSerializer,
    PermissionSerializer,
    RoleAssignmentSerializer,
    RoleSerializer,
    UpdateRoleSerializer,
    UserRoleSerializer,
    serialize_user_with_roles,
)
from .services import RoleService


def _optional_str(value) -> str | None:
    return str(value) if value else None


class RBACAdminView(BaseAPIView):
    permission_classes: list[Any] = [RBACPermission]
    rbac_module = "RBAC"
    role_service_class = RoleService

    @property
    def roles(self) -> RoleService:
        return self.role_service_class()


class InitializeView(RBACAdminView):
    permission_classes: list[Any] = [require_roles(settings.SUPER_ADMIN_ROLE)]

    def post(self, request):
        """Seed the predefined roles and their permissions."""
        self.roles.initialize_predefined_roles()
        return api_response(message="RBAC system initialized successfully")


class RoleListView(RBACAdminView):
    rbac_resource = "ROLES"

    def get(self, request):
        roles = self.roles.list_roles()
        return api_response({"roles": RoleSerializer(roles, many=True).data})

    def post(self, request):
        serializer = CreateRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        role = self.roles.create_or_update_role(data["name"], data.get("description"), data["permissions"])
        return api_response(
            {"role": RoleSerializer(role).data},
            status=status.HTTP_201_CREATED,
            message="Role created successfully",
        )


class RoleDetailView(RBACAdminView):
    rbac_resource = "ROLES"

    def put(self, request, role_id):
        serializer = UpdateRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        role = self.roles.update_role(
            role_id,
            name=data.get("name"),
            description=data.get("description"),
            permissions=data.get("permissions"),
        )
        return api_response({"role": RoleSerializer(role).data}, message="Role updated successfully")

    def delete(self, request, role_id):
        self.roles.delete_role(role_id)
        return api_response(message="Role deleted successfully")


class PermissionListView(RBACAdminView):
    rbac_resource = "PERMISSIONS"

    def get(self, request):
        permissions = list(self.roles.list_permissions())
        grouped = {
            module: PermissionSerializer(items, many=True).data
            for module, items in self.roles.group_by_module(permissions).items()
        }
        return api_response(
            {"permissions": PermissionSerializer(permissions, many=True).data, "groupedPermissions": grouped}
        )


class UserRoleListView(BranchScopedQuerysetMixin, RBACAdminView):
    """Users with their active role assignments, limited to the caller's branches."""

    rbac_resource = "USERS"
    branch_entity_kind = "user_roles"

    def get(self, request):
        branch_id = extract_branch_id(request, self)
        users = self.roles.users_with_roles(self.get_branch_filter(), branch_id)
        return api_response({"users": [serialize_user_with_roles(user, roles) for user, roles in users]})


class AssignRoleView(RBACAdminView):
    rbac_action = "CREATE"
    rbac_resource = "USER_ROLES"

    def post(self, request):
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        assignment = self.roles.assign_role(data["userId"], data["roleId"], data.get("branchId"))
        return api_response(
            {"userRole": UserRoleSerializer(assignment).data},
            status=status.HTTP_201_CREATED,
            message="Role assigned successfully",
        )


class RemoveRoleView(RBACAdminView):
    rbac_action = "DELETE"
    rbac_resource = "USER_ROLES"

    def post(self, request):
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        self.roles.remove_role(data["userId"], data["roleId"], data.get("branchId"))
        return api_response(message="Role removed successfully")


class UserPermissionsView(RBACAdminView):
    rbac_action = "READ"
    rbac_resource = "USER_PERMISSIONS"
    engine_class = PermissionEngine

    def get(self, request, user_id):
        branch_id = extract_branch_id(request, self)
        return api_response(self.engine_class().get_user_permissions(user_id, branch_id))


class CheckPermissionView(UserPermissionsView):
    http_method_names = ["post", "options"]

    def post(self, request, user_id):
        serializer = CheckPermissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        allowed = self.engine_class().has_permission(
            user_id,
            data["module"],
            data["action"],
            data.get("resource") or None,
            _optional_str(data.get("branchId")),
        )
        return api_response({"hasPermission": allowed})


class MyPermissionsView(BaseAPIView):
    permission_classes: list[Any] = [IsAuthenticated]

    def get(self, request):
        identity = get_identity(request)
        branch_id = extract_branch_id(request, self)
        return api_response(PermissionEngine().get_user_permissions(identity.user_id, branch_id))


class MyBranchesView(BaseAPIView):
    permission_classes: list[Any] = [IsAuthenticated]

    def get(self, request):
        identity = get_identity(request)
        branch_ids = BranchResolver().accessible_branches(identity.user_id)
        branches = Branch.objects.filter(id__in=branch_ids, is_active=True)
        return api_response({"branches": BranchSerializer(branches, many=True).data})


__all__ = [
    "AssignRoleView",
    "CheckPermissionView",
    "InitializeView",
    "MyBranchesView",
    "MyPermissionsView",
    "PermissionListView",
    "RemoveRoleView",
    "RoleDetailView",
    "RoleListView",
    "UserPermissionsView",
    "UserRoleListView",
]
