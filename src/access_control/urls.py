"""Routing for RBAC administration endpoints."""

from django.urls import path

from .views import (
    AssignRoleView,
    CheckPermissionView,
    InitializeView,
    MyBranchesView,
    MyPermissionsView,
    PermissionListView,
    RemoveRoleView,
    RoleDetailView,
    RoleListView,
    UserPermissionsView,
    UserRoleListView,
)

urlpatterns = [
    path("initialize/", InitializeView.as_view(), name="rbac-initialize"),
    path("roles/", RoleListView.as_view(), name="rbac-roles"),
    path("roles/<uuid:role_id>/", RoleDetailView.as_view(), name="rbac-role-detail"),
    path("permissions/", PermissionListView.as_view(), name="rbac-permissions"),
    path("users/", UserRoleListView.as_view(), name="rbac-users"),
    path("users/assign-role/", AssignRoleView.as_view(), name="rbac-assign-role"),
    path("users/remove-role/", RemoveRoleView.as_view(), name="rbac-remove-role"),
    path("users/<uuid:user_id>/permissions/", UserPermissionsView.as_view(), name="rbac-user-permissions"),
    path(
        "users/<uuid:user_id>/check-permission/",
        CheckPermissionView.as_view(),
        name="rbac-check-permission",
    ),
    path("me/permissions/", MyPermissionsView.as_view(), name="rbac-me-permissions"),
    path("me/branches/", MyBranchesView.as_view(), name="rbac-me-branches"),
]
