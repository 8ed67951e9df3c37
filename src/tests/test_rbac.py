"""RBAC administration endpoints, role service rules, and the seed command."""

from __future__ import annotations

import uuid
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase, override_settings

from access_control.engine import PermissionEngine
from access_control.models import Branch, Permission, Role, UserRole
from access_control.predefined import PREDEFINED_ROLES
from access_control.services import RoleService
from authentication.models import User
from core.exceptions import NotFoundError
from tests.utils import assign, auth_client, create_branch, create_role, create_user


@override_settings(BCRYPT_ROUNDS=4)
class RoleAdminTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.kochi = create_branch("KL001")
        cls.chennai = create_branch("TN001")
        cls.admin = create_user("admin@example.com")
        assign(cls.admin, create_role("RBAC_ADMIN", ["RBAC:*:*"]))
        cls.member = create_user("member@example.com")
        cls.sales = create_role("SALES_EXECUTIVE", ["SALES:READ:LEAD", "SALES:CREATE:LEAD"])

    def setUp(self):
        self.client_admin = auth_client(self.admin)

    def test_create_role(self):
        response = self.client_admin.post(
            "/rbac/roles/",
            {"name": "QC_LEAD", "description": "QC lead", "permissions": ["QC:*:*", "MANUFACTURING:READ"]},
            format="json",
        )
        body = response.json()

        self.assertEqual(response.status_code, 201)
        self.assertEqual(body["data"]["role"]["permissions"], ["MANUFACTURING:READ:*", "QC:*:*"])
        permission = Permission.objects.get(module="MANUFACTURING", action="READ", resource__isnull=True)
        self.assertEqual(permission.description, "READ access to MANUFACTURING")

    def test_database_failure_is_503(self):
        with mock.patch.object(RoleService, "list_roles", side_effect=DatabaseError("connection lost")):
            response = self.client_admin.get("/rbac/roles/")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["error"]["code"], "SERVICE_UNAVAILABLE")
        self.assertNotIn("connection lost", response.content.decode())

    def test_create_role_requires_permissions(self):
        response = self.client_admin.post("/rbac/roles/", {"name": "EMPTY", "permissions": []}, format="json")

        self.assertEqual(response.status_code, 400)

    def test_create_role_rejects_malformed_permission(self):
        response = self.client_admin.post("/rbac/roles/", {"name": "BAD", "permissions": ["SALES"]}, format="json")

        self.assertEqual(response.status_code, 400)

    def test_list_roles(self):
        body = self.client_admin.get("/rbac/roles/").json()
        names = [role["name"] for role in body["data"]["roles"]]

        self.assertIn("SALES_EXECUTIVE", names)

    def test_update_role_keeps_permissions_when_omitted(self):
        response = self.client_admin.put(
            f"/rbac/roles/{self.sales.id}/", {"description": "Updated"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        role = response.json()["data"]["role"]
        self.assertEqual(role["description"], "Updated")
        self.assertEqual(role["permissions"], ["SALES:CREATE:LEAD", "SALES:READ:LEAD"])

    def test_update_role_replaces_permissions(self):
        response = self.client_admin.put(
            f"/rbac/roles/{self.sales.id}/", {"permissions": ["SALES:READ:*"]}, format="json"
        )

        self.assertEqual(response.json()["data"]["role"]["permissions"], ["SALES:READ:*"])

    def test_update_missing_role_is_404(self):
        response = self.client_admin.put(f"/rbac/roles/{uuid.uuid4()}/", {"description": "x"}, format="json")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["code"], "ROLE_NOT_FOUND")

    def test_delete_role_in_use_is_refused(self):
        assign(self.member, self.sales)
        response = self.client_admin.delete(f"/rbac/roles/{self.sales.id}/")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["code"], "ROLE_IN_USE")

    def test_delete_role_is_soft(self):
        response = self.client_admin.delete(f"/rbac/roles/{self.sales.id}/")

        self.assertEqual(response.status_code, 200)
        self.sales.refresh_from_db()
        self.assertFalse(self.sales.is_active)

    def test_permissions_grouped_by_module(self):
        body = self.client_admin.get("/rbac/permissions/").json()

        self.assertIn("SALES", body["data"]["groupedPermissions"])
        self.assertEqual(len(body["data"]["groupedPermissions"]["SALES"]), 2)

    def test_assign_and_remove_role(self):
        payload = {"userId": str(self.member.id), "roleId": str(self.sales.id), "branchId": str(self.kochi.id)}
        response = self.client_admin.post("/rbac/users/assign-role/", payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["userRole"]["branch"]["code"], "KL001")
        self.assertTrue(PermissionEngine().has_permission(self.member.id, "SALES", "READ", "LEAD", self.kochi.id))

        response = self.client_admin.post("/rbac/users/remove-role/", payload, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(PermissionEngine().has_permission(self.member.id, "SALES", "READ", "LEAD", self.kochi.id))
        self.assertFalse(UserRole.objects.get(user=self.member, role=self.sales).is_active)

    def test_reassign_reactivates_existing_row(self):
        service = RoleService()
        first = service.assign_role(self.member.id, self.sales.id)
        service.remove_role(self.member.id, self.sales.id)
        second = service.assign_role(self.member.id, self.sales.id)

        self.assertEqual(first.id, second.id)
        self.assertTrue(second.is_active)
        self.assertEqual(UserRole.objects.filter(user=self.member).count(), 1)

    def test_remove_without_branch_revokes_every_scope(self):
        assign(self.member, self.sales, branch=self.kochi)
        assign(self.member, self.sales, branch=self.chennai)

        revoked = RoleService().remove_role(self.member.id, self.sales.id)

        self.assertEqual(revoked, 2)

    def test_assign_not_found_codes(self):
        cases = [
            ({"userId": str(uuid.uuid4()), "roleId": str(self.sales.id)}, "USER_NOT_FOUND"),
            ({"userId": str(self.member.id), "roleId": str(uuid.uuid4())}, "ROLE_NOT_FOUND"),
        ]
        for payload, code in cases:
            response = self.client_admin.post("/rbac/users/assign-role/", payload, format="json")
            self.assertEqual(response.status_code, 404)
            self.assertEqual(response.json()["error"]["code"], code)

    def test_assign_unknown_branch(self):
        with self.assertRaises(NotFoundError) as ctx:
            RoleService().assign_role(self.member.id, self.sales.id, uuid.uuid4())

        self.assertEqual(ctx.exception.code, "BRANCH_NOT_FOUND")

    def test_user_permissions_and_check(self):
        assign(self.member, self.sales, branch=self.kochi)

        permissions = self.client_admin.get(f"/rbac/users/{self.member.id}/permissions/").json()["data"]
        self.assertEqual(permissions["permissions"], ["SALES:CREATE:LEAD", "SALES:READ:LEAD"])

        url = f"/rbac/users/{self.member.id}/check-permission/"
        granted = self.client_admin.post(
            url, {"module": "SALES", "action": "READ", "resource": "LEAD", "branchId": str(self.kochi.id)}, format="json"
        )
        denied = self.client_admin.post(
            url, {"module": "SALES", "action": "READ", "resource": "LEAD", "branchId": str(self.chennai.id)}, format="json"
        )

        self.assertTrue(granted.json()["data"]["hasPermission"])
        self.assertFalse(denied.json()["data"]["hasPermission"])

    def test_users_listing_is_branch_scoped(self):
        manager = create_user("manager@example.com")
        assign(manager, create_role("RBAC_VIEWER", ["RBAC:READ:*"]), branch=self.kochi)
        assign(self.member, self.sales, branch=self.kochi)
        outsider = create_user("outsider@example.com")
        assign(outsider, self.sales, branch=self.chennai)

        body = auth_client(manager).get("/rbac/users/").json()
        emails = {user["email"] for user in body["data"]["users"]}

        self.assertIn(self.member.email, emails)
        self.assertNotIn(outsider.email, emails)

    def test_me_endpoints(self):
        assign(self.member, self.sales, branch=self.kochi)
        client = auth_client(self.member)

        permissions = client.get("/rbac/me/permissions/").json()["data"]
        branches = client.get("/rbac/me/branches/").json()["data"]["branches"]

        self.assertEqual(permissions["roles"][0]["name"], "SALES_EXECUTIVE")
        self.assertEqual([branch["code"] for branch in branches], ["KL001"])


@override_settings(BCRYPT_ROUNDS=4)
class SeedTests(TestCase):
    def test_initialize_is_idempotent(self):
        service = RoleService()
        service.initialize_predefined_roles()
        counts = (Role.objects.count(), Permission.objects.count())
        service.initialize_predefined_roles()

        self.assertEqual((Role.objects.count(), Permission.objects.count()), counts)
        self.assertEqual(Role.objects.count(), len(PREDEFINED_ROLES))
        super_admin = Role.objects.get(name="SUPER_ADMIN")
        self.assertEqual([p.as_string() for p in super_admin.permissions.all()], ["*:*:*"])

    def test_initialize_endpoint_requires_super_admin_role(self):
        root = create_user("root@example.com")
        assign(root, create_role("SUPER_ADMIN", ["*:*:*"]))

        response = auth_client(root).post("/rbac/initialize/")

        self.assertEqual(response.status_code, 200)
        self.assertTrue(Role.objects.filter(name="EMPLOYEE").exists())

    def test_seed_command_is_idempotent(self):
        call_command("seed_rbac", stdout=StringIO())
        call_command("seed_rbac", stdout=StringIO())

        self.assertEqual(Branch.objects.count(), 2)
        admin = User.objects.get(email="admin@steelmanufacturing.com")
        self.assertTrue(UserRole.objects.filter(user=admin, role__name="SUPER_ADMIN", branch__isnull=True).exists())
        self.assertEqual(UserRole.objects.filter(user=admin).count(), 1)

    def test_seed_command_reset(self):
        call_command("seed_rbac", stdout=StringIO())
        call_command("seed_rbac", "--reset", stdout=StringIO())

        self.assertEqual(User.objects.filter(email__endswith="@steelmanufacturing.com").count(), 7)
