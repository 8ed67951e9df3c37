"""Permission engine: wildcard matching, branch scoping, and monotonicity."""

from __future__ import annotations

from django.test import TestCase, override_settings

from access_control.engine import PermissionEngine
from access_control.models import Permission
from tests.utils import assign, create_branch, create_role, create_user


class PermissionParseTests(TestCase):
    def test_parse(self):
        self.assertEqual(Permission.parse("SALES:READ:LEAD"), ("SALES", "READ", "LEAD"))
        self.assertEqual(Permission.parse("SALES:READ"), ("SALES", "READ", None))
        self.assertEqual(Permission.parse("SALES:READ:"), ("SALES", "READ", None))

    def test_as_string_renders_missing_resource_as_wildcard(self):
        self.assertEqual(Permission(module="QC", action="READ").as_string(), "QC:READ:*")


@override_settings(BCRYPT_ROUNDS=4)
class PermissionEngineTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.kochi = create_branch("KL001")
        cls.chennai = create_branch("TN001")
        cls.user = create_user("engine@example.com")

    def setUp(self):
        self.engine = PermissionEngine()

    def test_no_assignments_denied(self):
        self.assertFalse(self.engine.has_permission(self.user.id, "SALES", "READ"))

    def test_full_wildcard_grants_everything(self):
        assign(self.user, create_role("ROOT", ["*:*:*"]))

        self.assertTrue(self.engine.has_permission(self.user.id, "ANY", "THING", "AT_ALL"))
        self.assertTrue(self.engine.has_permission(self.user.id, "ANY", "THING", branch_id=self.kochi.id))

    def test_resource_wildcard_and_exact(self):
        assign(self.user, create_role("SALES_READER", ["SALES:READ:*", "QC:CREATE:INSPECTION"]))

        self.assertTrue(self.engine.has_permission(self.user.id, "SALES", "READ", "LEAD"))
        self.assertTrue(self.engine.has_permission(self.user.id, "SALES", "READ"))
        self.assertFalse(self.engine.has_permission(self.user.id, "SALES", "UPDATE", "LEAD"))
        self.assertTrue(self.engine.has_permission(self.user.id, "QC", "CREATE", "INSPECTION"))
        self.assertFalse(self.engine.has_permission(self.user.id, "QC", "CREATE", "REWORK"))
        self.assertFalse(self.engine.has_permission(self.user.id, "QC", "CREATE"))

    def test_null_resource_matches_any_resource(self):
        assign(self.user, create_role("INVENTORY_ANY", ["INVENTORY:UPDATE"]))

        self.assertTrue(self.engine.has_permission(self.user.id, "INVENTORY", "UPDATE", "STOCK"))

    def test_action_wildcard(self):
        assign(self.user, create_role("HR_ALL", ["HR:*:PAYROLL"]))

        self.assertTrue(self.engine.has_permission(self.user.id, "HR", "DELETE", "PAYROLL"))
        self.assertFalse(self.engine.has_permission(self.user.id, "HR", "DELETE", "LEAVE"))

    def test_branch_scoped_assignment(self):
        role = create_role("BRANCH_SALES", ["SALES:*:*"])
        assign(self.user, role, branch=self.kochi)

        self.assertTrue(self.engine.has_permission(self.user.id, "SALES", "READ", branch_id=self.kochi.id))
        self.assertFalse(self.engine.has_permission(self.user.id, "SALES", "READ", branch_id=self.chennai.id))
        # Without a branch every assignment counts.
        self.assertTrue(self.engine.has_permission(self.user.id, "SALES", "READ"))

    def test_global_assignment_applies_in_every_branch(self):
        assign(self.user, create_role("GLOBAL_QC", ["QC:READ:*"]))

        self.assertTrue(self.engine.has_permission(self.user.id, "QC", "READ", branch_id=self.chennai.id))

    def test_inactive_assignment_role_or_permission_ignored(self):
        inactive_assignment = create_role("A", ["FINANCE:READ:*"])
        assign(self.user, inactive_assignment, is_active=False)
        inactive_role = create_role("B", ["HR:READ:*"])
        assign(self.user, inactive_role)
        inactive_role.is_active = False
        inactive_role.save()
        assign(self.user, create_role("C", ["BI:READ:*"]))
        Permission.objects.filter(module="BI").update(is_active=False)

        self.assertFalse(self.engine.has_permission(self.user.id, "FINANCE", "READ"))
        self.assertFalse(self.engine.has_permission(self.user.id, "HR", "READ"))
        self.assertFalse(self.engine.has_permission(self.user.id, "BI", "READ"))

    def test_adding_a_role_never_removes_access(self):
        assign(self.user, create_role("FIRST", ["SALES:READ:*"]))
        before = self.engine.has_permission(self.user.id, "SALES", "READ", "LEAD")
        assign(self.user, create_role("SECOND", ["QC:READ:*"]))

        self.assertTrue(before)
        self.assertTrue(self.engine.has_permission(self.user.id, "SALES", "READ", "LEAD"))

    def test_get_user_permissions(self):
        assign(self.user, create_role("SALES_EXEC", ["SALES:READ:LEAD", "SALES:CREATE"]), branch=self.kochi)
        assign(self.user, create_role("READER", ["SALES:READ:LEAD"]))

        result = self.engine.get_user_permissions(self.user.id)

        self.assertEqual(result["permissions"], ["SALES:CREATE:*", "SALES:READ:LEAD"])
        by_name = {role["name"]: role for role in result["roles"]}
        self.assertEqual(by_name["SALES_EXEC"]["branch"]["code"], "KL001")
        self.assertIsNone(by_name["READER"]["branch"])

    def test_get_user_permissions_for_other_branch(self):
        assign(self.user, create_role("SALES_EXEC", ["SALES:READ:LEAD"]), branch=self.kochi)

        result = self.engine.get_user_permissions(self.user.id, branch_id=self.chennai.id)

        self.assertEqual(result, {"roles": [], "permissions": []})
