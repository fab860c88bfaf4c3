from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APIClient

from core.lifecycle import LifecycleError, Status
from expenses.models import ExpenseType

User = get_user_model()


# =========================================================
# MODEL RULES
# =========================================================
class ExpenseTypeTreeTests(TestCase):
    """
    GUARANTEES:
    - no self-parenting and no cycles through descendants
    - archive blocked by active children, purge blocked by any child
    """

    def setUp(self):
        self.utilities = ExpenseType.objects.create(expense_type="Utilities")
        self.power = ExpenseType.objects.create(expense_type="Power", parent=self.utilities)

    def test_cannot_be_own_parent(self):
        self.utilities.parent = self.utilities
        with self.assertRaises(ValidationError) as ctx:
            self.utilities.save()
        self.assertIn("parent", ctx.exception.message_dict)

    def test_cannot_nest_under_descendant(self):
        meter = ExpenseType.objects.create(expense_type="Meter", parent=self.power)
        self.utilities.parent = meter
        with self.assertRaises(ValidationError):
            self.utilities.save()

    def test_archive_blocked_by_active_children(self):
        with self.assertRaises(LifecycleError):
            self.utilities.archive()

        self.power.archive()
        self.utilities.archive()
        self.assertEqual(self.utilities.status, Status.ARCHIVED)

    def test_purge_blocked_by_archived_children(self):
        self.power.archive()
        with self.assertRaises(LifecycleError):
            self.utilities.purge()

        self.power.purge()
        self.utilities.purge()
        self.assertFalse(ExpenseType.all_objects.exists())


# =========================================================
# API
# =========================================================
class ExpenseTypeApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.editor = User.objects.create_user(email="editor@example.com", password="pass")
        self.client.force_authenticate(self.editor)
        self.rent = ExpenseType.objects.create(expense_type="Rent")
        self.utilities = ExpenseType.objects.create(expense_type="Utilities")
        ExpenseType.objects.create(expense_type="Water", parent=self.utilities)

    def test_roots_lists_top_level_with_children(self):
        res = self.client.get("/api/expense-types/roots/")

        self.assertEqual(res.status_code, 200)
        names = [row["expense_type"] for row in res.data["data"]]
        self.assertEqual(names, ["Rent", "Utilities"])
        self.assertEqual(res.data["data"][1]["children"][0]["expense_type"], "Water")

    def test_create_with_parent_and_sort(self):
        res = self.client.post(
            "/api/expense-types/",
            {"expense_type": "Gas", "parent_id": self.utilities.pk},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["data"]["parent"]["id"], self.utilities.pk)

        res = self.client.get("/api/expense-types/?sort_by=expense_type&sort_direction=asc")
        self.assertEqual(res.data["total"], 4)
        self.assertEqual(res.data["data"][0]["expense_type"], "Gas")

    def test_self_parent_rejected(self):
        res = self.client.patch(
            f"/api/expense-types/{self.rent.pk}/",
            {"parent_id": self.rent.pk},
            format="json",
        )
        self.assertEqual(res.status_code, 422)
        self.assertIn("parent", res.data["errors"])

    def test_delete_with_children_rejected(self):
        res = self.client.delete(f"/api/expense-types/{self.utilities.pk}/")
        self.assertEqual(res.status_code, 422)

        self.assertEqual(self.client.delete(f"/api/expense-types/{self.rent.pk}/").status_code, 200)
        res = self.client.get("/api/expense-types/with-trashed/")
        self.assertEqual(res.data["total"], 3)

    def test_restore_requires_archived(self):
        res = self.client.post(f"/api/expense-types/{self.rent.pk}/restore/")
        self.assertEqual(res.status_code, 400)

    def test_force_delete_admin_only(self):
        res = self.client.delete(f"/api/expense-types/{self.rent.pk}/force/")
        self.assertEqual(res.status_code, 403)

        admin = User.objects.create_superuser(email="admin@example.com", password="pass")
        self.client.force_authenticate(admin)
        res = self.client.delete(f"/api/expense-types/{self.rent.pk}/force/")
        self.assertEqual(res.status_code, 200)
        self.assertFalse(ExpenseType.all_objects.filter(pk=self.rent.pk).exists())
