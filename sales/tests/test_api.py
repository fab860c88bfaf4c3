from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from banking.models import Account
from banking.services.ledger import record_income
from sales.models import DailySale, SafedropResolution

User = get_user_model()


class SafedropApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.editor = User.objects.create_user(email="editor@example.com", password="pass", role="editor")

        self.cash = Account.objects.create(bank_name="Till", account_name="Cash", account_type="cash")
        self.bank = Account.objects.create(bank_name="RBC", account_name="Operating")
        record_income(account=self.cash, amount="1000.00", description="Float")

        self.sale = DailySale.objects.create(
            date=date(2025, 1, 15),
            safedrops_amount=Decimal("500.00"),
            user=self.editor,
        )

    def test_only_admin_can_resolve(self):
        self.client.force_authenticate(self.editor)
        res = self.client.post(
            "/api/sales/safedrops/",
            {"daily_sale_id": self.sale.pk, "target_account_id": self.bank.pk, "amount": "100.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)
        self.assertFalse(SafedropResolution.objects.exists())

    def test_resolve_single_and_over_allocate(self):
        self.client.force_authenticate(self.admin)
        url = "/api/sales/safedrops/"

        res = self.client.post(
            url,
            {"daily_sale_id": self.sale.pk, "target_account_id": self.bank.pk, "amount": "300.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["data"][0]["reference_number"], f"SR-{res.data['data'][0]['id']}")

        res = self.client.post(
            url,
            {"daily_sale_id": self.sale.pk, "target_account_id": self.bank.pk, "amount": "250.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 422)
        self.assertIn("amount", res.data["errors"])

        self.bank.refresh_from_db()
        self.assertEqual(self.bank.balance, Decimal("300.00"))

    def test_resolve_batch(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/sales/safedrops/",
            {
                "daily_sale_id": self.sale.pk,
                "type": "safedrops",
                "resolutions": [
                    {"bank_account_id": self.bank.pk, "amount": "200.00", "notes": "Bag 1"},
                    {"bank_account_id": self.bank.pk, "amount": "100.00"},
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(len(res.data["data"]), 2)

    def test_pending_history_and_reverse(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            "/api/sales/safedrops/",
            {"daily_sale_id": self.sale.pk, "target_account_id": self.bank.pk, "amount": "100.00"},
            format="json",
        )
        resolution_id = res.data["data"][0]["id"]

        res = self.client.get("/api/sales/safedrops/pending/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"][0]["safedrops"]["pending_amount"], "400.00")

        res = self.client.get("/api/sales/safedrops/history/")
        self.assertEqual(res.data["total"], 1)

        res = self.client.post(f"/api/sales/safedrops/{resolution_id}/reverse/")
        self.assertEqual(res.status_code, 200)
        self.assertIsNotNone(res.data["data"]["reversed_at"])

        res = self.client.post(f"/api/sales/safedrops/{resolution_id}/reverse/")
        self.assertEqual(res.status_code, 422)

    def test_editor_sees_only_own_daily_sales(self):
        DailySale.objects.create(date=date(2025, 1, 16), user=self.admin)

        self.client.force_authenticate(self.editor)
        res = self.client.get("/api/sales/daily-sales/")
        self.assertEqual(res.data["total"], 1)

        self.client.force_authenticate(self.admin)
        res = self.client.get("/api/sales/daily-sales/")
        self.assertEqual(res.data["total"], 2)

    def test_create_daily_sale_and_duplicate_date(self):
        self.client.force_authenticate(self.editor)
        payload = {"date": "2025-01-20", "fuel_sale": "100.00", "store_sale": "20.00", "gst": "6.00"}

        res = self.client.post("/api/sales/daily-sales/", payload, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["data"]["total_product_sale"], "126.00")

        res = self.client.post("/api/sales/daily-sales/", payload, format="json")
        self.assertEqual(res.status_code, 422)

    def test_editor_cannot_approve(self):
        self.client.force_authenticate(self.editor)
        res = self.client.patch(
            f"/api/sales/daily-sales/{self.sale.pk}/",
            {"approval_status": "approved"},
            format="json",
        )
        self.assertEqual(res.status_code, 422)

    def test_patch_cannot_lower_safedrops_below_resolved(self):
        self.client.force_authenticate(self.admin)
        self.client.post(
            "/api/sales/safedrops/",
            {"daily_sale_id": self.sale.pk, "target_account_id": self.bank.pk, "amount": "300.00"},
            format="json",
        )

        res = self.client.patch(
            f"/api/sales/daily-sales/{self.sale.pk}/",
            {"safedrops_amount": "100.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 422)
        self.assertIn("safedrops_amount", res.data["errors"])

        self.sale.refresh_from_db()
        self.assertEqual(self.sale.safedrops_amount, Decimal("500.00"))

        res = self.client.patch(
            f"/api/sales/daily-sales/{self.sale.pk}/",
            {"safedrops_amount": "350.00", "notes": "Recounted"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["safedrops_amount"], "350.00")
        self.assertEqual(res.data["data"]["notes"], "Recounted")
