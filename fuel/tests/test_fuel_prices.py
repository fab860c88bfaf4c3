from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from fuel.models import FuelPrice
from fuel.services.prices import save_fuel_price
from fuel.services.sync import SYNC_TOPIC
from integrations.models import OutboxJob

User = get_user_model()


# =========================================================
# SERVICE: publication rules
# =========================================================
class SaveFuelPriceTests(TestCase):
    """
    GUARANTEES:
    - create with any price -> exactly one sync job
    - create with no price -> no job
    - update publishes only when a price changed
    """

    def setUp(self):
        self.user = User.objects.create_user(email="editor@example.com", password="pass")

    def test_create_with_price_publishes(self):
        fp = save_fuel_price(
            data={"date": date(2025, 1, 6), "shift": "morning", "regular_price": Decimal("1.399")},
            user=self.user,
        )

        job = OutboxJob.objects.get()
        self.assertEqual(job.topic, SYNC_TOPIC)
        self.assertEqual(job.payload["fuel_price_id"], fp.pk)
        self.assertEqual(job.payload["action"], "created")
        self.assertEqual(job.status, OutboxJob.STATUS_PENDING)

    def test_create_without_prices_is_silent(self):
        save_fuel_price(data={"date": date(2025, 1, 6), "added_regular": Decimal("500")}, user=self.user)
        self.assertFalse(OutboxJob.objects.exists())

    def test_update_publishes_only_on_price_change(self):
        fp = save_fuel_price(data={"regular_price": Decimal("1.399")}, user=self.user)
        OutboxJob.objects.all().delete()

        save_fuel_price(data={"shift": "evening", "regular_price": Decimal("1.399")}, instance=fp)
        self.assertFalse(OutboxJob.objects.exists())

        save_fuel_price(data={"diesel_price": Decimal("1.589")}, instance=fp)
        job = OutboxJob.objects.get()
        self.assertEqual(job.payload["action"], "updated")
        self.assertEqual(job.payload["changed_fields"], ["diesel_price"])

    def test_archive_does_not_publish(self):
        fp = save_fuel_price(data={"regular_price": Decimal("1.399")}, user=self.user)
        OutboxJob.objects.all().delete()

        fp.archive()
        self.assertFalse(OutboxJob.objects.exists())

    def test_price_map_drops_unset_grades(self):
        fp = FuelPrice.objects.create(regular_price=Decimal("1.399"), diesel_price=Decimal("1.589"))
        self.assertEqual(fp.price_map(), {"regular": Decimal("1.399"), "diesel": Decimal("1.589")})


# =========================================================
# API
# =========================================================
class FuelPriceApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.editor = User.objects.create_user(email="editor@example.com", password="pass")
        self.other = User.objects.create_user(email="other@example.com", password="pass")
        self.client.force_authenticate(self.editor)

    def test_create_queues_sync(self):
        res = self.client.post(
            "/api/fuel/prices/",
            {"date": "2025-01-06", "shift": "morning", "regular_price": "1.399", "premium_price": "1.699"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["data"]["regular_price"], "1.399")
        self.assertEqual(OutboxJob.objects.filter(topic=SYNC_TOPIC).count(), 1)

    def test_invalid_price_rejected(self):
        res = self.client.post("/api/fuel/prices/", {"regular_price": "-1"}, format="json")
        self.assertEqual(res.status_code, 422)
        self.assertIn("regular_price", res.data["errors"])
        self.assertFalse(OutboxJob.objects.exists())

    def test_editor_sees_only_own_rows(self):
        FuelPrice.objects.create(regular_price=Decimal("1.299"), user=self.other)
        mine = FuelPrice.objects.create(regular_price=Decimal("1.399"), user=self.editor)

        res = self.client.get("/api/fuel/prices/")
        self.assertEqual(res.data["total"], 1)
        self.assertEqual(res.data["data"][0]["id"], mine.pk)

        res = self.client.get("/api/fuel/prices/latest/")
        self.assertEqual(res.data["data"]["id"], mine.pk)

    def test_update_through_api_publishes(self):
        fp = FuelPrice.objects.create(regular_price=Decimal("1.399"), user=self.editor)

        res = self.client.patch(f"/api/fuel/prices/{fp.pk}/", {"regular_price": "1.419"}, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(OutboxJob.objects.get().payload["action"], "updated")
