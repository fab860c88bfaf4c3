import io
from datetime import date, timedelta
from decimal import Decimal
from unittest import mock
from urllib.error import HTTPError

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone

from fuel.models import FuelPrice
from fuel.services.sync import sync_fuel_prices
from integrations.google.fuel_sheet import FuelSheet, parse_sheet_date
from integrations.google.oauth import GoogleAuthError, TokenCredentials, refresh_access_token
from integrations.google.sheets import SheetsApiError, SheetsClient
from integrations.handlers import WorkerContext
from integrations.models import GoogleToken, OutboxJob
from integrations.tests.fakes import FakeResponse, FakeSheetsClient

GOOGLE_SHEETS = {
    "ENABLED": True,
    "SPREADSHEET_ID": "sheet-123",
    "CLIENT_ID": "client-id",
    "CLIENT_SECRET": "client-secret",
    "TOKEN_SERVICE": "google_sheets",
    "FUEL_PRICE_CELLS": {"regular": "Prices!B2", "premium": "Prices!B4", "diesel": "Prices!B5"},
    "LAST_UPDATED_CELL": "Prices!B1",
}

URLOPEN = "integrations.google.http.urlopen"


# =========================================================
# OAUTH
# =========================================================
@override_settings(GOOGLE_SHEETS=GOOGLE_SHEETS)
class OAuthTests(TestCase):
    def setUp(self):
        self.token = GoogleToken.objects.create(
            service="google_sheets",
            access_token="old",
            refresh_token="refresh-1",
            expires_at=timezone.now() + timedelta(seconds=30),
        )

    def test_refresh_stores_new_access_token(self):
        with mock.patch(URLOPEN, return_value=FakeResponse({"access_token": "new", "expires_in": 3600})) as urlopen:
            refresh_access_token(self.token)

        req = urlopen.call_args[0][0]
        self.assertIn(b"grant_type=refresh_token", req.data)
        self.token.refresh_from_db()
        self.assertEqual(self.token.access_token, "new")
        self.assertEqual(self.token.refresh_token, "refresh-1")
        self.assertFalse(self.token.expires_soon(60))

    def test_credentials_refresh_inside_window(self):
        with mock.patch(URLOPEN, return_value=FakeResponse({"access_token": "fresh", "expires_in": 3600})):
            self.assertEqual(TokenCredentials("google_sheets").access_token(), "fresh")

        with mock.patch(URLOPEN) as urlopen:
            self.assertEqual(TokenCredentials("google_sheets").access_token(), "fresh")
        urlopen.assert_not_called()

    def test_missing_refresh_token(self):
        self.token.refresh_token = ""
        self.token.save()
        with self.assertRaises(GoogleAuthError):
            refresh_access_token(self.token)

    def test_refresh_command_dry_run(self):
        out = io.StringIO()
        with mock.patch(URLOPEN) as urlopen:
            call_command("refresh_google_tokens", "--dry-run", stdout=out)
        urlopen.assert_not_called()
        self.assertIn("would refresh google_sheets", out.getvalue())


# =========================================================
# SHEETS CLIENT
# =========================================================
@override_settings(GOOGLE_SHEETS=GOOGLE_SHEETS)
class SheetsClientTests(TestCase):
    def setUp(self):
        GoogleToken.objects.create(
            service="google_sheets",
            access_token="live",
            expires_at=timezone.now() + timedelta(hours=1),
        )
        self.client = SheetsClient(TokenCredentials("google_sheets"), "sheet-123")

    def test_get_values_sends_bearer(self):
        with mock.patch(URLOPEN, return_value=FakeResponse({"values": [["2025-01-01"]]})) as urlopen:
            values = self.client.get_values("January!A:A")

        req = urlopen.call_args[0][0]
        self.assertEqual(values, [["2025-01-01"]])
        self.assertEqual(req.get_header("Authorization"), "Bearer live")
        self.assertIn("/sheet-123/values/January!A:A", req.full_url)

    def test_http_error_raises(self):
        err = HTTPError("url", 403, "Forbidden", {}, io.BytesIO(b'{"error": {"message": "denied"}}'))
        with mock.patch(URLOPEN, side_effect=err):
            with self.assertRaises(SheetsApiError) as ctx:
                self.client.update_cell("January!D3", "1.399")
        self.assertEqual(ctx.exception.status, 403)
        self.assertIn("denied", str(ctx.exception))


# =========================================================
# FUEL SHEET LAYOUT + HANDLER
# =========================================================
@override_settings(GOOGLE_SHEETS=GOOGLE_SHEETS, FUEL_GST_RATE="0.05")
class FuelSheetTests(TestCase):
    def setUp(self):
        self.sheets = FakeSheetsClient(days={"January": ["Date", "2025-01-05", "1/6/2025", "2025-01-07"]})

    def test_parse_sheet_date(self):
        self.assertEqual(parse_sheet_date("1/6/2025"), date(2025, 1, 6))
        self.assertIsNone(parse_sheet_date("Date"))

    def test_summary_cells_and_last_updated(self):
        FuelSheet(self.sheets).push_prices({"regular": Decimal("1.4"), "diesel": None}, on_date=date(2025, 1, 6))

        self.assertEqual(self.sheets.batches, [{"Prices!B2": "1.400", "Prices!B1": "2025-01-06"}])
        self.assertEqual(self.sheets.cells, {})

    def test_evening_writes_price_pre_gst_and_added(self):
        FuelSheet(self.sheets).push_prices(
            {"regular": Decimal("1.470")},
            on_date=date(2025, 1, 6),
            shift="evening",
            added_regular=Decimal("1200.000"),
        )

        self.assertEqual(self.sheets.cells["January!E3"], "1.470")
        self.assertEqual(self.sheets.cells["January!B3"], "1.400")
        self.assertEqual(self.sheets.cells["January!H3"], "1200.000")

    def test_morning_writes_column_d_only(self):
        FuelSheet(self.sheets).push_prices(
            {"regular": Decimal("1.399")}, on_date=date(2025, 1, 7), shift="morning", added_regular=0
        )
        self.assertEqual(self.sheets.cells, {"January!D4": "1.399"})

    def test_handler_pushes_record(self):
        fp = FuelPrice.objects.create(
            date=date(2025, 1, 5), shift="morning", regular_price=Decimal("1.359")
        )
        job = OutboxJob.objects.create(topic="fuel_prices.sync", payload={"fuel_price_id": fp.pk})

        sync_fuel_prices(job, WorkerContext(sheets=self.sheets))

        self.assertEqual(self.sheets.cells, {"January!D2": "1.359"})

    def test_handler_skips_missing_record(self):
        job = OutboxJob.objects.create(topic="fuel_prices.sync", payload={"fuel_price_id": 999})
        sync_fuel_prices(job, WorkerContext(sheets=self.sheets))
        self.assertEqual(self.sheets.batches, [])

    @override_settings(GOOGLE_SHEETS={**GOOGLE_SHEETS, "ENABLED": False})
    def test_handler_noop_when_disabled(self):
        fp = FuelPrice.objects.create(regular_price=Decimal("1.359"))
        job = OutboxJob.objects.create(topic="fuel_prices.sync", payload={"fuel_price_id": fp.pk})

        with self.assertLogs("fuel.services.sync", level="INFO"):
            sync_fuel_prices(job, WorkerContext(sheets=self.sheets))
        self.assertEqual(self.sheets.batches, [])


@override_settings(GOOGLE_SHEETS={**GOOGLE_SHEETS, "ENABLED": False})
class RunSyncWorkerCommandTests(TestCase):
    def test_once_drains_due_jobs(self):
        fp = FuelPrice.objects.create(regular_price=Decimal("1.359"))
        job = OutboxJob.objects.create(topic="fuel_prices.sync", payload={"fuel_price_id": fp.pk})

        out = io.StringIO()
        call_command("run_sync_worker", "--once", stdout=out)

        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_SUCCEEDED)
        self.assertIn("processed 1 job(s)", out.getvalue())
