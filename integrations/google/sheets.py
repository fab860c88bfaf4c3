# integrations/google/sheets.py

from __future__ import annotations

import logging
from urllib.parse import quote

from django.conf import settings

from integrations.google.http import GoogleApiError, request_json
from integrations.google.oauth import TokenCredentials

logger = logging.getLogger(__name__)

SHEETS_BASE = "https://sheets.googleapis.com/v4/spreadsheets"


class SheetsApiError(GoogleApiError):
    pass


class SheetsClient:
    """
    Thin Sheets v4 values client.

    Values are written RAW (no formula parsing), one call per cell for
    update_cell() and one call for the whole mapping in batch_update().
    """

    def __init__(self, credentials: TokenCredentials, spreadsheet_id: str, *, timeout: int = 25):
        if not spreadsheet_id:
            raise SheetsApiError("Spreadsheet id is required.")
        self.credentials = credentials
        self.spreadsheet_id = spreadsheet_id
        self.timeout = timeout

    def _url(self, suffix: str) -> str:
        return f"{SHEETS_BASE}/{self.spreadsheet_id}/{suffix}"

    def _call(self, method: str, suffix: str, **kwargs) -> dict:
        return request_json(
            method,
            self._url(suffix),
            token=self.credentials.access_token(),
            timeout=self.timeout,
            error_class=SheetsApiError,
            **kwargs,
        )

    def get_values(self, cell_range: str) -> list[list]:
        data = self._call("GET", f"values/{quote(cell_range, safe='!:')}")
        return data.get("values") or []

    def update_cell(self, cell_range: str, value) -> None:
        self._call(
            "PUT",
            f"values/{quote(cell_range, safe='!:')}",
            params={"valueInputOption": "RAW"},
            body={"range": cell_range, "values": [[value]]},
        )
        logger.info("sheet cell updated", extra={"range": cell_range})

    def batch_update(self, updates: dict) -> None:
        if not updates:
            return
        self._call(
            "POST",
            "values:batchUpdate",
            body={
                "valueInputOption": "RAW",
                "data": [{"range": rng, "values": [[val]]} for rng, val in updates.items()],
            },
        )
        logger.info("sheet cells updated", extra={"ranges": list(updates)})


def build_sheets_client() -> SheetsClient:
    """Built once per worker process and handed to job handlers."""
    cfg = settings.GOOGLE_SHEETS
    return SheetsClient(TokenCredentials(cfg["TOKEN_SERVICE"]), cfg["SPREADSHEET_ID"])
