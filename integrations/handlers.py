# integrations/handlers.py

"""
Topic -> handler registry and the per-process context handed to handlers.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

from fuel.services.sync import SYNC_TOPIC, sync_fuel_prices
from integrations.google.sheets import SheetsClient, build_sheets_client

HANDLERS = {
    SYNC_TOPIC: sync_fuel_prices,
}


@dataclass
class WorkerContext:
    sheets: SheetsClient | None = None

    @property
    def sheets_enabled(self) -> bool:
        return self.sheets is not None and bool(settings.GOOGLE_SHEETS.get("ENABLED"))


def build_context() -> WorkerContext:
    if not settings.GOOGLE_SHEETS.get("ENABLED"):
        return WorkerContext()
    return WorkerContext(sheets=build_sheets_client())
