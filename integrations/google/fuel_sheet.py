"""
======================================================
PATH: integrations/google/fuel_sheet.py
======================================================
FUEL PRICE SPREADSHEET LAYOUT

Summary cells (GOOGLE_FUEL_PRICE_CELLS) hold the current price per grade and
GOOGLE_LAST_UPDATED_CELL holds the date of the last push.

Month tabs are named after the month ("January", ...). Column A lists the
days; for a given day:
    D  morning regular price
    E  evening regular price
    B  evening regular price before GST
    H  regular volume added that day (only when non-zero)

Every write overwrites a cell, so pushing the same record twice is harmless.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

from core.money import THREEPLACES, price

logger = logging.getLogger(__name__)

SHIFT_COLUMNS = {"morning": "D", "evening": "E"}
PRE_GST_COLUMN = "B"
ADDED_REGULAR_COLUMN = "H"

SHEET_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%B %d, %Y", "%b %d, %Y", "%d-%b-%Y")


def _price_text(value) -> str:
    return f"{price(value):.3f}"


def parse_sheet_date(raw) -> date | None:
    text = str(raw or "").strip()
    if not text:
        return None
    for fmt in SHEET_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


class FuelSheet:
    def __init__(self, client, *, price_cells: dict | None = None, last_updated_cell: str | None = None, gst_rate=None):
        cfg = getattr(settings, "GOOGLE_SHEETS", {}) or {}
        self.client = client
        self.price_cells = dict(price_cells if price_cells is not None else cfg.get("FUEL_PRICE_CELLS") or {})
        self.last_updated_cell = last_updated_cell if last_updated_cell is not None else cfg.get("LAST_UPDATED_CELL")
        self.gst_rate = Decimal(str(gst_rate if gst_rate is not None else settings.FUEL_GST_RATE))

    @staticmethod
    def month_tab(on_date: date) -> str:
        return on_date.strftime("%B")

    def find_row(self, on_date: date) -> int | None:
        tab = self.month_tab(on_date)
        for index, row in enumerate(self.client.get_values(f"{tab}!A:A"), start=1):
            if row and parse_sheet_date(row[0]) == on_date:
                return index
        return None

    def pre_gst(self, value) -> Decimal:
        return (Decimal(str(value)) / (Decimal("1") + self.gst_rate)).quantize(
            THREEPLACES, rounding=ROUND_HALF_UP
        )

    def push_prices(self, prices: dict, *, on_date: date, shift: str | None = None, added_regular=None) -> dict:
        """
        prices: {"regular": Decimal, "premium": ..., ...}; None values are skipped.
        Returns every range written with its value.
        """
        written = {}
        for grade, cell in self.price_cells.items():
            value = prices.get(grade)
            if value is not None and cell:
                written[cell] = _price_text(value)
        if written and self.last_updated_cell:
            written[self.last_updated_cell] = on_date.isoformat()
        self.client.batch_update(written)

        regular = prices.get("regular")
        column = SHIFT_COLUMNS.get((shift or "").lower())
        if regular is None or column is None:
            return written

        tab = self.month_tab(on_date)
        row = self.find_row(on_date)
        if row is None:
            logger.warning(
                "fuel sheet: date row not found",
                extra={"tab": tab, "date": on_date.isoformat()},
            )
            return written

        day_cells = {f"{tab}!{column}{row}": _price_text(regular)}
        if column == SHIFT_COLUMNS["evening"]:
            day_cells[f"{tab}!{PRE_GST_COLUMN}{row}"] = _price_text(self.pre_gst(regular))
        if added_regular and Decimal(str(added_regular)) != 0:
            day_cells[f"{tab}!{ADDED_REGULAR_COLUMN}{row}"] = str(added_regular)

        for cell_range, value in day_cells.items():
            self.client.update_cell(cell_range, value)
        written.update(day_cells)
        return written
