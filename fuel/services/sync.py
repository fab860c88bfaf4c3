# fuel/services/sync.py

from __future__ import annotations

import logging

from django.conf import settings

from fuel.models import FuelPrice
from integrations.google.fuel_sheet import FuelSheet

logger = logging.getLogger(__name__)

SYNC_TOPIC = "fuel_prices.sync"


def sync_fuel_prices(job, context) -> None:
    """
    Push one FuelPrice row to the spreadsheet.

    Skips (without failing the job) when sync is disabled, the row no longer
    exists, or it carries no prices. Google errors propagate so the worker
    retries.
    """
    fuel_price_id = (job.payload or {}).get("fuel_price_id")

    if not settings.GOOGLE_SHEETS.get("ENABLED") or getattr(context, "sheets", None) is None:
        logger.info("google sheets updates are disabled", extra={"fuel_price_id": fuel_price_id})
        return

    fuel_price = FuelPrice.all_objects.filter(pk=fuel_price_id).first()
    if fuel_price is None:
        logger.info("fuel price gone; nothing to sync", extra={"fuel_price_id": fuel_price_id})
        return

    prices = fuel_price.price_map()
    if not prices:
        logger.info("no fuel prices to sync", extra={"fuel_price_id": fuel_price_id})
        return

    written = FuelSheet(context.sheets).push_prices(
        prices,
        on_date=fuel_price.date,
        shift=fuel_price.shift,
        added_regular=fuel_price.added_regular,
    )
    logger.info(
        "fuel prices pushed to google sheets",
        extra={"fuel_price_id": fuel_price.pk, "ranges": list(written)},
    )
