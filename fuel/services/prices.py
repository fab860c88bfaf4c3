"""
======================================================
PATH: fuel/services/prices.py
======================================================
FUEL PRICE WRITES

save_fuel_price() is the only write path for prices. In the same transaction
as the row it publishes a `fuel_prices.sync` outbox job when:
- create: at least one grade is set
- update: at least one grade changed

Archive / restore / purge never publish.
"""

from __future__ import annotations

import logging

from django.db import transaction

from fuel.models import PRICE_FIELDS, FuelPrice
from fuel.services.sync import SYNC_TOPIC
from integrations.services.outbox import publish

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("date", "shift", "added_regular", *PRICE_FIELDS)


@transaction.atomic
def save_fuel_price(*, data: dict, instance: FuelPrice | None = None, user=None) -> FuelPrice:
    created = instance is None
    if created:
        instance = FuelPrice(user=user)
        before = {}
    else:
        before = {f: getattr(instance, f) for f in PRICE_FIELDS}

    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(instance, field, data[field])
    instance.save()

    if created:
        changed = [f for f in PRICE_FIELDS if getattr(instance, f) is not None]
    else:
        changed = [f for f in PRICE_FIELDS if before[f] != getattr(instance, f)]

    if changed:
        publish(
            SYNC_TOPIC,
            {
                "fuel_price_id": instance.pk,
                "action": "created" if created else "updated",
                "changed_fields": changed,
            },
        )
        logger.info(
            "fuel price sync queued",
            extra={"fuel_price_id": instance.pk, "date": str(instance.date), "shift": instance.shift},
        )
    return instance
