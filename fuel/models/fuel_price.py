"""
======================================================
PATH: fuel/models/fuel_price.py
======================================================
FUEL PRICE

Pump prices (dollars per litre, three decimals) for one shift of one day.
Any grade may be left empty; the spreadsheet only receives grades that are set.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from core.lifecycle import LifecycleModel

PRICE_FIELDS = ("regular_price", "midgrade_price", "premium_price", "diesel_price")
MAX_PRICE = Decimal("999.999")


def _price(**kwargs):
    return models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True, **kwargs)


class FuelPrice(LifecycleModel):
    SHIFT_MORNING = "morning"
    SHIFT_EVENING = "evening"

    SHIFT_CHOICES = [
        (SHIFT_MORNING, "Morning"),
        (SHIFT_EVENING, "Evening"),
    ]

    date = models.DateField(default=timezone.localdate)
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES, blank=True)

    regular_price = _price()
    midgrade_price = _price()
    premium_price = _price()
    diesel_price = _price()

    added_regular = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal("0.000"))

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="fuel_prices",
    )

    class Meta:
        ordering = ["-date", "-created_at"]
        verbose_name = "fuel price"
        indexes = [
            models.Index(fields=["date", "shift"], name="fuel_price_date_shift_idx"),
        ]

    def __str__(self):
        return f"{self.date} {self.shift or '-'}"

    @property
    def has_prices(self) -> bool:
        return any(getattr(self, f) is not None for f in PRICE_FIELDS)

    def price_map(self) -> dict:
        """{"regular": Decimal, ...} with unset grades dropped."""
        out = {}
        for field in PRICE_FIELDS:
            value = getattr(self, field)
            if value is not None:
                out[field.removesuffix("_price")] = value
        return out

    def clean(self):
        errors = {}
        for field in PRICE_FIELDS:
            value = getattr(self, field)
            if value is not None and not (Decimal("0") <= Decimal(str(value)) <= MAX_PRICE):
                errors[field] = [f"Price must be between 0 and {MAX_PRICE}."]
        if self.added_regular is not None and self.added_regular < 0:
            errors["added_regular"] = ["Added volume cannot be negative."]
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if not kwargs.get("update_fields"):
            self.full_clean()
        return super().save(*args, **kwargs)
