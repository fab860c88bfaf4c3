"""
======================================================
PATH: sales/models/daily_sale.py
======================================================
DAILY SALE

One row per business day: what the till sold, how it was paid, and how much
cash was dropped in the safe (safedrops) or left in the drawer (cash on hand).
Safedrop and cash-on-hand amounts are later resolved into bank accounts
through SafedropResolution rows.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from core.lifecycle import LifecycleError, LifecycleModel

ZERO = Decimal("0.00")


def _amount(**kwargs):
    return models.DecimalField(max_digits=12, decimal_places=2, default=ZERO, **kwargs)


class DailySale(LifecycleModel):
    APPROVAL_PENDING = "pending"
    APPROVAL_APPROVED = "approved"

    APPROVAL_CHOICES = [
        (APPROVAL_PENDING, "Pending"),
        (APPROVAL_APPROVED, "Approved"),
    ]

    date = models.DateField(unique=True)

    # Product side
    fuel_sale = _amount()
    store_sale = _amount()
    gst = _amount()
    store_discount = _amount()
    penny_rounding = _amount()
    daily_total = _amount()

    # Counter side
    card = _amount()
    cash = _amount()
    coupon = _amount()
    delivery = _amount()

    reported_total = _amount()

    # Cash movement
    number_of_safedrops = models.PositiveIntegerField(default=0)
    safedrops_amount = _amount()
    cash_on_hand = _amount()

    approval_status = models.CharField(
        max_length=10,
        choices=APPROVAL_CHOICES,
        default=APPROVAL_PENDING,
    )
    notes = models.TextField(blank=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="daily_sales",
    )

    class Meta:
        ordering = ["-date"]
        verbose_name = "daily sale"

    def __str__(self):
        return f"Daily sale {self.date}"

    @property
    def total_product_sale(self) -> Decimal:
        return self.fuel_sale + self.store_sale + self.gst

    @property
    def total_counter_sale(self) -> Decimal:
        return self.card + self.cash + self.coupon + self.delivery

    @property
    def grand_total(self) -> Decimal:
        return self.total_product_sale + self.total_counter_sale

    def clean(self):
        # The default manager hides archived days; uniqueness spans all of them.
        if self.date and (
            DailySale.all_objects.filter(date=self.date).exclude(pk=self.pk).exists()
        ):
            raise ValidationError(
                {"date": ["A daily sale for this date already exists (it may be archived)."]}
            )

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False)
        return super().save(*args, **kwargs)

    def assert_can_purge(self):
        if self.safedrop_resolutions.exists():
            raise LifecycleError(
                "Daily sale has safedrop resolutions and cannot be permanently deleted."
            )
