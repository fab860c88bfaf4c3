"""
======================================================
PATH: sales/models/safedrop_resolution.py
======================================================
SAFEDROP RESOLUTION (APPEND-ONLY)

Records that part of a day's safedrops (or cash on hand) was moved from the
Cash account into a bank account. The mirrored ledger row is `transaction`
(reference SR-<id>); it is null when the target was Cash itself.

Guarantees:
- never deleted
- never edited, except: linking the ledger transaction once, and stamping
  reversed_at once
- reversed rows no longer count toward the resolved total
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

APPEND_ONLY_FIELDS = frozenset({"transaction", "reversed_at"})


class SafedropResolution(models.Model):
    TYPE_SAFEDROPS = "safedrops"
    TYPE_CASH_IN_HAND = "cash_in_hand"

    TYPE_CHOICES = [
        (TYPE_SAFEDROPS, "Safedrops"),
        (TYPE_CASH_IN_HAND, "Cash in hand"),
    ]

    daily_sale = models.ForeignKey(
        "sales.DailySale",
        on_delete=models.PROTECT,
        related_name="safedrop_resolutions",
    )
    account = models.ForeignKey(
        "banking.Account",
        on_delete=models.PROTECT,
        related_name="safedrop_resolutions",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="safedrop_resolutions",
    )

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_SAFEDROPS)
    notes = models.TextField(blank=True)

    transaction = models.ForeignKey(
        "banking.Transaction",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="safedrop_resolutions",
    )

    reversed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["daily_sale", "type"], name="sales_res_sale_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="sales_resolution_amount_positive",
            ),
        ]
        verbose_name = "safedrop resolution"

    def __str__(self):
        return f"SR-{self.pk} {self.type} {self.amount}"

    @property
    def reference_number(self) -> str:
        return f"SR-{self.pk}"

    @property
    def is_reversed(self) -> bool:
        return self.reversed_at is not None

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or not set(update_fields) <= APPEND_ONLY_FIELDS:
                raise ValidationError("Safedrop resolutions are append-only.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Safedrop resolutions cannot be deleted; reverse them instead.")
