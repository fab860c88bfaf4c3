"""
PATH: loans/models/loan.py

LOAN

`amount` is the outstanding principal. It only changes through
loans.services.payments.process_payment, which also records the matching
ledger transaction.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from core.lifecycle import LifecycleModel


class Loan(LifecycleModel):
    name = models.CharField(max_length=150)
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="CAD")
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gte=0),
                name="loans_loan_amount_non_negative",
            ),
        ]
        verbose_name = "loan"

    def __str__(self):
        return f"{self.name} ({self.amount} {self.currency})"

    @property
    def reference_number(self) -> str:
        return f"LN-{self.pk}"

    def clean(self):
        self.name = (self.name or "").strip()
        self.currency = (self.currency or "CAD").strip().upper()
        if not self.name:
            raise ValidationError({"name": ["Name is required."]})
        if self.amount is not None and self.amount < 0:
            raise ValidationError({"amount": ["Loan amount cannot be negative."]})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
