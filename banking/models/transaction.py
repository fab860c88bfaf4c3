"""
======================================================
PATH: banking/models/transaction.py
======================================================
LEDGER TRANSACTION

income   : +amount on `account`
expense  : -amount on `account`
transfer : -amount on `from_account`, +amount on `to_account`

Guarantees:
- amount > 0 (DB constraint)
- immutable once recorded; only the void / lifecycle columns may change
- a voided transaction no longer counts toward any balance
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.lifecycle import LifecycleModel

MUTABLE_FIELDS = frozenset({"state", "voided_at", "status", "archived_at", "updated_at"})


class Transaction(LifecycleModel):
    TYPE_INCOME = "income"
    TYPE_EXPENSE = "expense"
    TYPE_TRANSFER = "transfer"

    TYPE_CHOICES = [
        (TYPE_INCOME, "Income"),
        (TYPE_EXPENSE, "Expense"),
        (TYPE_TRANSFER, "Transfer"),
    ]

    STATE_COMPLETED = "completed"
    STATE_VOIDED = "voided"

    STATE_CHOICES = [
        (STATE_COMPLETED, "Completed"),
        (STATE_VOIDED, "Voided"),
    ]

    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=14, decimal_places=2)

    description = models.CharField(max_length=255)
    notes = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True)

    account = models.ForeignKey(
        "banking.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transactions",
    )
    from_account = models.ForeignKey(
        "banking.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="outgoing_transfers",
    )
    to_account = models.ForeignKey(
        "banking.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="incoming_transfers",
    )

    transaction_date = models.DateField(default=timezone.localdate)
    reference_number = models.CharField(max_length=100, blank=True, db_index=True)

    state = models.CharField(max_length=10, choices=STATE_CHOICES, default=STATE_COMPLETED)
    voided_at = models.DateTimeField(null=True, blank=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bank_transactions",
    )

    class Meta:
        ordering = ["-transaction_date", "-created_at"]
        indexes = [
            models.Index(fields=["type", "transaction_date"], name="banking_tx_type_date_idx"),
            models.Index(fields=["account", "transaction_date"], name="banking_tx_account_date_idx"),
            models.Index(fields=["state"], name="banking_tx_state_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="banking_transaction_amount_positive",
            ),
        ]
        verbose_name = "transaction"

    def __str__(self):
        return f"{self.type} {self.amount} ({self.reference_number or self.pk})"

    @property
    def is_voided(self) -> bool:
        return self.state == self.STATE_VOIDED

    def effects(self) -> list[tuple[int, Decimal]]:
        """(account_id, signed delta) pairs this transaction applies."""
        if self.type == self.TYPE_INCOME and self.account_id:
            return [(self.account_id, self.amount)]
        if self.type == self.TYPE_EXPENSE and self.account_id:
            return [(self.account_id, -self.amount)]
        if self.type == self.TYPE_TRANSFER:
            return [(self.from_account_id, -self.amount), (self.to_account_id, self.amount)]
        return []

    def clean(self):
        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError({"description": ["Description is required."]})

        if self.amount is not None and self.amount <= 0:
            raise ValidationError({"amount": ["Amount must be greater than 0."]})

        if self.type == self.TYPE_TRANSFER:
            if not self.from_account_id or not self.to_account_id:
                raise ValidationError("Transfers need both a source and a destination account.")
            if self.from_account_id == self.to_account_id:
                raise ValidationError(
                    {"to_account": ["Source and destination accounts must be different."]}
                )
            if self.account_id:
                raise ValidationError({"account": ["Transfers do not use `account`."]})
        elif self.from_account_id or self.to_account_id:
            raise ValidationError("Only transfers may set from_account / to_account.")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or not set(update_fields) <= MUTABLE_FIELDS:
                raise ValidationError("Transactions are immutable once recorded.")
            return super().save(*args, **kwargs)

        self.full_clean()
        return super().save(*args, **kwargs)
