"""
======================================================
PATH: banking/models/account.py
======================================================
BANK ACCOUNT

One row per real bank account, plus the notional "Cash" account that holds
till money until it is deposited.

Guarantees:
- balance == signed sum of the account's completed transactions
- balance is only written by banking.services.ledger (row-locked)
- an account with money on it cannot be archived
- an account referenced by any transaction cannot be purged
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from core.lifecycle import LifecycleError, LifecycleModel


class Account(LifecycleModel):
    TYPE_CHECKING = "checking"
    TYPE_SAVINGS = "savings"
    TYPE_BUSINESS = "business"
    TYPE_CREDIT = "credit"
    TYPE_INVESTMENT = "investment"
    TYPE_CASH = "cash"

    TYPE_CHOICES = [
        (TYPE_CHECKING, "Checking"),
        (TYPE_SAVINGS, "Savings"),
        (TYPE_BUSINESS, "Business"),
        (TYPE_CREDIT, "Credit"),
        (TYPE_INVESTMENT, "Investment"),
        (TYPE_CASH, "Cash"),
    ]

    bank_name = models.CharField(max_length=120)
    account_name = models.CharField(max_length=120)
    account_number = models.CharField(max_length=50, blank=True)
    account_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_CHECKING)
    routing_number = models.CharField(max_length=50, blank=True)
    swift_code = models.CharField(max_length=20, blank=True)
    currency = models.CharField(max_length=3, default="CAD")

    balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bank_accounts",
    )

    class Meta:
        ordering = ["bank_name", "account_name"]
        indexes = [
            models.Index(fields=["bank_name", "account_type"], name="banking_acc_bank_type_idx"),
            models.Index(fields=["is_active"], name="banking_acc_active_idx"),
        ]
        verbose_name = "bank account"
        verbose_name_plural = "bank accounts"

    def __str__(self):
        return f"{self.bank_name} - {self.account_name}"

    @property
    def is_cash(self) -> bool:
        return self.account_name.strip().lower() == settings.CASH_ACCOUNT_NAME.strip().lower()

    @property
    def masked_account_number(self) -> str:
        digits = (self.account_number or "").strip()
        if len(digits) <= 4:
            return digits
        return "*" * (len(digits) - 4) + digits[-4:]

    def clean(self):
        self.bank_name = (self.bank_name or "").strip()
        self.account_name = (self.account_name or "").strip()
        self.currency = (self.currency or "CAD").strip().upper()

        if not self.bank_name:
            raise ValidationError({"bank_name": ["Bank name is required."]})
        if not self.account_name:
            raise ValidationError({"account_name": ["Account name is required."]})
        if len(self.currency) != 3:
            raise ValidationError({"currency": ["Currency must be a 3-letter code."]})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def assert_can_archive(self):
        if self.balance != Decimal("0.00"):
            raise LifecycleError(
                {"balance": [f"{self} still holds {self.balance}; move the money out first."]}
            )

    def assert_can_purge(self):
        from banking.models.transaction import Transaction

        referenced = Transaction.all_objects.filter(
            Q(account=self) | Q(from_account=self) | Q(to_account=self)
        ).exists()
        if referenced:
            raise LifecycleError("Bank account has transactions and cannot be permanently deleted.")
