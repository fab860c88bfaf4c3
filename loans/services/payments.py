# PATH: loans/services/payments.py

"""
LOAN PAYMENT SERVICE

deposit    : pay the loan down. principal = max(0, principal - amount);
             records an `expense` transaction for the full amount.
withdrawal : draw more. principal += amount; records an `income` transaction.

The transaction is categorised "Loan Payment" and referenced LN-<loan id>.
When an account is given, its balance moves through the ledger; without one
the transaction is informational and touches no balance.

Paying more than the outstanding principal clamps it at zero. The excess is
logged and returned as `overpaid_amount`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from banking.models import Transaction
from banking.services.ledger import record_expense, record_income
from core.money import ZERO, money, positive_money
from loans.models import Loan

logger = logging.getLogger(__name__)

PAYMENT_DEPOSIT = "deposit"
PAYMENT_WITHDRAWAL = "withdrawal"
PAYMENT_TYPES = (PAYMENT_DEPOSIT, PAYMENT_WITHDRAWAL)

CATEGORY_LOAN_PAYMENT = "Loan Payment"


@dataclass(frozen=True)
class PaymentResult:
    loan: Loan
    transaction: Transaction
    overpaid_amount: Decimal


@transaction.atomic
def process_payment(
    *,
    loan,
    amount,
    payment_type: str,
    payment_date=None,
    notes: str = "",
    account=None,
    user=None,
) -> PaymentResult:
    if payment_type not in PAYMENT_TYPES:
        raise ValidationError({"type": ["Payment type must be deposit or withdrawal."]})

    amt = positive_money(amount)
    loan = Loan.objects.select_for_update().get(pk=getattr(loan, "pk", loan))
    overpaid = ZERO

    if payment_type == PAYMENT_DEPOSIT:
        remaining = money(loan.amount - amt)
        if remaining < ZERO:
            overpaid = -remaining
            remaining = ZERO
            logger.warning(
                "loan overpaid; principal clamped at zero",
                extra={
                    "loan_id": loan.pk,
                    "principal": str(loan.amount),
                    "payment": str(amt),
                    "overpaid_amount": str(overpaid),
                },
            )
        loan.amount = remaining
        post = record_expense
        description = f"Loan payment (deposit) for {loan.name}"
    else:
        loan.amount = money(loan.amount + amt)
        post = record_income
        description = f"Loan withdrawal for {loan.name}"

    loan.save(update_fields=["amount", "updated_at"])

    tx = post(
        account=account,
        amount=amt,
        description=description,
        category=CATEGORY_LOAN_PAYMENT,
        notes=notes or "",
        transaction_date=payment_date,
        reference_number=loan.reference_number,
        user=user,
    )

    logger.info(
        "loan payment processed",
        extra={
            "loan_id": loan.pk,
            "type": payment_type,
            "amount": str(amt),
            "transaction_id": tx.pk,
        },
    )
    return PaymentResult(loan=loan, transaction=tx, overpaid_amount=overpaid)
