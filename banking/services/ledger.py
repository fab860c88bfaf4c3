# PATH: banking/services/ledger.py

"""
LEDGER SERVICE (AUTHORITATIVE)

The only code allowed to change Account.balance.

Rules:
- every operation runs in one DB transaction
- touched accounts are locked with select_for_update, in primary-key order
- a Transaction row is written for every balance change
- amounts are Decimal, quantized to cents (ROUND_HALF_UP)

Balance effect per transaction type:
- income   : account += amount
- expense  : account -= amount
- transfer : from_account -= amount, to_account += amount
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from banking.models import Account, Transaction
from banking.services.exceptions import (
    AccountResolutionError,
    AlreadyVoidedError,
    InactiveAccountError,
    InsufficientBalanceError,
    LedgerError,
)
from core.lifecycle import Status
from core.money import ZERO, money, positive_money

logger = logging.getLogger("ledger")

CATEGORY_OPENING_BALANCE = "Opening Balance"


def _pk(value):
    return getattr(value, "pk", value)


def get_cash_account() -> Account:
    """
    The notional till account, matched by name (case-insensitive).
    """
    name = settings.CASH_ACCOUNT_NAME
    account = Account.objects.filter(account_name__iexact=name).order_by("pk").first()
    if account is None:
        raise AccountResolutionError(
            f'Cash account not found. Create a bank account named "{name}".'
        )
    return account


def lock_accounts(*accounts, include_archived: bool = False) -> dict:
    """
    Lock the given accounts (objects or ids) in pk order; returns {pk: Account}.
    """
    ids = sorted({_pk(a) for a in accounts if a is not None})
    manager = Account.all_objects if include_archived else Account.objects
    locked = {a.pk: a for a in manager.select_for_update().filter(pk__in=ids).order_by("pk")}

    missing = [pk for pk in ids if pk not in locked]
    if missing:
        raise AccountResolutionError({"account": [f"Bank account {missing[0]} not found."]})
    return locked


def _assert_usable(account: Account) -> None:
    if account.status != Status.ACTIVE or not account.is_active:
        raise InactiveAccountError({"account": [f"{account} is not active."]})


def _apply(locked: dict, tx: Transaction, *, sign: int = 1) -> None:
    for account_id, delta in tx.effects():
        account = locked[account_id]
        account.balance = money(account.balance + sign * delta)
        account.save(update_fields=["balance", "updated_at"])


def _record(*, locked: dict, **fields) -> Transaction:
    tx = Transaction.objects.create(**fields)
    _apply(locked, tx)

    logger.info(
        "ledger transaction recorded",
        extra={
            "transaction_id": tx.pk,
            "type": tx.type,
            "amount": str(tx.amount),
            "reference_number": tx.reference_number,
        },
    )
    return tx


def _single_entry(
    *,
    tx_type: str,
    account,
    amount,
    description: str,
    user=None,
    category: str = "",
    notes: str = "",
    transaction_date=None,
    reference_number: str = "",
) -> Transaction:
    amt = positive_money(amount)

    # No account: the row is recorded for reporting only, no balance moves.
    locked, target = {}, None
    if account is not None:
        locked = lock_accounts(account)
        target = locked[_pk(account)]
        _assert_usable(target)

    return _record(
        locked=locked,
        type=tx_type,
        amount=amt,
        description=description,
        notes=notes or "",
        category=category or "",
        account=target,
        transaction_date=transaction_date or timezone.localdate(),
        reference_number=reference_number or "",
        user=user,
    )


@transaction.atomic
def record_income(*, account, amount, description: str, **kwargs) -> Transaction:
    return _single_entry(
        tx_type=Transaction.TYPE_INCOME,
        account=account,
        amount=amount,
        description=description,
        **kwargs,
    )


@transaction.atomic
def record_expense(*, account, amount, description: str, **kwargs) -> Transaction:
    return _single_entry(
        tx_type=Transaction.TYPE_EXPENSE,
        account=account,
        amount=amount,
        description=description,
        **kwargs,
    )


def transfer_reference() -> str:
    return "TXF-" + timezone.localtime().strftime("%Y%m%d%H%M%S")


@transaction.atomic
def transfer(
    *,
    from_account,
    to_account,
    amount,
    description: str,
    user=None,
    allow_overdraft: bool = False,
    category: str = "",
    notes: str = "",
    transaction_date=None,
    reference_number: str = "",
) -> Transaction:
    amt = positive_money(amount)

    if _pk(from_account) == _pk(to_account):
        raise LedgerError(
            {"to_account": ["Source and destination accounts must be different."]}
        )

    locked = lock_accounts(from_account, to_account)
    source = locked[_pk(from_account)]
    target = locked[_pk(to_account)]
    _assert_usable(source)
    _assert_usable(target)

    if not allow_overdraft and source.balance < amt:
        raise InsufficientBalanceError(
            {"amount": ["Insufficient balance in the source account."]}
        )

    return _record(
        locked=locked,
        type=Transaction.TYPE_TRANSFER,
        amount=amt,
        description=description,
        notes=notes or "",
        category=category or "",
        from_account=source,
        to_account=target,
        transaction_date=transaction_date or timezone.localdate(),
        reference_number=reference_number or transfer_reference(),
        user=user,
    )


@transaction.atomic
def void_transaction(tx, *, user=None) -> Transaction:
    """
    Reverse a completed transaction's balance effect, mark it voided and
    archive it. The row itself is kept for audit.
    """
    tx = Transaction.all_objects.select_for_update().get(pk=_pk(tx))
    if tx.is_voided:
        raise AlreadyVoidedError("Transaction is already voided.")

    locked = lock_accounts(*[account_id for account_id, _ in tx.effects()], include_archived=True)
    _apply(locked, tx, sign=-1)

    tx.state = Transaction.STATE_VOIDED
    tx.voided_at = timezone.now()
    tx.save(update_fields=["state", "voided_at", "updated_at"])
    if tx.status == Status.ACTIVE:
        tx.archive()

    logger.info(
        "ledger transaction voided",
        extra={
            "transaction_id": tx.pk,
            "type": tx.type,
            "amount": str(tx.amount),
            "voided_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return tx


def _sum(qs) -> Decimal:
    return money(qs.aggregate(total=Sum("amount"))["total"] or ZERO)


def compute_ledger_balance(account) -> Decimal:
    """
    Balance implied by the account's completed transactions.
    """
    account_id = _pk(account)
    completed = Transaction.all_objects.filter(state=Transaction.STATE_COMPLETED)

    income = _sum(completed.filter(type=Transaction.TYPE_INCOME, account_id=account_id))
    expense = _sum(completed.filter(type=Transaction.TYPE_EXPENSE, account_id=account_id))
    transfers_in = _sum(completed.filter(type=Transaction.TYPE_TRANSFER, to_account_id=account_id))
    transfers_out = _sum(completed.filter(type=Transaction.TYPE_TRANSFER, from_account_id=account_id))

    return money(income - expense + transfers_in - transfers_out)
