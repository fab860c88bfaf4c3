# PATH: banking/services/accounts.py

"""
BANK ACCOUNT SERVICE

Accounts are always created with a zero balance. An opening balance is
posted through the ledger as a transaction referenced `OB-<account id>`, so
the balance invariant holds from the first row.
"""

from __future__ import annotations

from django.db import transaction
from django.db.models import Avg, Count, Max, Min, Q, Sum

from banking.models import Account, Transaction
from banking.services.ledger import CATEGORY_OPENING_BALANCE, record_expense, record_income
from core.money import ZERO, money


def opening_reference(account: Account) -> str:
    return f"OB-{account.pk}"


@transaction.atomic
def create_account(*, user, opening_balance=None, **fields) -> Account:
    opening = money(opening_balance, field="opening_balance")

    account = Account.objects.create(owner=user, balance=ZERO, **fields)

    if opening != ZERO:
        post = record_income if opening > ZERO else record_expense
        post(
            account=account,
            amount=abs(opening),
            description=f"Opening balance for {account}",
            category=CATEGORY_OPENING_BALANCE,
            reference_number=opening_reference(account),
            user=user,
        )
        account.refresh_from_db()

    return account


def transfer_summary(qs=None) -> dict:
    """
    Totals over completed transfers (count, sum, avg, largest, smallest).
    """
    if qs is None:
        qs = Transaction.all_objects.all()
    qs = qs.filter(type=Transaction.TYPE_TRANSFER, state=Transaction.STATE_COMPLETED)

    agg = qs.aggregate(
        total_transfers=Count("id"),
        total_amount=Sum("amount"),
        avg_amount=Avg("amount"),
        largest_transfer=Max("amount"),
        smallest_transfer=Min("amount"),
    )
    return {
        "total_transfers": agg["total_transfers"],
        "total_amount": money(agg["total_amount"]),
        "avg_amount": money(agg["avg_amount"]),
        "largest_transfer": money(agg["largest_transfer"]),
        "smallest_transfer": money(agg["smallest_transfer"]),
    }


def accounts_touching(account) -> Q:
    pk = getattr(account, "pk", account)
    return Q(account_id=pk) | Q(from_account_id=pk) | Q(to_account_id=pk)
