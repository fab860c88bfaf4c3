# sales/services/safedrops.py

"""
SAFEDROP RESOLUTION SERVICE

Moves declared till cash (safedrops / cash on hand) from the Cash account
into the bank accounts it was actually deposited in.

Flow (one DB transaction):
1) lock the DailySale row
2) check the request fits in what is still pending for that type
3) per allocation: insert the resolution, then transfer Cash -> target
   (reference SR-<resolution id>); both account rows are locked by the ledger
4) any failure rolls everything back

Guarantees:
- resolved total (non-reversed) never exceeds the declared amount
- Cash decreases by exactly what the targets increase
- a resolution into Cash itself records no transaction (the money is
  already there)
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone

from banking.models import Account
from banking.services.exceptions import InactiveAccountError
from banking.services.ledger import get_cash_account, transfer, void_transaction
from core.lifecycle import Status
from core.money import ZERO, money, positive_money
from sales.models import DailySale, SafedropResolution

logger = logging.getLogger(__name__)

CATEGORY_SAFEDROP = "Safedrop Resolution"

TYPE_LABELS = dict(SafedropResolution.TYPE_CHOICES)


class SafedropError(ValidationError):
    """Base class for resolution failures."""


class OverAllocationError(SafedropError):
    """Raised when a resolution would exceed the pending amount."""


class AlreadyReversedError(SafedropError):
    pass


# ============================================================
# AMOUNTS
# ============================================================


def declared_amount(sale: DailySale, resolution_type: str) -> Decimal:
    if resolution_type == SafedropResolution.TYPE_CASH_IN_HAND:
        return money(sale.cash_on_hand)
    return money(sale.safedrops_amount)


def resolved_amount(sale: DailySale, resolution_type: str) -> Decimal:
    total = SafedropResolution.objects.filter(
        daily_sale=sale,
        type=resolution_type,
        reversed_at__isnull=True,
    ).aggregate(total=Sum("amount"))["total"]
    return money(total)


def pending_amount(sale: DailySale, resolution_type: str) -> Decimal:
    return declared_amount(sale, resolution_type) - resolved_amount(sale, resolution_type)


# ============================================================
# RESOLVE
# ============================================================


def _lock_sale(daily_sale_id) -> DailySale:
    try:
        return DailySale.objects.select_for_update().get(pk=daily_sale_id)
    except (DailySale.DoesNotExist, ValueError, TypeError) as exc:
        raise SafedropError({"daily_sale_id": [f"Daily sale {daily_sale_id} not found."]}) from exc


def _target_account(account_id) -> Account:
    account = Account.all_objects.filter(pk=account_id).first()
    if account is None:
        raise SafedropError({"target_account_id": [f"Bank account {account_id} not found."]})
    if account.status != Status.ACTIVE or not account.is_active:
        raise InactiveAccountError({"target_account_id": [f"{account} is not active."]})
    return account


def _description(sale: DailySale, resolution_type: str, notes: str) -> str:
    if resolution_type == SafedropResolution.TYPE_CASH_IN_HAND:
        text = f"Cash in hand resolution for {sale.date}"
    else:
        text = f"Safedrop resolution for {sale.date}"
    if notes:
        text = f"{text} - {notes}"
    return text[:255]


@transaction.atomic
def resolve_safedrops(
    *,
    daily_sale_id,
    allocations: list[dict],
    resolution_type: str = SafedropResolution.TYPE_SAFEDROPS,
    user=None,
) -> list[SafedropResolution]:
    """
    allocations: [{"account_id": ..., "amount": ..., "notes": ...}, ...]
    """
    if resolution_type not in TYPE_LABELS:
        raise SafedropError({"type": [f"Unknown resolution type {resolution_type!r}."]})
    if not allocations:
        raise SafedropError({"resolutions": ["At least one resolution is required."]})

    sale = _lock_sale(daily_sale_id)

    amounts = [positive_money(a.get("amount")) for a in allocations]
    requested = sum(amounts, ZERO)
    pending = pending_amount(sale, resolution_type)

    if requested > pending:
        raise OverAllocationError(
            {
                "amount": [
                    f"Resolving {requested} exceeds the pending "
                    f"{TYPE_LABELS[resolution_type].lower()} amount of {max(pending, ZERO)}."
                ]
            }
        )

    cash = get_cash_account()
    created = []

    for alloc, amt in zip(allocations, amounts):
        account = _target_account(alloc.get("account_id"))
        notes = (alloc.get("notes") or "").strip()

        resolution = SafedropResolution.objects.create(
            daily_sale=sale,
            account=account,
            user=user,
            amount=amt,
            type=resolution_type,
            notes=notes,
        )

        if account.pk != cash.pk:
            resolution.transaction = transfer(
                from_account=cash,
                to_account=account,
                amount=amt,
                description=_description(sale, resolution_type, notes),
                category=CATEGORY_SAFEDROP,
                reference_number=resolution.reference_number,
                allow_overdraft=True,
                user=user,
            )
            resolution.save(update_fields=["transaction"])

        logger.info(
            "safedrop resolved",
            extra={
                "resolution_id": resolution.pk,
                "daily_sale_id": sale.pk,
                "type": resolution_type,
                "amount": str(amt),
                "account_id": account.pk,
                "transaction_id": resolution.transaction_id,
            },
        )
        created.append(resolution)

    return created


def resolve(
    *,
    daily_sale_id,
    target_account_id,
    amount,
    resolution_type: str = SafedropResolution.TYPE_SAFEDROPS,
    notes: str = "",
    user=None,
) -> SafedropResolution:
    """Single-target form of resolve_safedrops()."""
    return resolve_safedrops(
        daily_sale_id=daily_sale_id,
        allocations=[{"account_id": target_account_id, "amount": amount, "notes": notes}],
        resolution_type=resolution_type,
        user=user,
    )[0]


# ============================================================
# AMEND
# ============================================================

DECLARED_FIELDS = {
    "safedrops_amount": SafedropResolution.TYPE_SAFEDROPS,
    "cash_on_hand": SafedropResolution.TYPE_CASH_IN_HAND,
}


@transaction.atomic
def amend_daily_sale(*, sale, data: dict) -> DailySale:
    """
    Writes an edit to a daily sale under the same row lock resolutions take.

    Rules:
    - a declared amount cannot drop below what is already resolved against it
    - only the edited columns are written
    """
    locked = _lock_sale(getattr(sale, "pk", sale))

    for field, resolution_type in DECLARED_FIELDS.items():
        if field not in data:
            continue
        resolved = resolved_amount(locked, resolution_type)
        if money(data[field], field=field) < resolved:
            raise OverAllocationError(
                {
                    field: [
                        f"{resolved} has already been resolved against this "
                        f"{TYPE_LABELS[resolution_type].lower()} amount; "
                        "reverse resolutions before lowering it."
                    ]
                }
            )

    for attr, value in data.items():
        setattr(locked, attr, value)
    locked.save(update_fields=[*data, "updated_at"])
    return locked


# ============================================================
# REVERSE
# ============================================================


@transaction.atomic
def reverse_resolution(*, resolution, user=None) -> SafedropResolution:
    """
    Void the mirrored transfer (both balances restored) and stamp
    reversed_at. The resolution row itself stays for audit.
    """
    resolution = SafedropResolution.objects.select_for_update().get(
        pk=getattr(resolution, "pk", resolution)
    )
    if resolution.is_reversed:
        raise AlreadyReversedError("Resolution has already been reversed.")

    if resolution.transaction_id:
        void_transaction(resolution.transaction_id, user=user)

    resolution.reversed_at = timezone.now()
    resolution.save(update_fields=["reversed_at"])

    logger.info(
        "safedrop resolution reversed",
        extra={
            "resolution_id": resolution.pk,
            "daily_sale_id": resolution.daily_sale_id,
            "amount": str(resolution.amount),
            "reversed_by": str(getattr(user, "pk", "") or ""),
        },
    )
    return resolution


# ============================================================
# READS
# ============================================================


def _visible_sales(user):
    qs = DailySale.objects.select_related("user")
    if user is not None and not user.is_admin:
        qs = qs.filter(user=user)
    return qs


def pending_resolutions(user=None) -> list[dict]:
    """
    Daily sales with a non-zero pending safedrop or cash-in-hand amount,
    newest first.
    """
    live = Q(safedrop_resolutions__reversed_at__isnull=True)
    qs = (
        _visible_sales(user)
        .filter(~Q(safedrops_amount=ZERO) | ~Q(cash_on_hand=ZERO))
        .annotate(
            resolved_safedrops=Sum(
                "safedrop_resolutions__amount",
                filter=live & Q(safedrop_resolutions__type=SafedropResolution.TYPE_SAFEDROPS),
            ),
            resolved_cash_in_hand=Sum(
                "safedrop_resolutions__amount",
                filter=live & Q(safedrop_resolutions__type=SafedropResolution.TYPE_CASH_IN_HAND),
            ),
        )
        .order_by("-date")
    )

    items = []
    for sale in qs:
        safedrops = _bucket(sale.safedrops_amount, sale.resolved_safedrops)
        cash_in_hand = _bucket(sale.cash_on_hand, sale.resolved_cash_in_hand)
        if safedrops["pending_amount"] == ZERO and cash_in_hand["pending_amount"] == ZERO:
            continue
        items.append(
            {
                "id": sale.pk,
                "date": sale.date,
                "user": getattr(sale.user, "email", None),
                "safedrops": safedrops,
                "cash_in_hand": cash_in_hand,
            }
        )
    return items


def _bucket(total, resolved) -> dict:
    total = money(total)
    resolved = money(resolved)
    return {
        "total_amount": total,
        "resolved_amount": resolved,
        "pending_amount": total - resolved,
    }


def resolution_history(user=None):
    qs = SafedropResolution.objects.select_related("daily_sale", "account", "user", "transaction")
    if user is not None and not user.is_admin:
        qs = qs.filter(user=user)
    return qs.order_by("-created_at", "-pk")
