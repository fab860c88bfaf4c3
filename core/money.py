# core/money.py

"""
MONEY HELPERS

All currency math in this project is Decimal, quantized to cents with
ROUND_HALF_UP. Floats never touch a balance.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError

TWOPLACES = Decimal("0.01")
THREEPLACES = Decimal("0.001")
ZERO = Decimal("0.00")


def money(value, *, field: str = "amount") -> Decimal:
    if value is None or value == "":
        return ZERO

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValidationError({field: [f"Invalid money value: {value!r}"]}) from exc

    if not amt.is_finite():
        raise ValidationError({field: [f"Invalid money value: {value!r}"]})

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def positive_money(value, *, field: str = "amount") -> Decimal:
    amt = money(value, field=field)
    if amt <= ZERO:
        raise ValidationError({field: ["Amount must be greater than 0."]})
    return amt


def price(value) -> Decimal | None:
    """Fuel prices carry three decimals; None stays None."""
    if value is None or value == "":
        return None
    return Decimal(str(value)).quantize(THREEPLACES, rounding=ROUND_HALF_UP)
