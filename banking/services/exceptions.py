# banking/services/exceptions.py

"""
LEDGER SERVICE ERRORS

All of these are Django ValidationErrors so the API renders them as 422 with
field-level messages. Raising any of them inside a ledger service rolls the
whole operation back.
"""

from django.core.exceptions import ValidationError


class LedgerError(ValidationError):
    """Base class for ledger failures."""


class AccountResolutionError(LedgerError):
    """Raised when an expected account (e.g. Cash) cannot be found."""


class InactiveAccountError(LedgerError):
    """Raised when money would move through an archived or disabled account."""


class InsufficientBalanceError(LedgerError):
    """Raised when a transfer would overdraw its source account."""


class AlreadyVoidedError(LedgerError):
    """Raised when voiding a transaction twice."""
