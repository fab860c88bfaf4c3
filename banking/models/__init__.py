# banking/models/__init__.py

from banking.models.account import Account
from banking.models.transaction import Transaction

__all__ = ["Account", "Transaction"]
