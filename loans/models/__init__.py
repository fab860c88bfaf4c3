# loans/models/__init__.py

from loans.models.loan import Loan

__all__ = ["Loan"]
