# expenses/models/__init__.py

from expenses.models.expense_type import ExpenseType

__all__ = ["ExpenseType"]
