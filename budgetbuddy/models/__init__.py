"""Domain models for BudgetBuddy."""

from .constants import OTHER_CATEGORY, CSV_FIELDS  # re-export
from .expense import Expense, ExpenseIn, ExpenseOut

__all__ = [
    "OTHER_CATEGORY",
    "CSV_FIELDS",
    "Expense",
    "ExpenseIn",
    "ExpenseOut",
]
