"""BudgetBuddy: personal expense tracking API."""

__version__ = "0.1.0"
