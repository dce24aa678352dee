"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseCreate,
    ExpenseFilter,
    ExpenseSummary,
    ExpenseUpdate,
    HealthStatus,
)

__all__ = [
    "Expense",
    "ExpenseCategory",
    "ExpenseCreate",
    "ExpenseFilter",
    "ExpenseSummary",
    "ExpenseUpdate",
    "HealthStatus",
]
