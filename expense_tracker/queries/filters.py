"""
In-Memory Filtering and Sums

DESIGN DECISION: The list filter has exactly one definition of "matches".
Storage expresses it in SQL; this module expresses the same rules in
Python for data that is already in memory (the UI's sample data).

- category: exact match
- month: calendar month of the expense date, any year
- year: calendar year of the expense date, any month
- all given predicates must hold
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from expense_tracker.models.expense import (
    Expense,
    ExpenseFilter,
    ExpenseSummary,
)


def matches_filter(expense: Expense, expense_filter: Optional[ExpenseFilter]) -> bool:
    """Check one expense against every predicate of the filter."""
    if expense_filter is None:
        return True
    if expense_filter.category is not None and expense.category != expense_filter.category:
        return False
    if expense_filter.month is not None and expense.date.month != expense_filter.month:
        return False
    if expense_filter.year is not None and expense.date.year != expense_filter.year:
        return False
    return True


def apply_filter(
    expenses: Iterable[Expense],
    expense_filter: Optional[ExpenseFilter],
) -> list[Expense]:
    """Return the expenses that match the filter, keeping their order."""
    return [expense for expense in expenses if matches_filter(expense, expense_filter)]


def summarize(expenses: list[Expense], today: Optional[date] = None) -> ExpenseSummary:
    """
    Total, this-month total and count for a list of expenses.

    Args:
        expenses: The expenses to sum
        today: Reference day for "this month" (defaults to today)
    """
    today = today or date.today()

    total = sum((expense.amount for expense in expenses), Decimal("0.00"))
    this_month = sum(
        (
            expense.amount
            for expense in expenses
            if expense.date.year == today.year and expense.date.month == today.month
        ),
        Decimal("0.00"),
    )

    return ExpenseSummary(
        total_amount=total,
        this_month_amount=this_month,
        transaction_count=len(expenses),
    )
