"""Tests for in-memory filtering and sums."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from expense_tracker.models.expense import Expense, ExpenseCategory, ExpenseFilter
from expense_tracker.queries import apply_filter, matches_filter, summarize


def _expense(expense_id, amount, on, category=ExpenseCategory.FOOD):
    return Expense(
        id=expense_id,
        amount=Decimal(amount),
        date=on,
        description=f"expense {expense_id}",
        category=category,
        created_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def expenses():
    return [
        _expense(1, "10.00", date(2024, 5, 3)),
        _expense(2, "20.50", date(2024, 5, 20), ExpenseCategory.SHOPPING),
        _expense(3, "5.25", date(2023, 5, 1)),
        _expense(4, "100.00", date(2024, 4, 30), ExpenseCategory.UTILITIES),
    ]


class TestMatchesFilter:

    def test_none_matches_everything(self, expenses):
        assert all(matches_filter(e, None) for e in expenses)

    def test_empty_filter_matches_everything(self, expenses):
        assert all(matches_filter(e, ExpenseFilter()) for e in expenses)

    def test_category(self, expenses):
        expense_filter = ExpenseFilter(category=ExpenseCategory.SHOPPING)
        assert [e.id for e in expenses if matches_filter(e, expense_filter)] == [2]

    def test_month_ignores_year(self, expenses):
        expense_filter = ExpenseFilter(month=5)
        assert [e.id for e in expenses if matches_filter(e, expense_filter)] == [1, 2, 3]

    def test_all_predicates_must_hold(self, expenses):
        expense_filter = ExpenseFilter(category=ExpenseCategory.FOOD, month=5, year=2023)
        assert [e.id for e in expenses if matches_filter(e, expense_filter)] == [3]


class TestApplyFilter:

    def test_keeps_order(self, expenses):
        result = apply_filter(reversed(expenses), ExpenseFilter(year=2024))
        assert [e.id for e in result] == [4, 2, 1]

    def test_no_match_is_empty(self, expenses):
        assert apply_filter(expenses, ExpenseFilter(category=ExpenseCategory.SALARY)) == []


class TestSummarize:

    def test_totals(self, expenses):
        summary = summarize(expenses, today=date(2024, 5, 25))
        assert summary.total_amount == Decimal("135.75")
        assert summary.this_month_amount == Decimal("30.50")
        assert summary.transaction_count == 4

    def test_this_month_respects_year(self, expenses):
        summary = summarize(expenses, today=date(2023, 5, 10))
        assert summary.this_month_amount == Decimal("5.25")

    def test_empty(self):
        summary = summarize([], today=date(2024, 1, 1))
        assert summary.total_amount == Decimal("0")
        assert summary.transaction_count == 0
