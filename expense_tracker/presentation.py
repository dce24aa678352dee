"""
Presentation State

Everything the UI needs to know, kept out of Streamlit so it can be tested:
- the expense list (mirrors the server; replaced on every load, never merged)
- the active filter
- loading and form-visibility flags
- whether the list is showing sample data

DESIGN DECISION: If the server cannot be reached the list falls back to a
fixed sample dataset so the UI stays usable for demos. This is never
silent: demo_mode is set and the error is kept for display. Creating an
expense never falls back; a failed create is reported, not faked.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol

from expense_tracker.client import RpcError
from expense_tracker.logging_setup import get_logger
from expense_tracker.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseCreate,
    ExpenseFilter,
    ExpenseSummary,
)
from expense_tracker.queries import apply_filter, summarize


logger = get_logger(__name__)


SAMPLE_EXPENSES: tuple[Expense, ...] = (
    Expense(
        id=1,
        amount=Decimal("12.50"),
        date=date(2024, 1, 15),
        description="Coffee and pastry",
        category=ExpenseCategory.FOOD,
        created_at=datetime(2024, 1, 15),
    ),
    Expense(
        id=2,
        amount=Decimal("45.00"),
        date=date(2024, 1, 14),
        description="Gas station fill-up",
        category=ExpenseCategory.TRANSPORT,
        created_at=datetime(2024, 1, 14),
    ),
    Expense(
        id=3,
        amount=Decimal("1200.00"),
        date=date(2024, 1, 1),
        description="Monthly rent payment",
        category=ExpenseCategory.HOUSING,
        created_at=datetime(2024, 1, 1),
    ),
    Expense(
        id=4,
        amount=Decimal("25.99"),
        date=date(2024, 1, 12),
        description="Movie tickets",
        category=ExpenseCategory.ENTERTAINMENT,
        created_at=datetime(2024, 1, 12),
    ),
)


class ExpenseClient(Protocol):
    """The part of ExpenseApiClient the board uses."""

    def get_expenses(self, expense_filter: Optional[ExpenseFilter] = None) -> list[Expense]:
        ...

    def create_expense(self, data: ExpenseCreate) -> Expense:
        ...


class ExpenseBoard:
    """
    Client-local state behind the expense page.

    Flow:
    1. load_expenses() on first render
    2. set_filter() on every filter change (reloads)
    3. create_expense() from the form (prepends on success)
    """

    def __init__(self, client: ExpenseClient):
        self._client = client
        self.expenses: list[Expense] = []
        self.filter = ExpenseFilter()
        self.is_loading = False
        self.is_loading_expenses = False
        self.show_form = False
        self.demo_mode = False
        self.last_error: Optional[str] = None
        self.loaded = False

    def load_expenses(self) -> list[Expense]:
        """
        Fetch the filtered list and replace the local collection.

        On failure, switch to demo mode with the sample data filtered by
        the same rules the server uses.
        """
        self.is_loading_expenses = True
        try:
            expense_filter = None if self.filter.is_empty else self.filter
            self.expenses = list(self._client.get_expenses(expense_filter))
            self.demo_mode = False
            self.last_error = None
        except RpcError as e:
            logger.warning("expense_load_failed_using_sample_data", error=str(e))
            self.expenses = apply_filter(SAMPLE_EXPENSES, self.filter)
            self.demo_mode = True
            self.last_error = str(e)
        finally:
            self.is_loading_expenses = False
            self.loaded = True

        return self.expenses

    def set_filter(self, expense_filter: ExpenseFilter) -> list[Expense]:
        """Change the active filter and reload. Same filter = no reload."""
        if self.loaded and expense_filter == self.filter:
            return self.expenses
        self.filter = expense_filter
        return self.load_expenses()

    def create_expense(self, data: ExpenseCreate) -> Expense:
        """
        Submit a new expense.

        On success the returned record goes to the top of the list and the
        form closes. On failure the error is kept and re-raised.
        """
        self.is_loading = True
        try:
            expense = self._client.create_expense(data)
        except RpcError as e:
            logger.warning("expense_create_failed", error=str(e))
            self.last_error = str(e)
            raise
        finally:
            self.is_loading = False

        self.expenses = [expense] + self.expenses
        self.show_form = False
        self.last_error = None
        return expense

    def open_form(self) -> None:
        self.show_form = True

    def close_form(self) -> None:
        self.show_form = False

    def summary(self, today: Optional[date] = None) -> ExpenseSummary:
        """Sums over the expenses currently shown."""
        return summarize(self.expenses, today)
