"""
Main Orchestrator for Expense Tracker

This module ties the storage layer to the five expense operations:
create, get-by-id, list (filtered), update (partial) and delete.

DESIGN DECISION: Handlers are thin and stateless.
- Inputs arrive already validated (pydantic models)
- Each operation is a single storage call
- Errors are logged and passed through, never swallowed
- The only "absence is fine" rules: get-by-id returns None and
  delete of a missing ID is a no-op
"""

from typing import Optional

from expense_tracker.config import get_settings
from expense_tracker.logging_setup import get_logger
from expense_tracker.models.expense import (
    Expense,
    ExpenseCreate,
    ExpenseFilter,
    ExpenseUpdate,
)
from expense_tracker.services.storage import (
    Database,
    ExpenseNotFoundError,
    ExpenseStorageInterface,
    SqlExpenseStorage,
    StorageError,
)


logger = get_logger(__name__)


class ExpenseHandler:
    """
    Orchestrates the expense operations.

    One method per operation; nothing is kept between calls.
    """

    def __init__(self, storage: ExpenseStorageInterface):
        self._storage = storage

    def create_expense(self, data: ExpenseCreate) -> Expense:
        """
        Record a new expense.

        Returns:
            The stored expense with id and created_at assigned.
            The amount reflects storage rounding to cents.
        """
        try:
            expense = self._storage.save_expense(data)
        except StorageError as e:
            logger.error("expense_create_failed", error=str(e))
            raise

        logger.info(
            "expense_created",
            expense_id=expense.id,
            amount=str(expense.amount),
            category=expense.category.value,
        )
        return expense

    def get_expense_by_id(self, expense_id: int) -> Optional[Expense]:
        """Look up one expense. Returns None when it does not exist."""
        try:
            return self._storage.get_expense_by_id(expense_id)
        except StorageError as e:
            logger.error("expense_get_failed", expense_id=expense_id, error=str(e))
            raise

    def get_expenses(self, expense_filter: Optional[ExpenseFilter] = None) -> list[Expense]:
        """
        List expenses.

        An empty or missing filter lists everything. Otherwise every
        supplied predicate must match.
        """
        if expense_filter is not None and expense_filter.is_empty:
            expense_filter = None

        try:
            expenses = self._storage.list_expenses(expense_filter)
        except StorageError as e:
            logger.error("expense_list_failed", error=str(e))
            raise

        logger.debug(
            "expenses_listed",
            filter=expense_filter.model_dump(mode="json") if expense_filter else None,
            result_count=len(expenses),
        )
        return expenses

    def update_expense(self, data: ExpenseUpdate) -> Expense:
        """
        Update the supplied fields of an expense.

        With no fields supplied, the current record is returned unchanged.

        Raises:
            ExpenseNotFoundError: If no expense has this ID
        """
        changes = data.changes()

        try:
            expense = self._storage.update_expense(data.id, changes)
        except ExpenseNotFoundError:
            logger.warning("expense_update_not_found", expense_id=data.id)
            raise
        except StorageError as e:
            logger.error("expense_update_failed", expense_id=data.id, error=str(e))
            raise

        if changes:
            logger.info(
                "expense_updated",
                expense_id=expense.id,
                fields=sorted(changes),
            )
        return expense

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense. Deleting a missing ID is a no-op."""
        try:
            self._storage.delete_expense(expense_id)
        except StorageError as e:
            logger.error("expense_delete_failed", expense_id=expense_id, error=str(e))
            raise

        logger.info("expense_deleted", expense_id=expense_id)


def create_app_components(
    database_url: Optional[str] = None,
) -> tuple[ExpenseHandler, Database]:
    """
    Factory function to create the handler and its database.

    Args:
        database_url: SQLAlchemy URL. Defaults to DATABASE_URL from settings.

    Returns:
        (expense_handler, database)

    Raises:
        StorageConnectionError: If the database stays unreachable
    """
    url = database_url or get_settings().server.database_url

    database = Database(url)
    database.connect()

    handler = ExpenseHandler(SqlExpenseStorage(database))
    return handler, database
