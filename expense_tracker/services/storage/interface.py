"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap SQLite for PostgreSQL (or anything else) without touching handlers
2. Keep the storage encoding of money and dates out of business logic

The interface is intentionally simple - one table, five operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from expense_tracker.models.expense import (
    Expense,
    ExpenseCreate,
    ExpenseFilter,
)


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Any storage implementation must implement these methods.
    Implementations never return storage encodings: amounts come back as
    Decimal, dates as date.
    """

    @abstractmethod
    def save_expense(self, data: ExpenseCreate) -> Expense:
        """
        Insert a new expense.

        Args:
            data: Validated create input

        Returns:
            The stored expense, with id and created_at assigned

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    def get_expense_by_id(self, expense_id: int) -> Optional[Expense]:
        """
        Retrieve an expense by its ID.

        Returns:
            The expense if found, None otherwise
        """
        pass

    @abstractmethod
    def list_expenses(self, expense_filter: Optional[ExpenseFilter] = None) -> list[Expense]:
        """
        List expenses matching every predicate of the filter.

        Args:
            expense_filter: Category/month/year predicates. None or an
                            empty filter returns every expense.

        Returns:
            Matching expenses, newest date first
        """
        pass

    @abstractmethod
    def update_expense(self, expense_id: int, changes: dict[str, Any]) -> Expense:
        """
        Apply a partial update.

        Args:
            expense_id: ID of the expense to update
            changes: Field name to new value. Empty means no change.

        Returns:
            The expense as stored after the update

        Raises:
            ExpenseNotFoundError: If the expense doesn't exist
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    def delete_expense(self, expense_id: int) -> None:
        """
        Delete an expense by ID.

        Deleting an ID that does not exist is not an error.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ExpenseNotFoundError(NotFoundError):
    """No expense with the requested ID."""

    def __init__(self, expense_id: int):
        self.expense_id = expense_id
        super().__init__(f"Expense with id {expense_id} not found")


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
