"""Services package."""

from expense_tracker.services.storage import (
    Database,
    ExpenseNotFoundError,
    ExpenseStorageInterface,
    NotFoundError,
    SqlExpenseStorage,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "Database",
    "ExpenseNotFoundError",
    "ExpenseStorageInterface",
    "NotFoundError",
    "SqlExpenseStorage",
    "StorageConnectionError",
    "StorageError",
]
