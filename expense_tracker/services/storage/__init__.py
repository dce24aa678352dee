"""
Storage Services Package

Provides the abstract storage interface and the SQLAlchemy implementation.
"""

from expense_tracker.services.storage.interface import (
    ExpenseNotFoundError,
    ExpenseStorageInterface,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from expense_tracker.services.storage.sql import (
    Database,
    ExpenseRow,
    SqlExpenseStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "ExpenseNotFoundError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # SQL implementation
    "Database",
    "ExpenseRow",
    "SqlExpenseStorage",
]
