"""
Shared fixtures.

Storage runs against an in-memory SQLite database, fresh for every test.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from expense_tracker.api import create_app
from expense_tracker.models.expense import ExpenseCategory, ExpenseCreate
from expense_tracker.orchestrator import ExpenseHandler
from expense_tracker.services.storage import Database, SqlExpenseStorage


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.connect()
    yield db
    db.dispose()


@pytest.fixture
def storage(database):
    return SqlExpenseStorage(database)


@pytest.fixture
def handler(storage):
    return ExpenseHandler(storage)


@pytest.fixture
def api_client(handler):
    return TestClient(create_app(handler))


@pytest.fixture
def lunch():
    return ExpenseCreate(
        amount=Decimal("29.99"),
        date=date(2024, 1, 15),
        description="Lunch",
        category=ExpenseCategory.FOOD,
    )
