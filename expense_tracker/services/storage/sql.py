"""
SQL Storage Implementation

DESIGN DECISION: A single relational table, accessed through SQLAlchemy, so
the same code runs against SQLite (default, zero setup) and PostgreSQL
(set DATABASE_URL).

Storage encodings stay in this module:
- Money is NUMERIC(10, 2) on real databases and fixed-precision decimal
  text on SQLite, which has no exact decimal type. Either way it is
  rounded half-up to cents on the way in and comes back as a Decimal.
  The input models have already checked that the rounded amount is
  positive and fits NUMERIC(10, 2), so SQLite and PostgreSQL accept
  the same amounts.
- Dates are calendar dates (YYYY-MM-DD on SQLite), returned as date.
- created_at is a naive UTC timestamp with full precision.

No operation is retried. Only the initial connect() is, so the server can
start while the database is still coming up.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterator, Optional

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    extract,
    func,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.models.expense import (
    CENT,
    Expense,
    ExpenseCategory,
    ExpenseCreate,
    ExpenseFilter,
    round_to_cents,
)
from expense_tracker.services.storage.interface import (
    ExpenseNotFoundError,
    ExpenseStorageInterface,
    StorageConnectionError,
    StorageError,
)


UPDATABLE_FIELDS = frozenset({"amount", "date", "description", "category"})

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_storage_amount(amount: Any) -> Decimal:
    """Round an amount to cents the way a NUMERIC(10, 2) column does."""
    return round_to_cents(Decimal(str(amount)))


class Money(TypeDecorator):
    """
    Fixed-precision money column.

    NUMERIC(10, 2) where the database has it, decimal text on SQLite.
    """

    impl = Numeric(10, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(16))
        return dialect.type_descriptor(Numeric(10, 2))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        amount = to_storage_amount(value)
        if dialect.name == "sqlite":
            return str(amount)
        return amount

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value)).quantize(CENT)


class ExpenseRow(Base):
    """The expenses table."""

    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Money(), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(
        Enum(
            ExpenseCategory,
            name="expense_category",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        index=True,
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )


class Database:
    """
    Owns the SQLAlchemy engine and session factory.

    Handles connection setup and provides one short-lived session per
    operation.
    """

    def __init__(self, url: str):
        self.url = url
        self._engine: Engine = self._create_engine(url)
        self._session_factory = sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
        )

    @staticmethod
    def _create_engine(url: str) -> Engine:
        if url.startswith("sqlite"):
            kwargs: dict[str, Any] = {
                "connect_args": {"check_same_thread": False},
            }
            # An in-memory database only lives as long as its connection
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            return create_engine(url, **kwargs)
        return create_engine(url, pool_pre_ping=True)

    @property
    def engine(self) -> Engine:
        return self._engine

    @retry(
        retry=retry_if_exception_type(StorageConnectionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> None:
        """
        Check the database is reachable and create the expenses table.

        Raises:
            StorageConnectionError: If the database cannot be reached
        """
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=self._engine)
        except OperationalError as e:
            raise StorageConnectionError(f"Failed to connect to database: {e}") from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session, rolling back on error and always closing it."""
        session = self._session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close all pooled connections."""
        self._engine.dispose()


class SqlExpenseStorage(ExpenseStorageInterface):
    """
    SQLAlchemy implementation of expense storage.

    Every method runs a single statement in its own session and commits.
    """

    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _row_to_expense(row: ExpenseRow) -> Expense:
        """Convert a table row to the domain model."""
        return Expense(
            id=row.id,
            amount=row.amount,
            date=row.date,
            description=row.description,
            category=row.category,
            created_at=row.created_at,
        )

    def save_expense(self, data: ExpenseCreate) -> Expense:
        """Insert a new expense row."""
        try:
            with self._db.session() as session:
                row = ExpenseRow(
                    amount=data.amount,
                    date=data.date,
                    description=data.description,
                    category=data.category,
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._row_to_expense(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save expense: {e}") from e

    def get_expense_by_id(self, expense_id: int) -> Optional[Expense]:
        """Retrieve an expense by its ID."""
        try:
            with self._db.session() as session:
                row = session.get(ExpenseRow, expense_id)
                if row is None:
                    return None
                return self._row_to_expense(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get expense: {e}") from e

    def list_expenses(self, expense_filter: Optional[ExpenseFilter] = None) -> list[Expense]:
        """List expenses matching every predicate of the filter."""
        try:
            with self._db.session() as session:
                query = session.query(ExpenseRow)
                if expense_filter is not None:
                    if expense_filter.category is not None:
                        query = query.filter(ExpenseRow.category == expense_filter.category)
                    if expense_filter.month is not None:
                        query = query.filter(
                            extract("month", ExpenseRow.date) == expense_filter.month
                        )
                    if expense_filter.year is not None:
                        query = query.filter(
                            extract("year", ExpenseRow.date) == expense_filter.year
                        )
                rows = query.order_by(ExpenseRow.date.desc(), ExpenseRow.id.desc()).all()
                return [self._row_to_expense(row) for row in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list expenses: {e}") from e

    def update_expense(self, expense_id: int, changes: dict[str, Any]) -> Expense:
        """Apply a partial update to an existing expense."""
        try:
            with self._db.session() as session:
                row = session.get(ExpenseRow, expense_id)
                if row is None:
                    raise ExpenseNotFoundError(expense_id)

                unknown = set(changes) - UPDATABLE_FIELDS
                if unknown:
                    raise ValueError(f"Cannot update fields: {sorted(unknown)}")

                if changes:
                    for field, value in changes.items():
                        setattr(row, field, value)
                    session.commit()
                    session.refresh(row)

                return self._row_to_expense(row)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update expense: {e}") from e

    def delete_expense(self, expense_id: int) -> None:
        """Delete an expense by ID. Missing IDs are ignored."""
        try:
            with self._db.session() as session:
                session.query(ExpenseRow).filter(ExpenseRow.id == expense_id).delete()
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete expense: {e}") from e
