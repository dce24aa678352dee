"""
Core Data Models for Expense Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce the expense invariants at the boundary
2. Provide clear, per-field validation error messages
3. Be serializable for the RPC surface

DESIGN DECISION: Money is a Decimal everywhere inside the system.
It only becomes a float when it is written out as JSON.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


CENT = Decimal("0.01")

# Largest value a NUMERIC(10, 2) column holds
MAX_AMOUNT = Decimal("99999999.99")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round half-up to 2 decimal places. The one rounding rule for money."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _check_storable_amount(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is not None and round_to_cents(v) <= 0:
        raise ValueError(f"Amount {v} rounds to 0.00; the smallest amount is 0.01")
    return v


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: Using explicit categories rather than free text ensures
    consistent categorization and enables reliable filtering.
    The values are the labels users see.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    HOUSING = "Housing"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    SHOPPING = "Shopping"
    SALARY = "Salary"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A stored expense.

    This is what every read and write operation returns.
    `id` and `created_at` are assigned by storage and never change.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(
        ...,
        description="Storage-assigned expense ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount, rounded to 2 decimal places by storage"
    )
    date: dt.date = Field(
        ...,
        description="Day the expense occurred"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    created_at: dt.datetime = Field(
        ...,
        description="When the expense was recorded (UTC)"
    )

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, v: Decimal) -> float:
        return float(v)


# =============================================================================
# OPERATION INPUTS
# =============================================================================

class ExpenseCreate(BaseModel):
    """
    Input for recording a new expense.

    The amount is accepted with any precision as long as it is still
    positive once storage rounds it to cents, and fits NUMERIC(10, 2).
    """

    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        description="Amount spent (must be positive)"
    )
    date: dt.date = Field(
        ...,
        description="Day the expense occurred"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Decimal) -> Decimal:
        """Reject amounts that would be stored as 0.00."""
        return _check_storable_amount(v)


class ExpenseUpdate(BaseModel):
    """
    Input for a partial update.

    Only `id` is required. Fields that are left out (or sent as null)
    are not touched.
    """

    id: int = Field(
        ...,
        description="ID of the expense to update"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        le=MAX_AMOUNT,
    )
    date: Optional[dt.date] = None
    description: Optional[str] = Field(
        default=None,
        min_length=1,
    )
    category: Optional[ExpenseCategory] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _check_storable_amount(v)

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually supplied, without the id."""
        return self.model_dump(
            exclude={"id"},
            exclude_unset=True,
            exclude_none=True,
        )


class ExpenseFilter(BaseModel):
    """
    Conjunctive filter for listing expenses.

    Month and year are matched against the expense date independently,
    so month alone matches that month in every year.
    """

    category: Optional[ExpenseCategory] = None
    month: Optional[int] = Field(
        default=None,
        ge=1,
        le=12,
        description="Calendar month, 1-12"
    )
    year: Optional[int] = Field(
        default=None,
        ge=1900,
        description="Calendar year"
    )

    @property
    def is_empty(self) -> bool:
        """True when no predicate is set."""
        return self.category is None and self.month is None and self.year is None


# =============================================================================
# RPC RESPONSES
# =============================================================================

class HealthStatus(BaseModel):
    """Liveness probe response."""

    status: str = "ok"
    timestamp: str = Field(
        ...,
        description="Server time as an ISO 8601 string"
    )


# =============================================================================
# SUMMARY MODELS (for the UI header)
# =============================================================================

class ExpenseSummary(BaseModel):
    """Simple sums over the expenses currently shown."""

    total_amount: Decimal = Field(
        default=Decimal("0.00"),
        description="Sum of all listed amounts"
    )
    this_month_amount: Decimal = Field(
        default=Decimal("0.00"),
        description="Sum of listed amounts dated in the current month"
    )
    transaction_count: int = Field(
        default=0,
        ge=0,
    )
