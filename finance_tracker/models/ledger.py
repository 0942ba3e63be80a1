"""
Core Data Models for Finance Tracker

These models define the fixed-field records held by the ledger store:
transactions, budgets, savings goals and the category taxonomy, plus
the read-only views derived from them.

DESIGN DECISION: Amounts are kept exactly as supplied (int, float or
numeric string) so that persisted data round-trips unchanged. Arithmetic
happens on float conversions at query time; no decimal guarantees.
"""

import math
from datetime import date
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


# Field names below shadow the type, so keep a stable alias for annotations.
CalendarDate = date


# =============================================================================
# AMOUNTS
# =============================================================================

def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("Amount must be a number or numeric string, not a boolean")
    return value


def _check_numeric(value: Union[int, float, str]) -> Union[int, float, str]:
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"Amount is not numeric: {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"Amount must be finite: {value!r}")
    return value


Amount = Annotated[
    Union[int, float, str],
    BeforeValidator(_reject_bool),
    AfterValidator(_check_numeric),
]


def as_float(value: Union[int, float, str]) -> float:
    """Numeric value of a stored amount."""
    return float(value)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"


class Period(str, Enum):
    """
    Named relative-date windows used to scope queries.

    Filters accept plain strings; values outside this set match everything.
    """
    TODAY = "today"
    WEEK = "week"        # rolling last 7 days, not an ISO week
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class BudgetHealth(str, Enum):
    """Budget status band for the current month."""
    ON_TRACK = "on_track"
    WARNING = "warning"
    OVER_BUDGET = "over_budget"


DEFAULT_INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investment",
    "Business",
    "Gift",
    "Other Income",
]

DEFAULT_EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Rent",
    "Other Expense",
]


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Immutable once created. The only way to change a transaction is
    to delete it and add a new one.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Time-based id assigned by the store"
    )
    type: TransactionType
    amount: Amount
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category label; not checked against the taxonomy"
    )
    description: str = Field(
        default="",
        max_length=500
    )
    date: CalendarDate = Field(
        ...,
        description="Calendar date of the transaction"
    )


class Budget(BaseModel):
    """Monthly spending limit for an expense category."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    amount: Amount


class Goal(BaseModel):
    """
    A savings goal.

    Changed only through the store's partial update, which replaces
    the record with a merged copy.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    target: Amount
    current: Amount = 0
    deadline: Optional[CalendarDate] = None


class CategoryTaxonomy(BaseModel):
    """
    Ordered, type-partitioned category labels.

    Display order is insertion order. Duplicates are dropped on load.
    """

    income: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCOME_CATEGORIES)
    )
    expense: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES)
    )

    @field_validator('income', 'expense')
    @classmethod
    def drop_duplicates(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    def for_type(self, type: Union[TransactionType, str]) -> list[str]:
        """The list for a transaction type (the live list, not a copy)."""
        return getattr(self, TransactionType(type).value)


# =============================================================================
# QUERY MODELS
# =============================================================================

class TransactionFilters(BaseModel):
    """
    Independently combinable transaction filters (logical AND).

    None or "all" disables a filter.
    """

    type: Optional[str] = None
    category: Optional[str] = None
    period: Optional[str] = None

    @field_validator('type', 'period', mode='before')
    @classmethod
    def unwrap_enum(cls, v: Any) -> Any:
        return v.value if isinstance(v, Enum) else v


class CamelModel(BaseModel):
    """Derived views serialize with camelCase keys for the UI and the advisor."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LedgerStats(CamelModel):
    """Totals for one period plus average goal progress."""

    income: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0
    avg_goal_progress: float = Field(default=0.0, ge=0.0, le=100.0)


class TrendPoint(CamelModel):
    """Income and expenses for one calendar month."""

    month_label: str = Field(..., description="e.g. 'Oct 2026'")
    income: float = 0.0
    expenses: float = 0.0


class BudgetStatus(CamelModel):
    """Current-month spending against one budget."""

    budget: Budget
    spent: float
    remaining: float
    percentage: float
    health: BudgetHealth


class GoalProgress(CamelModel):
    """Progress figures for one savings goal."""

    goal: Goal
    percentage: float
    capped_percentage: float = Field(..., ge=0.0, le=100.0)
    remaining: float
