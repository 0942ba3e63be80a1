"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.ledger import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    Amount,
    Budget,
    BudgetHealth,
    BudgetStatus,
    CategoryTaxonomy,
    Goal,
    GoalProgress,
    LedgerStats,
    Period,
    Transaction,
    TransactionFilters,
    TransactionType,
    TrendPoint,
    as_float,
)
from finance_tracker.models.advisory import (
    AdvisoryContext,
    GoalSnapshot,
    TopExpense,
    TransactionSnapshot,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_INCOME_CATEGORIES",
    "Amount",
    "Budget",
    "BudgetHealth",
    "BudgetStatus",
    "CategoryTaxonomy",
    "Goal",
    "GoalProgress",
    "LedgerStats",
    "Period",
    "Transaction",
    "TransactionFilters",
    "TransactionType",
    "TrendPoint",
    "as_float",
    # Advisory models
    "AdvisoryContext",
    "GoalSnapshot",
    "TopExpense",
    "TransactionSnapshot",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
