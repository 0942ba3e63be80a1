"""Ledger store package."""

from finance_tracker.ledger.store import (
    BUDGETS_KEY,
    CATEGORIES_KEY,
    GOALS_KEY,
    TRANSACTIONS_KEY,
    LedgerStore,
)

__all__ = [
    "BUDGETS_KEY",
    "CATEGORIES_KEY",
    "GOALS_KEY",
    "TRANSACTIONS_KEY",
    "LedgerStore",
]
