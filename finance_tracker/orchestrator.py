"""
Application Wiring for Finance Tracker

This module builds the components the UI layer works with:
1. A key-value storage backend
2. The ledger store (loaded once, at startup)
3. The advisory client, sharing the same storage for its API key

DESIGN DECISION: There is no global store. create_app_components()
returns the objects, and the caller hands them to whatever needs them.
Their lifetime is the process lifetime.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from finance_tracker.agents import AdvisoryClient
from finance_tracker.audit import AuditLogger
from finance_tracker.config import get_settings
from finance_tracker.ledger import LedgerStore
from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
)


@dataclass
class AppComponents:
    """Everything the UI layer needs, constructed once."""

    storage: KeyValueStorage
    store: LedgerStore
    advisor: AdvisoryClient
    audit_logger: AuditLogger


def create_app_components(
    storage: Optional[KeyValueStorage] = None,
    use_storage: bool = True,
    clock: Optional[Callable[[], datetime]] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage: Backend to use. Defaults to the configured JSON file.
        use_storage: Set to False for an in-memory, throwaway session.
        clock: "Now" provider for period queries (tests).

    Returns:
        AppComponents with a loaded ledger store and an advisory client
    """
    settings = get_settings()
    storage_settings = settings.storage
    app_settings = settings.app

    if storage is None:
        if use_storage:
            storage = JsonFileStorage(storage_settings.path)
        else:
            storage = InMemoryStorage()

    audit_logger = AuditLogger()

    store = LedgerStore(
        storage,
        audit_logger=audit_logger,
        clock=clock,
        budget_warning_percent=app_settings.budget_warning_percent,
        trend_months=app_settings.trend_months,
    )

    advisor = AdvisoryClient(
        store,
        storage,
        settings=settings.gemini,
        audit_logger=audit_logger,
        credential_key=storage_settings.credential_key,
    )

    return AppComponents(
        storage=storage,
        store=store,
        advisor=advisor,
        audit_logger=audit_logger,
    )
