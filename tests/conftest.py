"""Shared fixtures for Finance Tracker tests."""

from datetime import datetime

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.ledger import LedgerStore
from finance_tracker.services.storage import InMemoryStorage


# Saturday midday; month boundaries below are relative to this.
NOW = datetime(2026, 10, 17, 12, 0, 0)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def store(storage, audit_logger) -> LedgerStore:
    return LedgerStore(storage, audit_logger=audit_logger, clock=lambda: NOW)
