"""
Audit Models for Finance Tracker

Every ledger mutation and every advisory exchange is logged as a typed
event. This provides:
1. Traceability of what changed and when
2. Diagnostics when stored data fails to load
3. Visibility into advisory failures the UI may have hidden

DESIGN DECISION: Audit events are emitted to the structured log only.
They are never written back into the ledger's key-value store.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    BUDGET_ADDED = "budget_added"
    BUDGET_DELETED = "budget_deleted"
    GOAL_ADDED = "goal_added"
    GOAL_UPDATED = "goal_updated"
    GOAL_DELETED = "goal_deleted"
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"

    # Persistence
    STORAGE_LOAD_FAILED = "storage_load_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # Advisory
    CREDENTIAL_UPDATED = "credential_updated"
    ADVISORY_COMPLETED = "advisory_completed"
    ADVISORY_FAILED = "advisory_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'goal', 'storage')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("transaction", tx.id)
        event = AuditEventBuilder.storage_load_failed("goals", str(exc))
    """

    _ADDED = {
        "transaction": AuditEventType.TRANSACTION_ADDED,
        "budget": AuditEventType.BUDGET_ADDED,
        "goal": AuditEventType.GOAL_ADDED,
    }
    _DELETED = {
        "transaction": AuditEventType.TRANSACTION_DELETED,
        "budget": AuditEventType.BUDGET_DELETED,
        "goal": AuditEventType.GOAL_DELETED,
    }

    @staticmethod
    def record_added(
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._ADDED[entity_type],
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added",
            details=details or {},
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: str,
        found: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventBuilder._DELETED[entity_type],
            severity=AuditSeverity.INFO if found else AuditSeverity.DEBUG,
            entity_type=entity_type,
            entity_id=entity_id,
            description=(
                f"{entity_type.capitalize()} deleted"
                if found
                else f"{entity_type.capitalize()} not found; nothing deleted"
            ),
            details={"found": found},
        )

    @staticmethod
    def goal_updated(
        goal_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_UPDATED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Goal updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
        )

    @staticmethod
    def category_changed(
        type: str,
        name: str,
        added: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.CATEGORY_ADDED
                if added
                else AuditEventType.CATEGORY_DELETED
            ),
            entity_type="category",
            entity_id=f"{type}:{name}",
            description=f"{type.capitalize()} category {'added' if added else 'deleted'}: {name}",
            details={"type": type, "name": name},
        )

    @staticmethod
    def storage_load_failed(
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Could not load '{key}'; falling back to defaults",
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(
        key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not persist '{key}'",
            error_message=error_message,
        )

    @staticmethod
    def credential_updated(present: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREDENTIAL_UPDATED,
            entity_type="credential",
            description="Advisory API key stored" if present else "Advisory API key cleared",
            details={"present": present},
        )

    @staticmethod
    def advisory_completed(
        kind: str,
        response_chars: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVISORY_COMPLETED,
            entity_type="advisory",
            entity_id=kind,
            description=f"Advisory {kind} generated",
            details={"response_chars": response_chars},
        )

    @staticmethod
    def advisory_failed(
        kind: str,
        error_type: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVISORY_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="advisory",
            entity_id=kind,
            description=f"Advisory {kind} failed: {error_type}",
            error_message=error_message,
            details={"error_type": error_type},
        )
