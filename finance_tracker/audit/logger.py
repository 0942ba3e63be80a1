"""
Audit Logger

DESIGN DECISION: Every ledger mutation and advisory exchange is logged.
This provides:
1. Traceability of every change to the ledger
2. Diagnostics for storage that failed to load or save
3. A record of advisory failures

The audit logger:
- Is synchronous, like the ledger store that calls it
- Keeps a short in-memory history for diagnostics
"""

from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Emits typed audit events to the structured local log and keeps the
    most recent ones in memory for inspection.
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("finance_tracker.audit")
        self._history: list[AuditEvent] = []
        self._history_size = max(0, history_size)

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        if self._history_size:
            self._history.append(event)
            del self._history[:-self._history_size]

        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_record_added(
        self,
        entity_type: str,
        entity_id: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log creation of a transaction, budget or goal."""
        self.log(AuditEventBuilder.record_added(entity_type, entity_id, details))

    def log_record_deleted(
        self,
        entity_type: str,
        entity_id: str,
        found: bool,
    ) -> None:
        """Log deletion (or a no-op delete) of a record."""
        self.log(AuditEventBuilder.record_deleted(entity_type, entity_id, found))

    def log_goal_updated(self, goal_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.goal_updated(goal_id, fields))

    def log_category_changed(self, type: str, name: str, added: bool) -> None:
        self.log(AuditEventBuilder.category_changed(type, name, added))

    def log_storage_load_failed(self, key: str, error_message: str) -> None:
        """Log a key that could not be read or decoded."""
        self.log(AuditEventBuilder.storage_load_failed(key, error_message))

    def log_storage_write_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_write_failed(key, error_message))

    def log_credential_updated(self, present: bool) -> None:
        self.log(AuditEventBuilder.credential_updated(present))

    def log_advisory_completed(self, kind: str, response_chars: int) -> None:
        self.log(AuditEventBuilder.advisory_completed(kind, response_chars))

    def log_advisory_failed(
        self,
        kind: str,
        error_type: str,
        error_message: str,
    ) -> None:
        """Log an advisory call that failed before returning text."""
        self.log(AuditEventBuilder.advisory_failed(kind, error_type, error_message))
