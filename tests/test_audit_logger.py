"""Tests for the audit logger."""

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder, AuditEventType


class TestAuditLogger:

    def test_events_kept_in_order(self):
        logger = AuditLogger()
        logger.log_record_added("budget", "1", {"category": "Rent"})
        logger.log_record_deleted("budget", "1", True)
        assert [e.event_type for e in logger.recent_events] == [
            AuditEventType.BUDGET_ADDED,
            AuditEventType.BUDGET_DELETED,
        ]

    def test_history_is_bounded(self):
        logger = AuditLogger(history_size=3)
        for i in range(5):
            logger.log(AuditEventBuilder.record_added("goal", str(i), {}))
        assert [e.entity_id for e in logger.recent_events] == ["2", "3", "4"]

    def test_zero_history(self):
        logger = AuditLogger(history_size=0)
        logger.log_credential_updated(present=True)
        assert logger.recent_events == []

    def test_recent_events_is_a_copy(self):
        logger = AuditLogger()
        logger.log_goal_updated("7", ["current"])
        logger.recent_events.clear()
        assert len(logger.recent_events) == 1

    def test_all_severities_log(self):
        logger = AuditLogger()
        logger.log_record_deleted("goal", "missing", False)
        logger.log_storage_load_failed("goals", "bad json")
        logger.log_storage_write_failed("goals", "disk full")
        logger.log_advisory_completed("tip", 42)
        logger.log_advisory_failed("tip", "AdvisoryRequestError", "boom")
        assert len(logger.recent_events) == 5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
