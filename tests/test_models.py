"""
Tests for Finance Tracker models

Test strategy:
1. Unit tests for individual components (models, store, storage)
2. Advisory tests with a mocked HTTP transport
3. No real API calls in tests
"""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from finance_tracker.models.advisory import (
    AdvisoryContext,
    TopExpense,
    TransactionSnapshot,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from finance_tracker.models.ledger import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    Budget,
    CategoryTaxonomy,
    Goal,
    LedgerStats,
    Period,
    Transaction,
    TransactionFilters,
    TransactionType,
    TrendPoint,
)


class TestTransactionModel:
    """Tests for the Transaction record."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        tx = Transaction(
            id="1",
            type="expense",
            amount=42.5,
            category="Food & Dining",
            description="Lunch",
            date=date(2026, 10, 3),
        )
        assert tx.type == TransactionType.EXPENSE
        assert tx.amount == 42.5
        assert tx.date == date(2026, 10, 3)

    def test_transaction_keeps_string_amount(self):
        """Numeric strings are kept as strings."""
        tx = Transaction(
            id="1", type="income", amount="5000", category="Salary",
            date=date(2026, 10, 1),
        )
        assert tx.amount == "5000"

    def test_transaction_keeps_int_amount(self):
        tx = Transaction(
            id="1", type="income", amount=5000, category="Salary",
            date=date(2026, 10, 1),
        )
        assert tx.amount == 5000
        assert isinstance(tx.amount, int)

    def test_transaction_description_defaults_empty(self):
        tx = Transaction(
            id="1", type="income", amount=1, category="Gift",
            date=date(2026, 10, 1),
        )
        assert tx.description == ""

    def test_transaction_strips_whitespace(self):
        tx = Transaction(
            id="1", type="expense", amount=1, category="  Rent  ",
            date=date(2026, 10, 1),
        )
        assert tx.category == "Rent"

    def test_transaction_rejects_non_numeric_amount(self):
        """Test that non-numeric amounts are rejected."""
        with pytest.raises(ValidationError, match="not numeric"):
            Transaction(
                id="1", type="expense", amount="lots", category="Rent",
                date=date(2026, 10, 1),
            )

    def test_transaction_rejects_non_finite_amount(self):
        with pytest.raises(ValidationError, match="finite"):
            Transaction(
                id="1", type="expense", amount="inf", category="Rent",
                date=date(2026, 10, 1),
            )

    def test_transaction_rejects_boolean_amount(self):
        with pytest.raises(ValidationError):
            Transaction(
                id="1", type="expense", amount=True, category="Rent",
                date=date(2026, 10, 1),
            )

    def test_transaction_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Transaction(
                id="1", type="transfer", amount=1, category="Rent",
                date=date(2026, 10, 1),
            )

    def test_transaction_requires_date(self):
        with pytest.raises(ValidationError):
            Transaction(id="1", type="expense", amount=1, category="Rent")

    def test_transaction_is_frozen(self):
        tx = Transaction(
            id="1", type="expense", amount=1, category="Rent",
            date=date(2026, 10, 1),
        )
        with pytest.raises(ValidationError):
            tx.amount = 2

    def test_transaction_parses_iso_date_string(self):
        tx = Transaction(
            id="1", type="expense", amount=1, category="Rent",
            date="2026-10-01",
        )
        assert tx.date == date(2026, 10, 1)


class TestBudgetAndGoalModels:
    """Tests for Budget and Goal records."""

    def test_budget_creation(self):
        budget = Budget(id="1", category="Shopping", amount="300")
        assert budget.amount == "300"

    def test_goal_defaults(self):
        goal = Goal(id="1", name="Emergency fund", target=1000)
        assert goal.current == 0
        assert goal.deadline is None

    def test_goal_requires_name(self):
        with pytest.raises(ValidationError):
            Goal(id="1", name="", target=1000)

    def test_goal_optional_deadline(self):
        goal = Goal(id="1", name="Car", target=5000, deadline="2027-06-30")
        assert goal.deadline == date(2027, 6, 30)


class TestCategoryTaxonomy:
    """Tests for the category taxonomy."""

    def test_defaults(self):
        taxonomy = CategoryTaxonomy()
        assert taxonomy.income == DEFAULT_INCOME_CATEGORIES
        assert taxonomy.expense == DEFAULT_EXPENSE_CATEGORIES

    def test_defaults_are_independent_copies(self):
        a = CategoryTaxonomy()
        b = CategoryTaxonomy()
        a.expense.append("Pets")
        assert "Pets" not in b.expense
        assert "Pets" not in DEFAULT_EXPENSE_CATEGORIES

    def test_duplicates_dropped_preserving_order(self):
        taxonomy = CategoryTaxonomy(income=["B", "A", "B"], expense=["X"])
        assert taxonomy.income == ["B", "A"]

    def test_for_type(self):
        taxonomy = CategoryTaxonomy()
        assert taxonomy.for_type("income") is taxonomy.income
        assert taxonomy.for_type(TransactionType.EXPENSE) is taxonomy.expense

    def test_for_type_rejects_unknown(self):
        with pytest.raises(ValueError):
            CategoryTaxonomy().for_type("transfer")


class TestViewModels:
    """Tests for derived views and the advisory context."""

    def test_filters_accept_enums(self):
        filters = TransactionFilters(type=TransactionType.INCOME, period=Period.WEEK)
        assert filters.type == "income"
        assert filters.period == "week"

    def test_stats_serialize_camel_case(self):
        stats = LedgerStats(income=10, expenses=4, balance=6, avg_goal_progress=50)
        dumped = stats.model_dump(by_alias=True)
        assert dumped["avgGoalProgress"] == 50
        assert "avg_goal_progress" not in dumped

    def test_trend_point_alias(self):
        point = TrendPoint(month_label="Oct 2026", income=1, expenses=2)
        assert point.model_dump(by_alias=True)["monthLabel"] == "Oct 2026"

    def test_stats_reject_progress_over_100(self):
        with pytest.raises(ValidationError):
            LedgerStats(avg_goal_progress=150)

    def test_advisory_context_prompt_json(self):
        context = AdvisoryContext(
            current_month_stats=LedgerStats(income=100, expenses=40, balance=60),
            top_expenses=[TopExpense(category="Rent", amount=40)],
            recent_transactions=[
                TransactionSnapshot(
                    date=date(2026, 10, 2),
                    type="expense",
                    category="Rent",
                    amount="40",
                    description="October rent",
                ),
            ],
        )
        payload = json.loads(context.to_prompt_json())
        assert set(payload) == {
            "currentMonthStats", "topExpenses", "goals", "recentTransactions",
        }
        assert payload["recentTransactions"][0] == {
            "date": "2026-10-02",
            "type": "expense",
            "category": "Rent",
            "amount": "40",
            "description": "October rent",
        }
        assert payload["currentMonthStats"]["balance"] == 60


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.record_added(
            "transaction", "123", {"category": "Rent"},
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "123"
        assert log_dict["details"]["category"] == "Rent"

    def test_builder_delete_not_found_is_debug(self):
        event = AuditEventBuilder.record_deleted("goal", "404", found=False)
        assert event.event_type == AuditEventType.GOAL_DELETED
        assert event.severity == AuditSeverity.DEBUG

    def test_builder_storage_load_failed_is_warning(self):
        event = AuditEventBuilder.storage_load_failed("goals", "bad json")
        assert event.event_type == AuditEventType.STORAGE_LOAD_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "bad json"

    def test_builder_category_changed(self):
        added = AuditEventBuilder.category_changed("expense", "Pets", added=True)
        removed = AuditEventBuilder.category_changed("expense", "Pets", added=False)
        assert added.event_type == AuditEventType.CATEGORY_ADDED
        assert removed.event_type == AuditEventType.CATEGORY_DELETED
        assert added.entity_id == "expense:Pets"

    def test_builder_advisory_failed(self):
        event = AuditEventBuilder.advisory_failed(
            "tip", "MissingCredentialError", "API key not found",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.details["error_type"] == "MissingCredentialError"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
