"""
Ledger Store

Owns the canonical transactions, budgets, goals and category taxonomy,
answers filtered queries and derived aggregates, and persists every
collection to a key-value store.

DESIGN DECISIONS:
- One explicit store object, constructed at startup and handed to
  whoever needs it (UI layer, advisory client). No module-level state.
- Every mutation re-serializes the FULL affected collection. Simple and
  always consistent with the latest snapshot; fine for personal volumes,
  would need an append-only scheme at scale.
- "Nothing matched" is never an error: deletes of unknown ids are no-ops
  and updates of unknown ids return None.
- Category membership is NOT checked when adding transactions, and
  deleting a category does not touch transactions that use it.

CONCURRENCY: All operations are synchronous and run to completion.
The "mutate in memory, then persist" sequence is not atomic, so callers
sharing one store across threads must serialize mutations themselves.
"""

import math
import time
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.ledger.periods import (
    in_month,
    matches_period,
    month_label,
    trailing_months,
)
from finance_tracker.models.ledger import (
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
from finance_tracker.services.storage import (
    KeyValueStorage,
    StorageError,
    StorageReadError,
)


TRANSACTIONS_KEY = "transactions"
BUDGETS_KEY = "budgets"
GOALS_KEY = "goals"
CATEGORIES_KEY = "categories"

_ALL = "all"

_TRANSACTIONS = TypeAdapter(list[Transaction])
_BUDGETS = TypeAdapter(list[Budget])
_GOALS = TypeAdapter(list[Goal])

RecordData = Union[Mapping[str, Any], BaseModel]


def _as_dict(data: RecordData) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


def _format_amount(value: float) -> str:
    """Render a computed amount as a numeric string ('750', '12.5')."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


class LedgerStore:
    """
    In-memory ledger with full-collection persistence.

    Transactions are kept newest-first (new ones are prepended);
    budgets and goals keep insertion order.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        budget_warning_percent: float = 80.0,
        trend_months: int = 6,
    ):
        """
        Initialize the store and load all collections from storage.

        Args:
            storage: Key-value backend the collections live in
            audit_logger: Where mutations and load failures are logged
            clock: Returns "now" for period queries (defaults to local time)
            budget_warning_percent: Spent share at which a budget is flagged
            trend_months: Default window for get_trend_data
        """
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._clock = clock or datetime.now
        self._budget_warning_percent = budget_warning_percent
        self._trend_months = trend_months

        self._transactions: list[Transaction] = self._load_records(
            TRANSACTIONS_KEY, _TRANSACTIONS
        )
        self._budgets: list[Budget] = self._load_records(BUDGETS_KEY, _BUDGETS)
        self._goals: list[Goal] = self._load_records(GOALS_KEY, _GOALS)
        self._categories: CategoryTaxonomy = self._load_categories()

        self._last_id = max(
            (
                int(record.id)
                for record in (*self._transactions, *self._budgets, *self._goals)
                if record.id.isdigit()
            ),
            default=0,
        )

    # =========================================================================
    # LOAD / SAVE
    # =========================================================================

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._storage.get(key)
        except StorageReadError as e:
            self._audit.log_storage_load_failed(key, str(e))
            return None

    def _load_records(self, key: str, adapter: TypeAdapter) -> list:
        raw = self._read(key)
        if raw is None:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            self._audit.log_storage_load_failed(key, str(e))
            return []

    def _load_categories(self) -> CategoryTaxonomy:
        raw = self._read(CATEGORIES_KEY)
        if raw is None:
            return CategoryTaxonomy()
        try:
            return CategoryTaxonomy.model_validate_json(raw)
        except ValidationError as e:
            self._audit.log_storage_load_failed(CATEGORIES_KEY, str(e))
            return CategoryTaxonomy()

    def _persist(self, key: str, payload: str) -> None:
        try:
            self._storage.set(key, payload)
        except StorageError as e:
            self._audit.log_storage_write_failed(key, str(e))
            raise

    def _save_transactions(self) -> None:
        self._persist(TRANSACTIONS_KEY, _TRANSACTIONS.dump_json(self._transactions).decode("utf-8"))

    def _save_budgets(self) -> None:
        self._persist(BUDGETS_KEY, _BUDGETS.dump_json(self._budgets).decode("utf-8"))

    def _save_goals(self) -> None:
        self._persist(GOALS_KEY, _GOALS.dump_json(self._goals).decode("utf-8"))

    def _save_categories(self) -> None:
        self._persist(CATEGORIES_KEY, self._categories.model_dump_json())

    def _next_id(self) -> str:
        """Millisecond wall-clock id, bumped so ids strictly increase."""
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def _now(self) -> datetime:
        return self._clock()

    # =========================================================================
    # COLLECTION ACCESS
    # =========================================================================

    @property
    def transactions(self) -> list[Transaction]:
        """All transactions, newest first."""
        return list(self._transactions)

    @property
    def budgets(self) -> list[Budget]:
        return list(self._budgets)

    @property
    def goals(self) -> list[Goal]:
        return list(self._goals)

    @property
    def categories(self) -> CategoryTaxonomy:
        return self._categories.model_copy(deep=True)

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(self, data: RecordData) -> Transaction:
        """
        Create a transaction with a fresh id and prepend it.

        Any id in the input is replaced.

        Raises:
            pydantic.ValidationError: If required fields are missing or invalid
            StorageWriteError: If the collection could not be persisted
        """
        transaction = Transaction.model_validate(
            {**_as_dict(data), "id": self._next_id()}
        )
        self._transactions.insert(0, transaction)
        self._save_transactions()
        self._audit.log_record_added(
            "transaction",
            transaction.id,
            {
                "type": transaction.type.value,
                "category": transaction.category,
                "amount": str(transaction.amount),
            },
        )
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction. Unknown ids are a no-op. Returns True if removed."""
        remaining = [t for t in self._transactions if t.id != transaction_id]
        found = len(remaining) != len(self._transactions)
        self._transactions = remaining
        self._save_transactions()
        self._audit.log_record_deleted("transaction", transaction_id, found)
        return found

    def get_transactions(
        self,
        filters: Union[TransactionFilters, Mapping[str, Any], None] = None,
    ) -> list[Transaction]:
        """
        Filtered copy of the transactions, newest first.

        Filters (type, category, period) combine with logical AND;
        None or "all" disables a filter, unknown periods match everything.
        """
        if filters is None:
            filters = TransactionFilters()
        elif not isinstance(filters, TransactionFilters):
            filters = TransactionFilters.model_validate(dict(filters))

        filtered = list(self._transactions)

        if filters.type and filters.type != _ALL:
            filtered = [t for t in filtered if t.type.value == filters.type]

        if filters.category and filters.category != _ALL:
            filtered = [t for t in filtered if t.category == filters.category]

        if filters.period and filters.period != _ALL:
            now = self._now()
            filtered = [
                t for t in filtered
                if matches_period(t.date, filters.period, now)
            ]

        return filtered

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def add_budget(self, data: RecordData) -> Budget:
        """
        Create a budget with a fresh id and append it.

        Duplicate categories are accepted; one budget per category is a
        UI convention.
        """
        budget = Budget.model_validate({**_as_dict(data), "id": self._next_id()})
        self._budgets.append(budget)
        self._save_budgets()
        self._audit.log_record_added(
            "budget",
            budget.id,
            {"category": budget.category, "amount": str(budget.amount)},
        )
        return budget

    def delete_budget(self, budget_id: str) -> bool:
        remaining = [b for b in self._budgets if b.id != budget_id]
        found = len(remaining) != len(self._budgets)
        self._budgets = remaining
        self._save_budgets()
        self._audit.log_record_deleted("budget", budget_id, found)
        return found

    def get_budget_spending(self, category: str) -> float:
        """Sum of this calendar month's expenses in a category (0 if none)."""
        now = self._now()
        return float(sum(
            as_float(t.amount)
            for t in self._transactions
            if t.type is TransactionType.EXPENSE
            and t.category == category
            and in_month(t.date, now.year, now.month)
        ))

    def _budget_status(self, budget: Budget) -> BudgetStatus:
        spent = self.get_budget_spending(budget.category)
        limit = as_float(budget.amount)

        if limit > 0:
            percentage = spent / limit * 100
        else:
            percentage = 100.0 if spent > 0 else 0.0

        if percentage >= 100:
            health = BudgetHealth.OVER_BUDGET
        elif percentage >= self._budget_warning_percent:
            health = BudgetHealth.WARNING
        else:
            health = BudgetHealth.ON_TRACK

        return BudgetStatus(
            budget=budget,
            spent=spent,
            remaining=limit - spent,
            percentage=percentage,
            health=health,
        )

    def get_budget_status(self, budget_id: str) -> Optional[BudgetStatus]:
        """Current-month status of one budget, or None if it doesn't exist."""
        for budget in self._budgets:
            if budget.id == budget_id:
                return self._budget_status(budget)
        return None

    def get_budget_statuses(self) -> list[BudgetStatus]:
        """Current-month status of every budget, in budget order."""
        return [self._budget_status(budget) for budget in self._budgets]

    # =========================================================================
    # GOALS
    # =========================================================================

    def add_goal(self, data: RecordData) -> Goal:
        goal = Goal.model_validate({**_as_dict(data), "id": self._next_id()})
        self._goals.append(goal)
        self._save_goals()
        self._audit.log_record_added(
            "goal",
            goal.id,
            {"name": goal.name, "target": str(goal.target)},
        )
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        remaining = [g for g in self._goals if g.id != goal_id]
        found = len(remaining) != len(self._goals)
        self._goals = remaining
        self._save_goals()
        self._audit.log_record_deleted("goal", goal_id, found)
        return found

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        for goal in self._goals:
            if goal.id == goal_id:
                return goal
        return None

    def update_goal(self, goal_id: str, updates: RecordData) -> Optional[Goal]:
        """
        Shallow-merge fields into a goal.

        Supplied fields replace the stored ones, the rest are kept.
        The id never changes. Persists only when the goal exists.

        Returns:
            The updated goal, or None if no goal has that id

        Raises:
            ValueError: If the updates name a field Goal does not have
            pydantic.ValidationError: If the merged goal is invalid
        """
        changes = {k: v for k, v in _as_dict(updates).items() if k != "id"}
        unknown = sorted(set(changes) - set(Goal.model_fields))
        if unknown:
            raise ValueError(f"Unknown goal fields: {', '.join(unknown)}")

        for index, goal in enumerate(self._goals):
            if goal.id == goal_id:
                updated = Goal.model_validate({**goal.model_dump(), **changes})
                self._goals[index] = updated
                self._save_goals()
                self._audit.log_goal_updated(goal_id, sorted(changes))
                return updated

        return None

    def contribute_to_goal(
        self,
        goal_id: str,
        amount: Union[int, float, str],
    ) -> Optional[Goal]:
        """
        Add money to a goal's saved amount.

        The new total is stored as a numeric string.

        Raises:
            ValueError: If amount is not a positive number
        """
        value = float(amount)
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"Contribution must be a positive amount, got {amount!r}")

        goal = self.get_goal(goal_id)
        if goal is None:
            return None

        new_current = as_float(goal.current) + value
        return self.update_goal(goal_id, {"current": _format_amount(new_current)})

    @staticmethod
    def _goal_percentage(goal: Goal) -> float:
        target = as_float(goal.target)
        if target <= 0:
            return 0.0
        return as_float(goal.current) / target * 100

    def get_goal_progress(self, goal_id: str) -> Optional[GoalProgress]:
        goal = self.get_goal(goal_id)
        if goal is None:
            return None

        percentage = self._goal_percentage(goal)
        return GoalProgress(
            goal=goal,
            percentage=percentage,
            capped_percentage=min(100.0, max(0.0, percentage)),
            remaining=as_float(goal.target) - as_float(goal.current),
        )

    # =========================================================================
    # STATISTICS
    # =========================================================================

    def _average_goal_progress(self) -> float:
        if not self._goals:
            return 0.0
        total = sum(
            min(100.0, max(0.0, self._goal_percentage(goal)))
            for goal in self._goals
        )
        return total / len(self._goals)

    def get_stats(self, period: str = Period.MONTH.value) -> LedgerStats:
        """
        Income, expenses and balance for a period, plus mean goal progress.

        balance is always income - expenses; avg_goal_progress is in [0, 100].
        """
        transactions = self.get_transactions(TransactionFilters(period=period))

        income = sum(
            as_float(t.amount)
            for t in transactions
            if t.type is TransactionType.INCOME
        )
        expenses = sum(
            as_float(t.amount)
            for t in transactions
            if t.type is TransactionType.EXPENSE
        )

        return LedgerStats(
            income=income,
            expenses=expenses,
            balance=income - expenses,
            avg_goal_progress=self._average_goal_progress(),
        )

    def get_category_data(self, period: str = Period.MONTH.value) -> dict[str, float]:
        """
        Expense totals per category for a period.

        Categories without expenses in the period are absent. Keys appear
        in the order categories are first met walking newest-first.
        """
        totals: dict[str, float] = {}
        expenses = self.get_transactions(
            TransactionFilters(period=period, type=TransactionType.EXPENSE.value)
        )
        for t in expenses:
            totals[t.category] = totals.get(t.category, 0.0) + as_float(t.amount)
        return totals

    def get_trend_data(self, months: Optional[int] = None) -> list[TrendPoint]:
        """
        Monthly income/expense totals for the trailing months, oldest first.

        The current month is the last entry. months defaults to 6.
        """
        if months is None:
            months = self._trend_months
        if months <= 0:
            return []

        points = []
        for year, month in trailing_months(self._now(), months):
            income = 0.0
            expenses = 0.0
            for t in self._transactions:
                if not in_month(t.date, year, month):
                    continue
                if t.type is TransactionType.INCOME:
                    income += as_float(t.amount)
                else:
                    expenses += as_float(t.amount)
            points.append(TrendPoint(
                month_label=month_label(year, month),
                income=income,
                expenses=expenses,
            ))
        return points

    # =========================================================================
    # CATEGORY TAXONOMY
    # =========================================================================

    def add_category(self, type: Union[TransactionType, str], name: str) -> bool:
        """
        Append a category name to a type's list.

        Returns False (and changes nothing) if the exact name is already
        present or empty.
        """
        names = self._categories.for_type(type)
        if not name or name in names:
            return False
        names.append(name)
        self._save_categories()
        self._audit.log_category_changed(TransactionType(type).value, name, added=True)
        return True

    def delete_category(self, type: Union[TransactionType, str], name: str) -> bool:
        """
        Remove the first exact match of a category name.

        Transactions tagged with it are left untouched.
        """
        names = self._categories.for_type(type)
        if name not in names:
            return False
        names.remove(name)
        self._save_categories()
        self._audit.log_category_changed(TransactionType(type).value, name, added=False)
        return True
