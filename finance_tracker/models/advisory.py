"""
Advisory Context Models

The advisory context is the bounded snapshot of the ledger that is
embedded in every prompt sent to the text-generation service.

DESIGN DECISION: The snapshot is bounded (recent transactions and top
expense categories are capped) to keep prompt size, cost and latency
predictable no matter how large the ledger grows.
"""

from typing import Optional

from pydantic import Field

from finance_tracker.models.ledger import (
    Amount,
    CalendarDate,
    CamelModel,
    LedgerStats,
    TransactionType,
)


class TopExpense(CamelModel):
    """One expense category with its current-month total."""

    category: str
    amount: float


class GoalSnapshot(CamelModel):
    """A goal reduced to what the advisor needs."""

    name: str
    target: Amount
    current: Amount
    deadline: Optional[CalendarDate] = None


class TransactionSnapshot(CamelModel):
    """A transaction reduced to what the advisor needs."""

    date: CalendarDate
    type: TransactionType
    category: str
    amount: Amount
    description: str = ""


class AdvisoryContext(CamelModel):
    """
    Bounded financial snapshot for prompts.

    Serialized with camelCase keys:
    currentMonthStats, topExpenses, goals, recentTransactions.
    """

    current_month_stats: LedgerStats
    top_expenses: list[TopExpense] = Field(default_factory=list)
    goals: list[GoalSnapshot] = Field(default_factory=list)
    recent_transactions: list[TransactionSnapshot] = Field(default_factory=list)

    def to_prompt_json(self) -> str:
        """Pretty-printed JSON for embedding in a prompt."""
        return self.model_dump_json(indent=2, by_alias=True)
