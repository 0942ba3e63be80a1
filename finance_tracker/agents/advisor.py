"""
Advisory Client for Finance Tracker

Builds a bounded snapshot of the ledger and sends it, embedded in a
prompt, to the Gemini generateContent REST endpoint. Returns the raw
text (plain or Markdown) the model writes back.

CRITICAL BOUNDARIES:

1. CONTEXT IS BOUNDED:
   - At most 20 recent transactions and 5 top expense categories
   - Goals reduced to name/target/current/deadline
   - Prompt size stays predictable no matter how big the ledger gets

2. ONE CALL PER REQUEST:
   - No retries, no backoff. Advice is non-critical.
   - No credential means no network I/O at all.

3. FAILURES ALWAYS REACH THE CALLER:
   - The UI decides what to show instead; nothing is swallowed here.

The LLM is an ADVISOR, not a source of truth.
It never writes to the ledger.
"""

from datetime import date
from typing import Optional, Union

import httpx

from finance_tracker.audit import AuditLogger
from finance_tracker.config import GeminiSettings
from finance_tracker.ledger import LedgerStore
from finance_tracker.models.advisory import (
    AdvisoryContext,
    GoalSnapshot,
    TopExpense,
    TransactionSnapshot,
)
from finance_tracker.models.ledger import Period, TransactionFilters
from finance_tracker.services.storage import KeyValueStorage, StorageReadError


DEFAULT_CREDENTIAL_KEY = "gemini_api_key"
GENERIC_FAILURE_MESSAGE = "Failed to fetch from Gemini"
MALFORMED_RESPONSE_MESSAGE = "Unexpected response format from Gemini"

# Fixed prompt bounds; not configurable.
RECENT_TRANSACTIONS_LIMIT = 20
TOP_EXPENSES_LIMIT = 5


class AdvisoryError(Exception):
    """Base exception for advisory failures."""
    pass


class MissingCredentialError(AdvisoryError):
    """No API key is configured; the advisory feature is disabled."""
    pass


class AdvisoryRequestError(AdvisoryError):
    """The request failed or the service answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(AdvisoryError):
    """The service answered, but not with the expected structure."""
    pass


# =============================================================================
# PROMPTS
# =============================================================================

def tip_prompt(context_json: str) -> str:
    return f"""Act as a financial advisor. Using the user's financial data below (JSON), give ONE short, actionable and encouraging tip of at most 2 sentences.
Focus on saving more or spending more wisely, based on their recent behaviour.

User Data:
{context_json}"""


def report_prompt(context_json: str) -> str:
    return f"""Act as a financial advisor. Analyse the user's financial data below (JSON) and write a monthly report with these sections:
1. **Summary**: A brief overview of this month's financial health.
2. **Spending Analysis**: Where the money is going, and any worrying categories.
3. **Savings Review**: Progress on savings goals, with suggestions.
4. **Recommendations**: Three concrete steps to improve next month.

Format the output as clean Markdown with bold headings and lists.

User Data:
{context_json}"""


def plan_prompt(
    context_json: str,
    target_amount: Union[float, str],
    target_date: Union[date, str],
) -> str:
    return f"""Act as a financial strategist. The user wants to reach a monthly income/savings goal of {target_amount} by {target_date}.

Current Context:
{context_json}

Write a detailed, step-by-step plan to reach this goal responsibly, with these sections:
1. **Feasibility Check**: Is the goal realistic given current income and expenses?
2. **Expense Optimization**: Where costs can be cut right away to free up cash.
3. **Income Generation Ideas**: General ideas (freelancing, upskilling) if current income is not enough.
4. **Timeline**: Milestones to hit before the target date.

Format the output as clean Markdown. Be encouraging but realistic."""


# =============================================================================
# CLIENT
# =============================================================================

class AdvisoryClient:
    """
    Gemini-backed financial advice.

    RESPONSIBILITIES:
    - Hold the API key (persisted next to the ledger data)
    - Shape the bounded advisory context from the ledger store
    - Make exactly one POST per generation request

    BOUNDARIES:
    - NEVER mutates the ledger
    - NEVER retries
    - No internal concurrency limit; callers serialize if they need to
    """

    def __init__(
        self,
        store: LedgerStore,
        storage: KeyValueStorage,
        settings: Optional[GeminiSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        credential_key: str = DEFAULT_CREDENTIAL_KEY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            store: Ledger the context is built from
            storage: Key-value store the API key is persisted in
            settings: Endpoint config; its api_key is used only if none is stored
            audit_logger: Where advisory outcomes are logged
            credential_key: Storage key for the API key
            transport: httpx transport override (tests)
        """
        self._store = store
        self._storage = storage
        self._settings = settings or GeminiSettings()
        self._audit = audit_logger or AuditLogger()
        self._credential_key = credential_key
        self._transport = transport
        self._api_key = self._load_api_key()

    # =========================================================================
    # CREDENTIAL
    # =========================================================================

    def _load_api_key(self) -> str:
        try:
            stored = self._storage.get(self._credential_key)
        except StorageReadError as e:
            self._audit.log_storage_load_failed(self._credential_key, str(e))
            stored = None
        return stored or self._settings.api_key or ""

    @property
    def api_key(self) -> str:
        return self._api_key

    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def set_api_key(self, key: str) -> None:
        """Store (or, with an empty key, clear) the API key."""
        key = key.strip()
        if key:
            self._storage.set(self._credential_key, key)
        else:
            self._storage.delete(self._credential_key)
        self._api_key = key
        self._audit.log_credential_updated(present=bool(key))

    # =========================================================================
    # CONTEXT
    # =========================================================================

    def build_context(self) -> AdvisoryContext:
        """
        Bounded snapshot of the ledger.

        - currentMonthStats: get_stats('month')
        - topExpenses: up to 5 current-month expense categories by amount,
          descending; ties keep the category-sum mapping's iteration order
        - goals: every goal, reduced
        - recentTransactions: the 20 most recently created current-month
          transactions
        """
        stats = self._store.get_stats(Period.MONTH.value)

        category_totals = self._store.get_category_data(Period.MONTH.value)
        ranked = sorted(category_totals.items(), key=lambda item: item[1], reverse=True)
        top_expenses = [
            TopExpense(category=category, amount=amount)
            for category, amount in ranked[:TOP_EXPENSES_LIMIT]
        ]

        goals = [
            GoalSnapshot(
                name=goal.name,
                target=goal.target,
                current=goal.current,
                deadline=goal.deadline,
            )
            for goal in self._store.goals
        ]

        # Transactions are held newest-first, so the head is the most recent.
        recent = self._store.get_transactions(
            TransactionFilters(period=Period.MONTH.value)
        )[:RECENT_TRANSACTIONS_LIMIT]
        recent_transactions = [
            TransactionSnapshot(
                date=t.date,
                type=t.type,
                category=t.category,
                amount=t.amount,
                description=t.description,
            )
            for t in recent
        ]

        return AdvisoryContext(
            current_month_stats=stats,
            top_expenses=top_expenses,
            goals=goals,
            recent_transactions=recent_transactions,
        )

    # =========================================================================
    # GENERATION
    # =========================================================================

    async def generate_tip(self) -> str:
        """One short, actionable tip (at most 2 sentences)."""
        prompt = tip_prompt(self.build_context().to_prompt_json())
        return await self._generate("tip", prompt)

    async def generate_report(self) -> str:
        """Four-section Markdown monthly report."""
        prompt = report_prompt(self.build_context().to_prompt_json())
        return await self._generate("report", prompt)

    async def generate_plan(
        self,
        target_amount: Union[float, str],
        target_date: Union[date, str],
    ) -> str:
        """Four-section Markdown plan for reaching a target by a date."""
        prompt = plan_prompt(
            self.build_context().to_prompt_json(),
            target_amount,
            target_date,
        )
        return await self._generate("plan", prompt)

    async def _generate(self, kind: str, prompt: str) -> str:
        try:
            text = await self._call_gemini(prompt)
        except AdvisoryError as e:
            self._audit.log_advisory_failed(kind, type(e).__name__, str(e))
            raise
        self._audit.log_advisory_completed(kind, len(text))
        return text

    async def _call_gemini(self, prompt: str) -> str:
        """
        POST a prompt and extract candidates[0].content.parts[0].text.

        Raises:
            MissingCredentialError: No API key (no request is made)
            AdvisoryRequestError: Transport error or non-success status
            MalformedResponseError: Body is not the expected structure
        """
        if not self._api_key:
            raise MissingCredentialError("API key not found")

        body = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.request_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._settings.api_url,
                    params={"key": self._api_key},
                    json=body,
                )
        except httpx.RequestError as e:
            raise AdvisoryRequestError(str(e) or GENERIC_FAILURE_MESSAGE) from e

        if not response.is_success:
            raise AdvisoryRequestError(
                self._error_message(response),
                status_code=response.status_code,
            )

        try:
            text = response.json()["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(MALFORMED_RESPONSE_MESSAGE) from e

        if not isinstance(text, str):
            raise MalformedResponseError(MALFORMED_RESPONSE_MESSAGE)
        return text

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Server-supplied error.message if present, else a generic message."""
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return GENERIC_FAILURE_MESSAGE
        if isinstance(message, str) and message:
            return message
        return GENERIC_FAILURE_MESSAGE
