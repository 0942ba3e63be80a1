"""AI Agents package."""

from finance_tracker.agents.advisor import (
    AdvisoryClient,
    AdvisoryError,
    AdvisoryRequestError,
    MalformedResponseError,
    MissingCredentialError,
)

__all__ = [
    "AdvisoryClient",
    "AdvisoryError",
    "AdvisoryRequestError",
    "MalformedResponseError",
    "MissingCredentialError",
]
