"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


GEMINI_GENERATE_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash-exp:generateContent"
)


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        extra="ignore"
    )

    path: str = Field(
        default="finance_data.json",
        description="Path to the JSON file holding the ledger key-value store"
    )
    credential_key: str = Field(
        default="gemini_api_key",
        description="Storage key under which the advisory API key is kept"
    )

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject an empty storage path."""
        if not v.strip():
            raise ValueError("Storage path cannot be empty")
        return v


class GeminiSettings(BaseSettings):
    """Gemini REST endpoint configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        extra="ignore"
    )

    # Optional: a credential saved through the app takes precedence,
    # and no credential at all simply disables advice.
    api_key: Optional[str] = Field(
        default=None,
        description="Gemini API key used when none has been stored"
    )
    api_url: str = Field(
        default=GEMINI_GENERATE_URL,
        description="generateContent endpoint to POST prompts to"
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout; None waits indefinitely"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Dashboard defaults
    trend_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Number of trailing months in the income/expense trend"
    )
    budget_warning_percent: float = Field(
        default=80.0,
        gt=0.0,
        le=100.0,
        description="Spent percentage at which a budget is flagged as warning"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "gemini": lambda: settings.gemini,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
