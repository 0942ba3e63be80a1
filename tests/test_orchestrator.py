"""Tests for application wiring."""

import pytest

from finance_tracker.config import get_settings
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services.storage import InMemoryStorage, JsonFileStorage

from tests.conftest import NOW


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("FINANCE_STORAGE_PATH", str(tmp_path / "ledger.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCreateAppComponents:

    def test_defaults_to_json_file(self, tmp_path):
        components = create_app_components(clock=lambda: NOW)
        assert isinstance(components.storage, JsonFileStorage)
        assert components.storage.path == tmp_path / "ledger.json"

    def test_in_memory_session(self):
        components = create_app_components(use_storage=False, clock=lambda: NOW)
        assert isinstance(components.storage, InMemoryStorage)

    def test_components_share_storage_and_logger(self):
        storage = InMemoryStorage()
        components = create_app_components(storage=storage, clock=lambda: NOW)

        components.store.add_transaction({
            "type": "income", "amount": 5000, "category": "Salary", "date": NOW.date(),
        })
        components.advisor.set_api_key("abc")

        assert storage.get("transactions") is not None
        assert storage.get("gemini_api_key") == "abc"
        assert len(components.audit_logger.recent_events) == 2

    def test_data_survives_restart(self, tmp_path):
        first = create_app_components(clock=lambda: NOW)
        first.store.add_goal({"name": "Car", "target": 5000})
        first.advisor.set_api_key("abc")

        second = create_app_components(clock=lambda: NOW)
        assert [g.name for g in second.store.goals] == ["Car"]
        assert second.advisor.has_api_key()

    def test_settings_bounds_applied(self, monkeypatch):
        monkeypatch.setenv("TREND_MONTHS", "3")
        get_settings.cache_clear()
        components = create_app_components(use_storage=False, clock=lambda: NOW)
        assert len(components.store.get_trend_data()) == 3
