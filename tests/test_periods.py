"""Tests for period windows and trailing month helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from finance_tracker.ledger.periods import (
    matches_period,
    month_label,
    trailing_months,
)


NOW = datetime(2026, 10, 17, 12, 0, 0)


class TestMatchesPeriod:
    """Tests for named period windows."""

    def test_today_ignores_time_of_day(self):
        assert matches_period(date(2026, 10, 17), "today", NOW)
        assert not matches_period(date(2026, 10, 16), "today", NOW)

    @pytest.mark.parametrize(
        "day, expected",
        [
            (date(2026, 10, 17), True),
            (date(2026, 10, 11), True),
            (date(2026, 10, 10), False),
            (date(2026, 9, 1), False),
            (date(2026, 12, 25), True),
        ],
    )
    def test_week_is_rolling(self, day, expected):
        assert matches_period(day, "week", NOW) is expected

    def test_week_boundary_at_midnight(self):
        midnight = datetime(2026, 10, 17, 0, 0, 0)
        assert matches_period(date(2026, 10, 10), "week", midnight)

    def test_week_with_aware_now(self):
        aware = NOW.replace(tzinfo=timezone.utc)
        assert matches_period(date(2026, 10, 11), "week", aware)

    def test_month(self):
        assert matches_period(date(2026, 10, 1), "month", NOW)
        assert not matches_period(date(2025, 10, 1), "month", NOW)
        assert not matches_period(date(2026, 9, 30), "month", NOW)

    def test_year(self):
        assert matches_period(date(2026, 1, 1), "year", NOW)
        assert not matches_period(date(2025, 12, 31), "year", NOW)

    @pytest.mark.parametrize("period", ["all", None, "", "fortnight"])
    def test_other_values_match_everything(self, period):
        assert matches_period(NOW.date() - timedelta(days=4000), period, NOW)


class TestTrailingMonths:
    """Tests for the trend window."""

    def test_six_months(self):
        assert trailing_months(NOW, 6) == [
            (2026, 5), (2026, 6), (2026, 7), (2026, 8), (2026, 9), (2026, 10),
        ]

    def test_crosses_year(self):
        assert trailing_months(datetime(2026, 1, 31), 3) == [
            (2025, 11), (2025, 12), (2026, 1),
        ]

    def test_single_month(self):
        assert trailing_months(NOW, 1) == [(2026, 10)]

    def test_month_label(self):
        assert month_label(2026, 10) == "Oct 2026"
        assert month_label(2025, 1) == "Jan 2025"
