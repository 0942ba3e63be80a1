"""
Period Windows

Resolves named relative-date windows against a reference "now".
This is DETERMINISTIC - the caller supplies the clock.

Semantics:
- today: calendar-date equality, time of day ignored
- week:  on or after (now - 7 days), no upper bound. A rolling window,
         NOT the current ISO week.
- month: same calendar month and year as now
- year:  same calendar year as now
- anything else (including "all" and None): no restriction
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from finance_tracker.models.ledger import Period


WEEK_WINDOW = timedelta(days=7)


def in_month(day: date, year: int, month: int) -> bool:
    """True if a date falls in the given calendar month."""
    return day.year == year and day.month == month


def matches_period(day: date, period: Optional[str], now: datetime) -> bool:
    """Check a calendar date against a named period window."""
    if period == Period.TODAY.value:
        return day == now.date()

    if period == Period.WEEK.value:
        # Dates are compared as midnight of that day, so the day exactly
        # seven days back is usually outside the window.
        return datetime.combine(day, time.min, tzinfo=now.tzinfo) >= now - WEEK_WINDOW

    if period == Period.MONTH.value:
        return in_month(day, now.year, now.month)

    if period == Period.YEAR.value:
        return day.year == now.year

    return True


def trailing_months(now: datetime, months: int) -> list[tuple[int, int]]:
    """
    (year, month) pairs for the trailing window ending at now's month.

    Ordered oldest to newest; the current month is included.
    """
    pairs = []
    for offset in range(months - 1, -1, -1):
        index = now.year * 12 + (now.month - 1) - offset
        pairs.append((index // 12, index % 12 + 1))
    return pairs


def month_label(year: int, month: int) -> str:
    """Short label for a month, e.g. 'Oct 2026'."""
    return date(year, month, 1).strftime("%b %Y")
