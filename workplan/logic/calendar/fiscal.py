"""Fiscal calendar: maps wall-clock time to reporting periods and deadlines.

The organization reports on the Ethiopian government fiscal year, which
starts with Hamle (Gregorian July) and ends with Sene (Gregorian June).
Every function here is pure; callers pass ``now`` explicitly.
"""
from __future__ import annotations

from datetime import date, datetime, time

from workplan.domain.Period import Period
from workplan.utilities.constants import (
    DEADLINE_DAY,
    FISCAL_MONTHS,
    FISCAL_YEAR_OFFSET_FIRST_HALF,
    FISCAL_YEAR_OFFSET_SECOND_HALF,
    FISCAL_YEAR_START_MONTH,
    MONTHS_PER_YEAR,
)

__all__ = [
    "current_period", "gregorian_month_of", "deadline_for", "deadline_at",
    "next_period", "previous_period", "month_name", "format_deadline",
    "days_until_deadline",
]


def current_period(now: datetime | date) -> Period:
    """Return the fiscal (month, year) that contains ``now``.

    >>> current_period(datetime(2026, 1, 5))
    Period(month=7, year=2018)
    """
    month = (now.month - FISCAL_YEAR_START_MONTH) % MONTHS_PER_YEAR + 1
    if now.month >= FISCAL_YEAR_START_MONTH:
        year = now.year - FISCAL_YEAR_OFFSET_FIRST_HALF
    else:
        year = now.year - FISCAL_YEAR_OFFSET_SECOND_HALF
    return Period(month, year)


def gregorian_month_of(period: Period) -> tuple[int, int]:
    """Inverse of ``current_period`` at month granularity: (gregorian_year, gregorian_month)."""
    g_month = (period.month + FISCAL_YEAR_START_MONTH - 2) % MONTHS_PER_YEAR + 1
    if g_month >= FISCAL_YEAR_START_MONTH:
        g_year = period.year + FISCAL_YEAR_OFFSET_FIRST_HALF
    else:
        g_year = period.year + FISCAL_YEAR_OFFSET_SECOND_HALF
    return g_year, g_month


def deadline_for(month: int, year: int) -> date:
    """Reporting deadline of a period: the DEADLINE_DAY of its Gregorian month."""
    g_year, g_month = gregorian_month_of(Period(month, year))
    return date(g_year, g_month, DEADLINE_DAY)


def deadline_at(deadline: date) -> datetime:
    """Instant after which a submission counts as late (start of the deadline day)."""
    return datetime.combine(deadline, time.min)


def next_period(period: Period) -> Period:
    return period.next()


def previous_period(period: Period) -> Period:
    return period.previous()


def month_name(month: int, language: str = "english") -> str:
    for entry in FISCAL_MONTHS:
        if entry["number"] == month:
            return entry.get(language, "")
    return ""


def format_deadline(deadline: date, month: int, language: str = "english") -> str:
    """Render a deadline with the fiscal month name, e.g. ``Tahsas 18, 2018``.

    The year shown is the Ethiopian calendar year, which turns over in
    September (Meskerem) rather than at the fiscal boundary.
    """
    if deadline.month >= 9:
        ethiopian_year = deadline.year - 7
    else:
        ethiopian_year = deadline.year - 8
    return f"{month_name(month, language)} {deadline.day}, {ethiopian_year}"


def days_until_deadline(deadline: date, now: datetime | date) -> int:
    """Whole days left before the deadline; negative once it has passed."""
    today = now.date() if isinstance(now, datetime) else now
    return (deadline - today).days
