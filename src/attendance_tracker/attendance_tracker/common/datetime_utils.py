from __future__ import annotations

from datetime import date, datetime

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def weekday_name(value: date) -> str:
    """English weekday name of a calendar date (no timezone shifting)."""
    return WEEKDAY_NAMES[value.weekday()]


def in_month(value: date, *, month: int, year: int) -> bool:
    return value.month == int(month) and value.year == int(year)
