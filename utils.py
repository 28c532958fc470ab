"""Utility functions for calendar calculations."""

from __future__ import annotations

from datetime import date, timedelta
from calendar import monthrange


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def date_for_day(year: int, month: int, day: int) -> str:
    """ISO date for a day of the given month. Raises ValueError if the month has no such day."""
    return date(year, month, day).isoformat()


def get_public_holidays(year: int, country: str, subdiv: str | None = None) -> dict[date, str]:
    """Get public holidays for a country (and optional subdivision) in a year."""
    import holidays
    country_holidays = holidays.country_holidays(country, subdiv=subdiv, years=year)
    return {d: name for d, name in country_holidays.items()}


def get_working_days(year: int, month: int, country: str, subdiv: str | None = None) -> list[date]:
    """Get list of working days (weekdays minus public holidays) in a month."""
    public_holidays = get_public_holidays(year, country, subdiv)
    start, end = month_bounds(year, month)

    working_days = []
    current = start
    while current <= end:
        # Monday=0 to Friday=4 are weekdays
        if current.weekday() < 5 and current not in public_holidays:
            working_days.append(current)
        current += timedelta(days=1)

    return working_days


TASK_TYPE_CHOICES = [
    ("1", "New Development"),
    ("2", "Bug Fixing"),
]
