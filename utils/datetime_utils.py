"""Day-granular date helpers.

Tasks live on local calendar days: every value that enters the core is
reduced to a :class:`datetime.date` and compared without time of day.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

DayLike = Union[date, datetime]

# Sunday-first weeks: Python's weekday() is 0 for Monday and 6 for Sunday.
FIRST_WEEKDAY = 6


def to_day(value: DayLike) -> date:
    """Drop the time of day; aware datetimes are first converted to local time."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def parse_day(value: Optional[Union[str, DayLike]]) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp into a calendar day.

    Returns ``None`` for anything that cannot be read as a date.
    """

    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return to_day(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return to_day(datetime.fromisoformat(text))
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_day(value: date) -> str:
    return value.isoformat()


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def days_between(start: DayLike, end: DayLike) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""

    return (to_day(end) - to_day(start)).days


def start_of_week(value: date) -> date:
    return value - timedelta(days=(value.weekday() - FIRST_WEEKDAY) % 7)


def end_of_week(value: date) -> date:
    return start_of_week(value) + timedelta(days=6)


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def end_of_month(value: date) -> date:
    first_of_next = (value.replace(day=28) + timedelta(days=4)).replace(day=1)
    return first_of_next - timedelta(days=1)


__all__ = [
    "FIRST_WEEKDAY",
    "add_days",
    "days_between",
    "end_of_month",
    "end_of_week",
    "format_day",
    "parse_day",
    "start_of_month",
    "start_of_week",
    "to_day",
    "utc_now",
]
