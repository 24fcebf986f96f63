"""Month grid made of whole Sunday-first weeks."""
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Sequence

from utils.datetime_utils import end_of_month, end_of_week, start_of_month, start_of_week


def month_days(anchor: date) -> List[date]:
    """Every day shown for ``anchor``'s month, padded to whole weeks."""
    first = start_of_week(start_of_month(anchor))
    last = end_of_week(end_of_month(anchor))
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def split_weeks(days: Sequence[date]) -> List[List[date]]:
    return [list(days[i:i + 7]) for i in range(0, len(days), 7)]


def month_weeks(anchor: date) -> List[List[date]]:
    return split_weeks(month_days(anchor))


def is_in_month(day: date, anchor: date) -> bool:
    return day.year == anchor.year and day.month == anchor.month


def shift_month(anchor: date, delta: int) -> date:
    """Move ``delta`` months, clamping the day to the target month's length."""
    index = anchor.year * 12 + (anchor.month - 1) + delta
    year, month = divmod(index, 12)
    target = date(year, month + 1, 1)
    return target.replace(day=min(anchor.day, end_of_month(target).day))


__all__ = ["is_in_month", "month_days", "month_weeks", "shift_month", "split_weeks"]
