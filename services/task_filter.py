"""Visibility of tasks under the filter panel's selections."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional

from core.categories import CATEGORIES
from models.task import Task
from utils.datetime_utils import DayLike, days_between

# Window -> how many days ahead a task may start. ``None`` disables the check.
TIME_WINDOWS: Dict[str, Optional[int]] = {
    "all": None,
    "1week": 7,
    "2weeks": 14,
    "3weeks": 21,
}

TIME_WINDOW_LABELS: Dict[str, str] = {
    "all": "All tasks",
    "1week": "Tasks within 1 week",
    "2weeks": "Tasks within 2 weeks",
    "3weeks": "Tasks within 3 weeks",
}


@dataclass(frozen=True)
class FilterState:
    categories: FrozenSet[str]
    users: FrozenSet[str]
    time_window: str = "all"

    def __post_init__(self):
        if self.time_window not in TIME_WINDOWS:
            raise ValueError(f"Unsupported time window: {self.time_window}")

    @classmethod
    def all_for(cls, users: Iterable[str]) -> "FilterState":
        """Everything visible: all categories, every given user, no time window."""
        return cls(categories=frozenset(CATEGORIES), users=frozenset(users))


def is_visible(task: Task, filters: FilterState, now: DayLike) -> bool:
    """Decide whether ``task`` is shown.

    The time window only bounds how far in the future a task may start:
    tasks that already started (or ended) always pass it.
    """

    if task.category not in filters.categories:
        return False
    if task.assigned_user not in filters.users:
        return False

    limit = TIME_WINDOWS[filters.time_window]
    if limit is None:
        return True
    return days_between(now, task.start_date) <= limit


def filter_tasks(tasks: Iterable[Task], filters: FilterState, now: DayLike) -> List[Task]:
    return [t for t in tasks if is_visible(t, filters, now)]


__all__ = ["FilterState", "TIME_WINDOWS", "TIME_WINDOW_LABELS", "filter_tasks", "is_visible"]
