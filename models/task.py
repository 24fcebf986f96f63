# planner/models/task.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import uuid

from core.categories import DEFAULT_CATEGORY, DEFAULT_COLOR
from core.priorities import DEFAULT_PRIORITY


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Task:
    """A time-ranged bar on the calendar.

    ``start_date`` and ``end_date`` are inclusive calendar days and
    ``start_date <= end_date`` always holds; ``TaskService`` rejects any
    change that would break it.
    """

    name: str
    start_date: date
    end_date: date
    category: str = DEFAULT_CATEGORY
    assigned_user: str = ""
    priority: str = DEFAULT_PRIORITY
    color: str = DEFAULT_COLOR
    id: str = field(default_factory=new_task_id)

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days


@dataclass(frozen=True)
class TaskDraft:
    """Fields collected by the create/edit form."""

    name: str
    category: str = DEFAULT_CATEGORY
    assigned_user: str = ""
    priority: str = DEFAULT_PRIORITY
    color: str = DEFAULT_COLOR

    @classmethod
    def from_task(cls, task: Task) -> "TaskDraft":
        return cls(
            name=task.name,
            category=task.category,
            assigned_user=task.assigned_user,
            priority=task.priority,
            color=task.color,
        )


__all__ = ["Task", "TaskDraft", "new_task_id"]
