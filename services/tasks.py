# planner/services/tasks.py
from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Set

from core.categories import normalize_category, normalize_color
from core.log import get_logger
from core.priorities import normalize_priority
from models.task import Task, TaskDraft
from utils.datetime_utils import to_day

logger = get_logger("tasks")

Listener = Callable[[str], None]


class TaskService:
    """Ordered, in-memory task collection.

    Every mutation is applied in place and announced to the listeners
    (``after_create``, ``after_update``, ``after_delete``) with the task id;
    the app shell persists the collection from those hooks.
    """

    EVENTS = ("after_create", "after_update", "after_delete")

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = list(tasks or [])
        self._listeners: Dict[str, Set[Listener]] = {event: set() for event in self.EVENTS}

    def subscribe(self, event: str, callback: Listener) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unsupported event: {event}")
        self._listeners[event].add(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        if event not in self._listeners:
            return
        self._listeners[event].discard(callback)

    def _emit(self, event: str, task_id: str) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                listener(task_id)
            except Exception:
                logger.exception("Listener for %s failed on task %s", event, task_id)

    # ----- queries -----
    def list(self) -> List[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    # ----- mutations -----
    def add(
        self,
        name: str,
        start_date: date,
        end_date: date,
        *,
        category: Optional[str] = None,
        assigned_user: str = "",
        priority: Optional[str] = None,
        color: Optional[str] = None,
        emit: bool = True,
    ) -> Optional[Task]:
        start, end = to_day(start_date), to_day(end_date)
        title = (name or "").strip()
        if not title:
            logger.debug("Rejected task without a name")
            return None
        if start > end:
            logger.debug("Rejected task %r: start %s after end %s", title, start, end)
            return None
        task = Task(
            name=title,
            start_date=start,
            end_date=end,
            category=normalize_category(category),
            assigned_user=assigned_user,
            priority=normalize_priority(priority),
            color=normalize_color(color),
        )
        self._tasks.append(task)
        logger.debug("Task created: %s %s..%s", task.id, start, end)
        if emit:
            self._emit("after_create", task.id)
        return task

    def add_from_draft(self, draft: TaskDraft, start_date: date, end_date: date) -> Optional[Task]:
        return self.add(
            draft.name,
            start_date,
            end_date,
            category=draft.category,
            assigned_user=draft.assigned_user,
            priority=draft.priority,
            color=draft.color,
        )

    def update(
        self,
        task_id: str,
        *,
        name: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        assigned_user: Optional[str] = None,
        priority: Optional[str] = None,
        color: Optional[str] = None,
        emit: bool = True,
    ) -> Optional[Task]:
        """Apply the given fields; returns ``None`` if the task is unknown or the change is invalid."""

        t = self.get(task_id)
        if not t:
            return None

        new_start = to_day(start_date) if start_date is not None else t.start_date
        new_end = to_day(end_date) if end_date is not None else t.end_date
        if new_start > new_end:
            logger.debug("Rejected update of %s: start %s after end %s", task_id, new_start, new_end)
            return None
        if name is not None and not name.strip():
            logger.debug("Rejected update of %s: empty name", task_id)
            return None

        if name is not None:
            t.name = name.strip()
        if category is not None:
            t.category = normalize_category(category)
        if assigned_user is not None:
            t.assigned_user = assigned_user
        if priority is not None:
            t.priority = normalize_priority(priority)
        if color is not None:
            t.color = normalize_color(color)
        t.start_date = new_start
        t.end_date = new_end
        if emit:
            self._emit("after_update", t.id)
        return t

    def apply_draft(self, task_id: str, draft: TaskDraft) -> Optional[Task]:
        """Merge form fields into an existing task; dates are left alone."""
        return self.update(
            task_id,
            name=draft.name,
            category=draft.category,
            assigned_user=draft.assigned_user,
            priority=draft.priority,
            color=draft.color,
        )

    def delete(self, task_id: str, *, emit: bool = True) -> bool:
        t = self.get(task_id)
        if not t:
            return False
        self._tasks.remove(t)
        logger.debug("Task deleted: %s", task_id)
        if emit:
            self._emit("after_delete", task_id)
        return True

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a freshly loaded collection without emitting events."""
        self._tasks = list(tasks)


__all__ = ["TaskService"]
