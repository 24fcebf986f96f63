"""Load and save the task collection through the key-value store."""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from core.categories import normalize_category, normalize_color
from core.log import get_logger
from core.priorities import normalize_priority
from core.settings import STORAGE
from models.task import Task, new_task_id
from models.user import User
from services.users import DEFAULT_USERS, default_assignee
from storage.kv import KeyValueStore
from utils.datetime_utils import format_day, parse_day

logger = get_logger("repository")

UNTITLED = "Untitled"


def task_to_record(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "category": task.category,
        "startDate": format_day(task.start_date),
        "endDate": format_day(task.end_date),
        "assignedUser": task.assigned_user,
        "priority": task.priority,
        "color": task.color,
    }


def _assignee(raw: Mapping, users: Sequence[User]) -> str:
    # only absent keys are legacy; an empty string is a saved "unassigned"
    value = raw.get("assignedUser")
    if value is None:
        return default_assignee(users)
    return str(value)


def record_to_task(raw: Any, users: Sequence[User] = DEFAULT_USERS) -> Optional[Task]:
    """Coerce one stored record into a task, or ``None`` if it cannot be repaired.

    Optional fields missing from older data get defaults: the first user of
    the directory, priority ``P1`` and color ``blue``.
    """

    if not isinstance(raw, Mapping):
        return None
    start = parse_day(raw.get("startDate"))
    end = parse_day(raw.get("endDate"))
    if start is None or end is None or start > end:
        return None

    name = str(raw.get("name") or "").strip() or UNTITLED
    task_id = raw.get("id")
    return Task(
        id=str(task_id) if task_id else new_task_id(),
        name=name,
        category=normalize_category(raw.get("category")),
        start_date=start,
        end_date=end,
        assigned_user=_assignee(raw, users),
        priority=normalize_priority(raw.get("priority")),
        color=normalize_color(raw.get("color")),
    )


class TaskRepository:
    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        *,
        key: str = STORAGE.tasks_key,
        users: Sequence[User] = DEFAULT_USERS,
    ):
        self.store = store or KeyValueStore()
        self.key = key
        self.users = users
        self.last_dropped = 0

    def load(self) -> List[Task]:
        self.last_dropped = 0
        payload = self.store.get(self.key)
        if not payload:
            return []
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            logger.error("Stored tasks under %r are not valid JSON: %s", self.key, exc)
            return []
        if not isinstance(data, list):
            logger.error("Stored tasks under %r are not a list", self.key)
            return []

        tasks: List[Task] = []
        seen: set = set()
        for raw in data:
            task = record_to_task(raw, self.users)
            if task is None:
                self.last_dropped += 1
                continue
            if task.id in seen:
                task.id = new_task_id()
            seen.add(task.id)
            tasks.append(task)
        if self.last_dropped:
            logger.warning("Dropped %d unreadable task record(s) while loading", self.last_dropped)
        logger.info("Loaded %d task(s)", len(tasks))
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        records = [task_to_record(t) for t in tasks]
        self.store.set(self.key, json.dumps(records, ensure_ascii=False))
        logger.debug("Saved %d task(s)", len(records))


__all__ = ["TaskRepository", "record_to_task", "task_to_record"]
