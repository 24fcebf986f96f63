"""Models exposed by the Task Planner application."""
from .kv_entry import KeyValueEntry
from .task import Task, TaskDraft
from .user import User

__all__ = ["KeyValueEntry", "Task", "TaskDraft", "User"]
