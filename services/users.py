"""Static directory of people tasks can be assigned to."""
from __future__ import annotations

from typing import List, Sequence

from models.user import User

DEFAULT_USERS: List[User] = [
    User(id="1", name="John Doe"),
    User(id="2", name="Jane Smith"),
    User(id="3", name="Mike Johnson"),
    User(id="4", name="Sarah Wilson"),
    User(id="5", name="David Brown"),
]


def user_names(users: Sequence[User] = DEFAULT_USERS) -> List[str]:
    return [u.name for u in users]


def default_assignee(users: Sequence[User] = DEFAULT_USERS) -> str:
    """Name given to tasks that have no assignee yet."""
    return users[0].name if users else ""


def first_name(name: str) -> str:
    return (name or "").split(" ")[0]


__all__ = ["DEFAULT_USERS", "default_assignee", "first_name", "user_names"]
