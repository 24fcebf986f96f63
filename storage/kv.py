"""Durable key-value storage on top of the application database."""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from sqlmodel import Session, select

from models.kv_entry import KeyValueEntry
from storage.db import get_session
from utils.datetime_utils import utc_now


class KeyValueStore:
    """String values addressed by string keys, one row per key."""

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            row = session.get(KeyValueEntry, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as session:
            row = session.get(KeyValueEntry, key)
            if row is None:
                row = KeyValueEntry(key=key, value=value)
            else:
                row.value = value
                row.updated_at = utc_now()
            session.add(row)
            session.commit()

    def delete(self, key: str) -> None:
        with self._session_factory() as session:
            row = session.get(KeyValueEntry, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def keys(self) -> Iterable[str]:
        with self._session_factory() as session:
            return [row.key for row in session.exec(select(KeyValueEntry))]


__all__ = ["KeyValueStore"]
