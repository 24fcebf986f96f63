# planner/storage/db.py
from sqlmodel import SQLModel, create_engine, Session

from core.settings import STORAGE, ensure_data_dirs

# Ensure SQLModel metadata is populated
import models.kv_entry  # noqa: F401


_engine = create_engine(f"sqlite:///{STORAGE.db_path.as_posix()}", echo=False)


def init_db():
    ensure_data_dirs()
    STORAGE.db_path.parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(_engine)


def get_session() -> Session:
    return Session(_engine)
