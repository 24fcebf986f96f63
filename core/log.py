"""Logging setup shared by the services and the UI."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.settings import LOGGING, ensure_data_dirs

ROOT_LOGGER = "planner"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(path: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Attach the rotating file handler to the ``planner`` logger once."""

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        target = Path(path or LOGGING.path)
        if path is None:
            ensure_data_dirs()
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=LOGGING.max_bytes,
            backupCount=LOGGING.backup_count,
            encoding="utf-8",
        )
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(level or LOGGING.level)
    return logger


__all__ = ["get_logger", "setup_logging"]
