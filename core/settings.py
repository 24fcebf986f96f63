"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-").replace(" ", "")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = home_dir / "Library" / "Application Support"
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return base.expanduser() / sanitized


APP_NAME = "Task Planner"


DATA_DIR = get_default_data_dir(APP_NAME)
LOG_DIR = DATA_DIR / "logs"

DB_PATH = DATA_DIR / "planner.db"
LOG_PATH = LOG_DIR / "planner.log"


def ensure_data_dirs() -> None:
    for _dir in (DATA_DIR, LOG_DIR):
        _dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class ThemeColors:
    outline: str = "#E5E7EB"
    text_subtle: str = "#6B7280"
    muted_bg: str = "#F8FAFC"
    today_bg: str = "#EEF2FF"
    today_border: str = "#4F46E5"
    selection_bg: str = "#DBEAFE"
    selection_border: str = "#93C5FD"
    drop_bg: str = "#DCFCE7"
    drop_border: str = "#4ADE80"
    resize_bg: str = "#FFEDD5"
    resize_border: str = "#FDBA74"
    strip_text: str = "#FFFFFF"


@dataclass(frozen=True)
class CalendarUISettings:
    # week strips: top = strip_base_offset + lane * strip_row_height
    strip_base_offset: int = 25
    strip_row_height: int = 31
    strip_height: int = 28
    strip_edge_zone: int = 10
    # single-day bars are mapped with a fixed pixel width per day
    bar_edge_zone: int = 8
    bar_day_width: int = 150
    # None: as many lanes as fit in a week row, the rest become "+N more"
    max_lanes: Optional[int] = None
    cell_min_height: int = 140
    header_height: int = 36
    grid_padding: int = 12


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "light"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 900
    window_min_height: int = 600
    filter_panel_width: int = 256
    dialog_width: int = 460
    theme: ThemeColors = ThemeColors()
    calendar: CalendarUISettings = CalendarUISettings()


UI = UISettings()


@dataclass(frozen=True)
class StorageSettings:
    db_path: Path = DB_PATH
    tasks_key: str = "task-planner-tasks"


STORAGE = StorageSettings()


@dataclass(frozen=True)
class LoggingSettings:
    path: Path = LOG_PATH
    level: str = "INFO"
    max_bytes: int = 1_000_000
    backup_count: int = 3


LOGGING = LoggingSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "LOG_PATH",
    "UI",
    "STORAGE",
    "LOGGING",
    "ensure_data_dirs",
    "get_default_data_dir",
]
