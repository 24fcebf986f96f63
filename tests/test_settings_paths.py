import logging
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core import settings
from core.log import get_logger, setup_logging


def test_linux_data_dir_with_xdg():
    env = {"XDG_DATA_HOME": "/tmp/xdg"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env=env,
        home=Path("/home/test"),
    )
    assert result == Path("/tmp/xdg") / "TaskPlanner"


def test_linux_data_dir_default_home():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="linux",
        env={},
        home=Path("/home/test"),
    )
    assert result == Path("/home/test/.local/share") / "TaskPlanner"


def test_macos_data_dir():
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="darwin",
        env={},
        home=Path("/Users/test"),
    )
    assert result == Path("/Users/test/Library/Application Support") / "TaskPlanner"


def test_windows_data_dir_appdata():
    env = {"APPDATA": "C:/Users/test/AppData/Roaming"}
    result = settings.get_default_data_dir(
        settings.APP_NAME,
        platform="win32",
        env=env,
        home=Path("C:/Users/test"),
    )
    assert result == Path(env["APPDATA"]) / "TaskPlanner"


def test_blank_app_name_falls_back():
    result = settings.get_default_data_dir("  ", platform="linux", env={}, home=Path("/home/test"))
    assert result.name == "app"


def test_runtime_paths_inside_data_dir():
    assert settings.DB_PATH.parent == settings.DATA_DIR
    assert settings.LOG_PATH.parent == settings.LOG_DIR
    assert settings.STORAGE.db_path == settings.DB_PATH
    assert settings.LOGGING.path == settings.LOG_PATH


def test_ensure_data_dirs_creates_directories(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(settings, "LOG_DIR", tmp_path / "data" / "logs")
    settings.ensure_data_dirs()
    assert (tmp_path / "data").is_dir()
    assert (tmp_path / "data" / "logs").is_dir()


def test_strip_geometry_defaults():
    cal = settings.UI.calendar
    assert cal.strip_base_offset == 25
    assert cal.strip_row_height == 31
    assert 8 <= cal.bar_edge_zone <= cal.strip_edge_zone <= 10
    assert cal.max_lanes is None


def test_setup_logging_writes_rotating_file(tmp_path):
    root = logging.getLogger("planner")
    saved = list(root.handlers)
    for h in saved:
        root.removeHandler(h)
    log_file = tmp_path / "logs" / "planner.log"
    try:
        setup_logging(log_file, "DEBUG")
        setup_logging(log_file, "DEBUG")
        assert len(root.handlers) == 1
        get_logger("test").info("hello from the test")
        for h in root.handlers:
            h.flush()
        assert "hello from the test" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
