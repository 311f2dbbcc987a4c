# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tasklist.cli.bootstrap import create_initial_state, create_task_repo
from tasklist.config import Settings
from tasklist.logging_setup import _ConsoleNoiseFilter, setup_logging
from tasklist.tasks.task_repo import MemoryTaskRepo, SqliteTaskRepo


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "APP_NAME",
        "LOG_LEVEL",
        "CONSOLE_ENABLED",
        "HTTP_ENABLED",
        "HTTP_HOST",
        "HTTP_PORT",
        "STORAGE",
        "DATA_DIR",
        "TASKS_DB_PATH",
    ):
        monkeypatch.delenv(f"TASKLIST_{name}", raising=False)
    return monkeypatch


def test_settings_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()

    assert s.app_name == "tasklist"
    assert s.log_level == "INFO"
    assert s.console_enabled is True
    assert s.http_enabled is False
    assert (s.http_host, s.http_port) == ("127.0.0.1", 8000)
    assert s.storage == "sqlite"
    assert s.data_dir == Path(".local/tasklist")
    assert s.tasks_db_path == Path(".local/tasklist") / "tasks.sqlite3"


def test_settings_env_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TASKLIST_HTTP_ENABLED", "yes")
    clean_env.setenv("TASKLIST_CONSOLE_ENABLED", "off")
    clean_env.setenv("TASKLIST_HTTP_PORT", "9090")
    clean_env.setenv("TASKLIST_STORAGE", "Memory")
    clean_env.setenv("TASKLIST_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASKLIST_LOG_LEVEL", "debug")

    s = Settings.from_env()

    assert s.http_enabled is True
    assert s.console_enabled is False
    assert s.http_port == 9090
    assert s.storage == "memory"
    assert s.log_level == "DEBUG"
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"


@pytest.mark.parametrize("raw", ["not-a-number", "0", "70000"])
def test_settings_bad_port_falls_back(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("TASKLIST_HTTP_PORT", raw)
    assert Settings.from_env().http_port == 8000


def test_create_task_repo_picks_backend(settings, caplog: pytest.LogCaptureFixture) -> None:
    settings.storage = "memory"
    assert isinstance(create_task_repo(settings), MemoryTaskRepo)

    settings.storage = "sqlite"
    assert isinstance(create_task_repo(settings), SqliteTaskRepo)

    settings.storage = "redis"
    with caplog.at_level(logging.WARNING, logger="tasklist.cli.bootstrap"):
        repo = create_task_repo(settings)
    assert isinstance(repo, SqliteTaskRepo)
    assert "Unknown storage kind 'redis'" in caplog.text


def test_create_initial_state_persists_between_runs(settings) -> None:
    first = create_initial_state(settings=settings)
    task = first.task_store.create_task("persist me")

    second = create_initial_state(settings=settings)
    assert second.task_store.get_task(task.id).title == "persist me"
    assert settings.tasks_db_path.exists()


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)
        logging.getLogger("tasklist.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


@pytest.mark.parametrize("raw", ["verbose", "trace", "  "])
def test_settings_unknown_log_level_falls_back(clean_env: pytest.MonkeyPatch, raw: str) -> None:
    clean_env.setenv("TASKLIST_LOG_LEVEL", raw)
    assert Settings.from_env().log_level == "INFO"


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("tasklist.cli.main", logging.INFO, True),
        ("tasklist.tasks.task_store", logging.INFO, False),
        ("tasklist.tasks.task_store", logging.WARNING, True),
        ("uvicorn.access", logging.INFO, False),
        ("uvicorn.error", logging.INFO, True),
        ("py.warnings", logging.WARNING, False),
        ("httpx", logging.WARNING, False),
        ("httpx", logging.ERROR, True),
    ],
)
def test_console_noise_filter(name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown
