# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasklist.core.state import AppState
from tasklist.tasks.task_repo import MemoryTaskRepo, SqliteTaskRepo
from tasklist.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and connectors.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        console_enabled=True,
        http_enabled=False,
        http_host="127.0.0.1",
        http_port=8000,
        storage="sqlite",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def memory_store(clock: FakeClock) -> TaskStore:
    return TaskStore(MemoryTaskRepo(), clock=clock)


@pytest.fixture()
def sqlite_store(settings: SimpleNamespace, clock: FakeClock) -> TaskStore:
    return TaskStore(SqliteTaskRepo(settings.tasks_db_path), clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest) -> TaskStore:
    """The same behaviour is expected from every repository backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture()
def state(settings: SimpleNamespace, sqlite_store: TaskStore) -> AppState:
    """
    AppState wired like bootstrap does.

    NOTE: We keep the real SQLite repo here because its correctness
    is part of what we want to test.
    """
    return AppState(settings=settings, task_store=sqlite_store)
