# tests/test_task_repo.py

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from tasklist.tasks.task_models import TaskStatus
from tasklist.tasks.task_repo import MemoryTaskRepo, SqliteTaskRepo
from tasklist.tasks.task_store import TaskStore

from .fakes import FakeClock


def test_sqlite_tasks_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(SqliteTaskRepo(db), clock=FakeClock())
    a = store.create_task("Buy milk", "2 litres")
    b = store.create_task("Call mum")
    store.toggle_status(b.id)

    reopened = TaskStore(SqliteTaskRepo(db), clock=FakeClock())
    tasks = reopened.list_tasks()

    assert [t.id for t in tasks] == [a.id, b.id]
    assert tasks[0].description == "2 litres"
    assert tasks[1].status is TaskStatus.COMPLETED
    assert tasks[1].updated_at > tasks[1].created_at


def test_sqlite_deleted_id_not_reused_after_reopen(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(SqliteTaskRepo(db))
    first = store.create_task("first")
    last = store.create_task("last")
    store.delete_task(last.id)

    reopened = TaskStore(SqliteTaskRepo(db))
    fresh = reopened.create_task("fresh")

    assert fresh.id not in (first.id, last.id)
    assert fresh.id > last.id


def test_sqlite_migrates_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE tasks (id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT NOT NULL)")
    conn.execute("INSERT INTO tasks(title) VALUES ('legacy')")
    conn.commit()
    conn.close()

    repo = SqliteTaskRepo(db)
    (task,) = repo.list_tasks()

    assert task.title == "legacy"
    assert task.description is None
    assert task.status is TaskStatus.ACTIVE
    assert task.updated_at >= task.created_at


def test_sqlite_unknown_status_reads_as_active(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    repo = SqliteTaskRepo(db)
    task = repo.insert_task(
        title="x", description=None, status=TaskStatus.ACTIVE, created_at=1.0, updated_at=1.0
    )
    conn = sqlite3.connect(db)
    conn.execute("UPDATE tasks SET status = 'weird' WHERE id = ?", (task.id,))
    conn.commit()
    conn.close()

    loaded = repo.get_task(task.id)
    assert loaded is not None
    assert loaded.status is TaskStatus.ACTIVE


@pytest.mark.parametrize("repo_factory", ["memory", "sqlite"])
def test_repo_rejects_unknown_fields(tmp_path: Path, repo_factory: str) -> None:
    repo = MemoryTaskRepo() if repo_factory == "memory" else SqliteTaskRepo(tmp_path / "t.sqlite3")
    task = repo.insert_task(
        title="x", description=None, status=TaskStatus.ACTIVE, created_at=1.0, updated_at=1.0
    )

    with pytest.raises(ValueError):
        repo.update_task(task.id, {"id": 99})
    with pytest.raises(ValueError):
        repo.update_task(task.id, {"created_at": 5.0})


@pytest.mark.parametrize("repo_factory", ["memory", "sqlite"])
def test_repo_reports_missing_rows(tmp_path: Path, repo_factory: str) -> None:
    repo = MemoryTaskRepo() if repo_factory == "memory" else SqliteTaskRepo(tmp_path / "t.sqlite3")

    assert repo.get_task(1) is None
    assert repo.update_task(1, {"title": "x"}) is False
    assert repo.delete_task(1) is False
    assert repo.count_tasks() == 0
