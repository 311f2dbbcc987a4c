# src/tasklist/tasks/task_repo.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any

from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)

# Columns the store is allowed to change after creation.
_MUTABLE_FIELDS = frozenset({"title", "description", "status", "updated_at"})


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - _MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update task fields: {sorted(unknown)}")


class SqliteTaskRepo:
    """
    SQLite task repository.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Ids come from INTEGER PRIMARY KEY AUTOINCREMENT, so SQLite never hands out
    an id again once it was used, even after the row is deleted and the file reopened.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteTaskRepo ready db=%s total=%s", self._db_path, self.count_tasks())

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL DEFAULT 'active',
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskRepo migration: added column %s", name)

            add_col("description", "TEXT")
            add_col("status", "TEXT NOT NULL DEFAULT 'active'")
            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        status = TaskStatus.parse(row["status"])
        if status is None:
            logger.warning("Unknown status %r for task id=%s; reading as active.", row["status"], row["id"])
            status = TaskStatus.ACTIVE
        created_at = float(row["created_at"] or 0.0)
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=row["description"],
            status=status,
            created_at=created_at,
            updated_at=max(created_at, float(row["updated_at"] or 0.0)),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def insert_task(
        self,
        *,
        title: str,
        description: str | None,
        status: TaskStatus,
        created_at: float,
        updated_at: float,
    ) -> Task:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(title, description, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (title, description, status.value, float(created_at), float(updated_at)),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug("Task row inserted id=%s status=%s", task_id, status.value)
            return Task(
                id=task_id,
                title=title,
                description=description,
                status=status,
                created_at=float(created_at),
                updated_at=float(updated_at),
            )
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self, *, status: TaskStatus | None = None) -> list[Task]:
        """Tasks in insertion order (ids are monotonic, so ORDER BY id)."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if status is None:
                cur.execute("SELECT * FROM tasks ORDER BY id ASC")
            else:
                cur.execute(
                    "SELECT * FROM tasks WHERE status = ? ORDER BY id ASC",
                    (status.value,),
                )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_task(self, task_id: int, fields: dict[str, Any]) -> bool:
        _check_fields(fields)
        if not fields:
            return self.get_task(task_id) is not None

        assignments: list[str] = []
        params: list[Any] = []
        for name, value in fields.items():
            assignments.append(f"{name} = ?")
            params.append(value.value if isinstance(value, TaskStatus) else value)
        params.append(int(task_id))

        sql = f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()


class MemoryTaskRepo:
    """
    In-process repository: an insertion-ordered dict plus a monotonic id counter.

    Nothing survives the process; used for tests and TASKLIST_STORAGE=memory.
    """

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._last_id = 0
        self._lock = threading.Lock()

    def close(self) -> None:
        return

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def insert_task(
        self,
        *,
        title: str,
        description: str | None,
        status: TaskStatus,
        created_at: float,
        updated_at: float,
    ) -> Task:
        with self._lock:
            self._last_id += 1
            task = Task(
                id=self._last_id,
                title=title,
                description=description,
                status=status,
                created_at=float(created_at),
                updated_at=float(updated_at),
            )
            self._tasks[task.id] = task
            return task

    def get_task(self, task_id: int) -> Task | None:
        with self._lock:
            return self._tasks.get(task_id)

    def list_tasks(self, *, status: TaskStatus | None = None) -> list[Task]:
        with self._lock:
            return [t for t in self._tasks.values() if status is None or t.status is status]

    def update_task(self, task_id: int, fields: dict[str, Any]) -> bool:
        _check_fields(fields)
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return False
            self._tasks[task_id] = replace(task, **fields)
            return True

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None
