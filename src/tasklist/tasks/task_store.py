# src/tasklist/tasks/task_store.py

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from ..core.errors import NotFoundError, ValidationError
from ..core.ports import Clock, TaskRepo
from .task_models import UNSET, Task, TaskStatus

_MIN_TICK = 1e-6


def _clean_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("title is required and must not be empty", field="title")
    return title.strip()


def _clean_description(description: Any) -> str | None:
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationError("description must be text", field="description")
    return description.strip() or None


def _clean_status(status: Any) -> TaskStatus:
    parsed = TaskStatus.parse(status)
    if parsed is None:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(f"status must be one of: {allowed} (got {status!r})", field="status")
    return parsed


class TaskStore:
    """
    Owns the task collection and its CRUD operations.

    Persistence and logging are injected: `repo` is any TaskRepo, `logger`
    defaults to this module's logger. All operations run under one re-entrant
    lock, so a read-check-write on a task id never interleaves with another
    mutation (console and HTTP threads share one store).

    Timestamps are epoch seconds from `clock`. A mutation always moves
    updated_at strictly forward, even when the clock has not advanced.
    """

    def __init__(
        self,
        repo: TaskRepo,
        *,
        clock: Clock = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

    def close(self) -> None:
        self._repo.close()

    # ---- helpers ----

    def _require(self, task_id: int) -> Task:
        task = self._repo.get_task(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def _next_updated_at(self, task: Task) -> float:
        now = float(self._clock())
        if now <= task.updated_at:
            now = task.updated_at + _MIN_TICK
        return now

    def _write(self, task: Task, fields: dict[str, Any]) -> Task:
        fields["updated_at"] = self._next_updated_at(task)
        if not self._repo.update_task(task.id, fields):
            # Row vanished between read and write: only possible if another
            # process shares the database file.
            raise NotFoundError(task.id)
        return self._require(task.id)

    # ---- queries ----

    def list_tasks(self, status: TaskStatus | str | None = None) -> list[Task]:
        """All tasks in insertion order, optionally only those with `status`."""
        wanted = None if status is None else _clean_status(status)
        with self._lock:
            return self._repo.list_tasks(status=wanted)

    def count_tasks(self) -> int:
        with self._lock:
            return self._repo.count_tasks()

    def get_task(self, task_id: int) -> Task:
        with self._lock:
            return self._require(task_id)

    # ---- mutations ----

    def create_task(self, title: str, description: str | None = None) -> Task:
        clean_title = _clean_title(title)
        clean_description = _clean_description(description)

        with self._lock:
            now = float(self._clock())
            task = self._repo.insert_task(
                title=clean_title,
                description=clean_description,
                status=TaskStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )
        self._log.info("Task created id=%s", task.id)
        return task

    def update_task(
        self,
        task_id: int,
        *,
        title: Any = UNSET,
        description: Any = UNSET,
        status: Any = UNSET,
    ) -> Task:
        """
        Apply only the supplied fields.

        Pass description=None to clear it; leave it out to keep it.
        """
        with self._lock:
            task = self._require(task_id)

            fields: dict[str, Any] = {}
            if title is not UNSET:
                fields["title"] = _clean_title(title)
            if description is not UNSET:
                fields["description"] = _clean_description(description)
            if status is not UNSET:
                fields["status"] = _clean_status(status)

            updated = self._write(task, fields)
        self._log.info("Task updated id=%s fields=%s", task_id, sorted(fields))
        return updated

    def toggle_status(self, task_id: int) -> Task:
        with self._lock:
            task = self._require(task_id)
            updated = self._write(task, {"status": task.status.toggled()})
        self._log.info("Task toggled id=%s status=%s", task_id, updated.status.value)
        return updated

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            if not self._repo.delete_task(task_id):
                raise NotFoundError(task_id)
        self._log.info("Task deleted id=%s", task_id)
