# src/tasklist/core/errors.py

"""
Error kinds raised by the task store.

Both are caller errors: they are surfaced as-is and never retried.
Storage failures (sqlite3.Error etc.) are not wrapped and propagate unchanged.
"""

from __future__ import annotations


class TaskError(Exception):
    code = "task_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskError):
    """Input violates a stated constraint (empty title, unknown status...)."""

    code = "validation_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(TaskError):
    """The operation targets a task id that does not exist."""

    code = "not_found"

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found.")
        self.task_id = task_id
