# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on a Protocol instead of a concrete storage backend.
This keeps persistence swappable (SQLite file, in-memory) and makes testing easier.
"""

from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task, TaskStatus

Clock = Callable[[], float]
# Returns epoch seconds; time.time in production, a fake in tests.


class TaskRepo(Protocol):
    """
    Persistence collaborator for the task store.

    Contract:
    - insert_task assigns a fresh id that was never handed out before
      (not even to a task that has since been deleted).
    - get_task returns None for a missing id (the store translates that into NotFoundError).
    - update_task / delete_task return False when no row matched.
    - list_tasks returns insertion order.
    """

    def insert_task(
            self,
            *,
            title: str,
            description: str | None,
            status: TaskStatus,
            created_at: float,
            updated_at: float,
    ) -> Task: ...

    def get_task(self, task_id: int) -> Task | None: ...

    def list_tasks(self, *, status: TaskStatus | None = None) -> list[Task]: ...

    def update_task(self, task_id: int, fields: dict[str, Any]) -> bool: ...

    def delete_task(self, task_id: int) -> bool: ...

    def count_tasks(self) -> int: ...

    def close(self) -> None: ...
