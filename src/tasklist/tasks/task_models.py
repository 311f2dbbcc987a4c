# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Only two values exist; toggling flips between them.
    """

    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus | None:
        """Return the matching status, or None for anything else."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None

    def toggled(self) -> TaskStatus:
        return TaskStatus.COMPLETED if self is TaskStatus.ACTIVE else TaskStatus.ACTIVE


class _Unset:
    """Marker for "field not supplied" in partial updates."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    description: str | None
    status: TaskStatus
    created_at: float
    updated_at: float

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED
