"""Request/response models for the task HTTP API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from ..tasks.task_models import Task

StatusValue = Literal["active", "completed"]


# Request fields are loosely typed: the store validates them and reports
# a 400 validation_error naming the field, never a pydantic 422.
class TaskCreateRequest(BaseModel):
    title: Any = None
    description: Any = None


class TaskUpdateRequest(BaseModel):
    title: Any = None
    description: Any = None
    status: Any = None


class TaskResponse(BaseModel):
    id: int
    title: str
    description: str | None
    status: StatusValue
    created_at: float
    updated_at: float

    @classmethod
    def from_task(cls, task: Task) -> TaskResponse:
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskListResponse(BaseModel):
    items: list[TaskResponse]
    total: int


class ErrorDetail(BaseModel):
    code: str
    message: str
    field: str | None = None
