"""Task CRUD routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ...core.errors import NotFoundError, ValidationError
from ...tasks.task_models import UNSET
from ...tasks.task_store import TaskStore
from ..schemas import (
    ErrorDetail,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)

router = APIRouter()


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def _not_found(err: NotFoundError) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail=ErrorDetail(code=err.code, message=err.message).model_dump(),
    )


def _invalid(err: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=ErrorDetail(code=err.code, message=err.message, field=err.field).model_dump(),
    )


# --- Routes ---


@router.get("", response_model=TaskListResponse)
def list_tasks(
    status: str | None = None,
    store: TaskStore = Depends(get_task_store),
) -> TaskListResponse:
    """List tasks in creation order, optionally filtered by status."""
    try:
        tasks = store.list_tasks(status)
    except ValidationError as e:
        raise _invalid(e) from e
    return TaskListResponse(
        items=[TaskResponse.from_task(t) for t in tasks],
        total=len(tasks),
    )


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    data: TaskCreateRequest,
    store: TaskStore = Depends(get_task_store),
) -> TaskResponse:
    try:
        task = store.create_task(data.title, data.description)
    except ValidationError as e:
        raise _invalid(e) from e
    return TaskResponse.from_task(task)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, store: TaskStore = Depends(get_task_store)) -> TaskResponse:
    try:
        return TaskResponse.from_task(store.get_task(task_id))
    except NotFoundError as e:
        raise _not_found(e) from e


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    data: TaskUpdateRequest,
    store: TaskStore = Depends(get_task_store),
) -> TaskResponse:
    """
    Partial update. Only fields present in the body are applied;
    an explicit `"description": null` clears the description.
    """
    sent = data.model_fields_set
    try:
        task = store.update_task(
            task_id,
            title=data.title if "title" in sent else UNSET,
            description=data.description if "description" in sent else UNSET,
            status=data.status if "status" in sent else UNSET,
        )
    except NotFoundError as e:
        raise _not_found(e) from e
    except ValidationError as e:
        raise _invalid(e) from e
    return TaskResponse.from_task(task)


@router.post("/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(task_id: int, store: TaskStore = Depends(get_task_store)) -> TaskResponse:
    try:
        return TaskResponse.from_task(store.toggle_status(task_id))
    except NotFoundError as e:
        raise _not_found(e) from e


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: int, store: TaskStore = Depends(get_task_store)) -> Response:
    try:
        store.delete_task(task_id)
    except NotFoundError as e:
        raise _not_found(e) from e
    return Response(status_code=204)
