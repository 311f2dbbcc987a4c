"""FastAPI application factory for the task HTTP API."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.errors import ValidationError
from ..tasks.task_store import TaskStore
from .routes import tasks
from .schemas import ErrorDetail

logger = logging.getLogger(__name__)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies/params get the same 400 shape as store validation errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    detail = ErrorDetail(
        code=ValidationError.code,
        message=str(first.get("msg", "invalid request")),
        field=loc[-1] if loc else None,
    )
    return JSONResponse(status_code=400, content={"detail": detail.model_dump()})


def create_app(store: TaskStore, *, title: str = "tasklist") -> FastAPI:
    """
    Build the app around an already-wired TaskStore.

    The store is shared with the console connector, so the app never closes it.
    """
    app = FastAPI(title=title, version=__version__, docs_url="/docs", redoc_url=None)
    app.state.task_store = store

    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        return {"status": "ok", "tasks": store.count_tasks()}

    logger.debug("HTTP app created title=%s", title)
    return app
