# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the task repository (SQLite file or in-memory),
- wires repository + logger into the TaskStore held by AppState.
"""

from __future__ import annotations

import logging

from ..config import STORAGE_MEMORY, STORAGE_SQLITE, get_settings
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..tasks.task_repo import MemoryTaskRepo, SqliteTaskRepo
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_task_repo(settings) -> TaskRepo:
    storage = str(getattr(settings, "storage", STORAGE_SQLITE)).lower()
    if storage == STORAGE_MEMORY:
        logger.info("Using in-memory task storage (nothing is persisted).")
        return MemoryTaskRepo()
    if storage != STORAGE_SQLITE:
        logger.warning("Unknown storage kind %r, falling back to %s.", storage, STORAGE_SQLITE)
    return SqliteTaskRepo(settings.tasks_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(
        create_task_repo(settings),
        logger=logging.getLogger("tasklist.tasks.task_store"),
    )
    return AppState(settings=settings, task_store=store)
