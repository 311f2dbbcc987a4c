# src/tasklist/connectors/http_connector.py

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import uvicorn
from uvicorn.config import LOG_LEVELS

from ..api.app import create_app
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _uvicorn_log_level(settings) -> str:
    level = str(getattr(settings, "log_level", "INFO")).strip().lower()
    return level if level in LOG_LEVELS else "info"


@dataclass
class HttpBackgroundRunner:
    thread: threading.Thread
    server: uvicorn.Server

    def stop(self) -> None:
        self.server.should_exit = True

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_http_in_background(state: AppState) -> HttpBackgroundRunner | None:
    """
    Start the HTTP API in a background thread (so console REPL can run in parallel).

    uvicorn only installs signal handlers on the main thread, so main keeps
    ownership of SIGINT/SIGTERM and stops the server through `stop()`.
    """
    settings = state.settings
    if not getattr(settings, "http_enabled", False):
        logger.info("HTTP connector disabled, not starting.")
        return None

    app = create_app(state.task_store, title=str(getattr(settings, "app_name", "tasklist")))
    config = uvicorn.Config(
        app,
        host=settings.http_host,
        port=int(settings.http_port),
        log_config=None,  # keep our handlers from logging_setup
        log_level=_uvicorn_log_level(settings),
    )
    server = uvicorn.Server(config)

    def runner() -> None:
        try:
            server.run()
        except Exception:
            logger.exception("HTTP server crashed.")

    t = threading.Thread(target=runner, name="tasklist-http", daemon=True)
    t.start()

    logger.info(
        "HTTP background thread started on http://%s:%s/api/tasks",
        settings.http_host,
        settings.http_port,
    )
    return HttpBackgroundRunner(thread=t, server=server)
