# src/tasklist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts connectors:
- console REPL in the main thread (optional),
- HTTP API in a background thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..connectors.http_connector import HttpBackgroundRunner, start_http_in_background
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown: a failing close must not hide the original exit path."""
    try:
        state.task_store.close()
    except Exception:
        logger.exception("Failed to close task store.")


def main() -> None:
    settings = get_settings()

    console_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    if not isinstance(console_level, int):
        console_level = logging.INFO

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    http_runner: HttpBackgroundRunner | None = None
    if settings.http_enabled:
        http_runner = start_http_in_background(state)

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    if not settings.console_enabled:
        # With the console on, Ctrl+C surfaces as KeyboardInterrupt inside input().
        signal.signal(signal.SIGINT, _handle_signal)
        if hasattr(signal, "SIGTERM"):
            signal.signal(signal.SIGTERM, _handle_signal)

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        elif http_runner is None:
            logger.warning("Console and HTTP are both disabled; nothing to run.")
        else:
            logger.info("Console disabled. Serving HTTP only. Press Ctrl+C to stop.")
            stop_main.wait()

    finally:
        if http_runner is not None:
            http_runner.stop()
            http_runner.join(timeout=10.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
