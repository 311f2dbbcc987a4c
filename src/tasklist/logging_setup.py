# src/tasklist/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasklist.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum level shown on the terminal, by exact logger name. Checked before prefixes.
_CONSOLE_EXACT = {
    # one line per task mutation; the REPL already echoes the result
    "tasklist.tasks.task_store": logging.WARNING,
    # one line per HTTP request
    "uvicorn.access": logging.WARNING,
    "py.warnings": logging.ERROR,
}
_CONSOLE_PREFIX = (
    ("tasklist.", logging.NOTSET),
    ("uvicorn", logging.INFO),
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the terminal readable while the REPL prompt is active.

    The file handler is not filtered; everything still lands in tasklist.log.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name in _CONSOLE_EXACT:
            return record.levelno >= _CONSOLE_EXACT[name]
        for prefix, threshold in _CONSOLE_PREFIX:
            if name.startswith(prefix):
                return record.levelno >= threshold
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasklist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the stderr and tasklist.log handlers on the root logger.

    Existing root handlers are replaced, so calling it again re-targets the log
    directory instead of duplicating output. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    return log_file
