"""Logging setup for a process that owns the terminal.

Records go to a bounded in-memory buffer that the log pane renders, and
optionally to a file. Nothing is written to stderr while the TUI is active.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from pathlib import Path

LOG_BUFFER_MAX = 200
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_PANE_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOG_PANE_DATEFMT = "%H:%M:%S"
PACKAGE_LOGGER = "lazynotes"


class LogBuffer(logging.Handler):
    """Keep the most recent formatted records in memory."""

    def __init__(self, capacity: int = LOG_BUFFER_MAX) -> None:
        super().__init__()
        self._lines: deque[str] = deque(maxlen=max(1, capacity))
        self._lines_lock = threading.Lock()
        self.setFormatter(logging.Formatter(LOG_PANE_FORMAT, datefmt=LOG_PANE_DATEFMT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        with self._lines_lock:
            self._lines.append(line)

    def lines(self, limit: int | None = None) -> list[str]:
        """Return buffered lines, oldest first (at most ``limit``)."""
        with self._lines_lock:
            snapshot = list(self._lines)
        if limit is not None:
            return snapshot[-limit:] if limit > 0 else []
        return snapshot


def configure_logging(level: int = logging.INFO, log_file: Path | None = None) -> LogBuffer:
    """Attach the buffer (and optional file handler) to the package logger."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    buffer = LogBuffer()
    logger.addHandler(buffer)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    return buffer


__all__ = ["LogBuffer", "configure_logging"]
