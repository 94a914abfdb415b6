from __future__ import annotations

import logging
import os
import threading
from collections import deque
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any

from PLEXPORT.server.utils.constants import (
    LOG_BUFFER_SIZE,
    LOG_FILENAME,
    LOG_LEVELS,
    LOGS_PATH,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


###############################################################################
class LogBuffer:
    """Ring buffer of recent log entries shown by the admin log viewer."""

    def __init__(self, max_size: int = LOG_BUFFER_SIZE) -> None:
        self.max_size = max_size
        self.entries: deque[dict[str, Any]] = deque(maxlen=max_size)
        self.lock = threading.Lock()

    # -------------------------------------------------------------------------
    def add(self, entry: dict[str, Any]) -> None:
        with self.lock:
            self.entries.append(entry)

    # -------------------------------------------------------------------------
    def get_all(self) -> list[dict[str, Any]]:
        with self.lock:
            return list(self.entries)

    # -------------------------------------------------------------------------
    def clear(self) -> None:
        with self.lock:
            self.entries.clear()

    # -------------------------------------------------------------------------
    def get_stats(self) -> dict[str, Any]:
        by_level = dict.fromkeys(LOG_LEVELS, 0)
        entries = self.get_all()
        for entry in entries:
            level = entry.get("level", "info")
            by_level[level] = by_level.get(level, 0) + 1
        return {"total": len(entries), "byLevel": by_level, "maxSize": self.max_size}


###############################################################################
class LogBufferHandler(logging.Handler):
    def __init__(self, buffer: LogBuffer) -> None:
        super().__init__()
        self.buffer = buffer

    # -------------------------------------------------------------------------
    @staticmethod
    def map_level(levelno: int) -> str:
        if levelno >= logging.ERROR:
            return "error"
        if levelno >= logging.WARNING:
            return "warn"
        if levelno >= logging.INFO:
            return "info"
        return "debug"

    # -------------------------------------------------------------------------
    def emit(self, record: logging.LogRecord) -> None:
        try:
            timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
            self.buffer.add(
                {
                    "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
                    "level": self.map_level(record.levelno),
                    "message": record.getMessage(),
                    "context": {"logger": record.name, "module": record.module},
                }
            )
        except Exception:  # noqa: BLE001
            self.handleError(record)


# -----------------------------------------------------------------------------
def build_logger(name: str = "PLEXPORT") -> logging.Logger:
    instance = logging.getLogger(name)
    if instance.handlers:
        return instance
    instance.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    instance.addHandler(console_handler)

    try:
        os.makedirs(LOGS_PATH, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(LOGS_PATH, LOG_FILENAME),
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        instance.warning("Log directory %s is not writable, file logging disabled", LOGS_PATH)
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        instance.addHandler(file_handler)

    buffer_handler = LogBufferHandler(log_buffer)
    buffer_handler.setLevel(logging.INFO)
    instance.addHandler(buffer_handler)
    instance.propagate = False
    return instance


log_buffer = LogBuffer()
logger = build_logger()
