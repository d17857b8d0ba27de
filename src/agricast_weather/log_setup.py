"""Logging setup for command-line and service execution."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

ROOT_LOGGER_NAME = "agricast_weather"


class JsonConsoleFormatter(logging.Formatter):
    """Simple JSON formatter for structured console logs."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str)


def setup_logger(name: str = ROOT_LOGGER_NAME, level: int | str = logging.INFO) -> logging.Logger:
    """Create and configure a process-wide logger."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger


def get_logger(component: str) -> logging.Logger:
    """Return a child logger of the package logger for one component."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")
