"""Logging setup for croncalc.

Library modules log through ``logging.getLogger(__name__)`` under the
``croncalc`` namespace and never touch the root logger. Applications call
:func:`configure_logging` once to attach a console handler with either a
plain text or a JSON-lines format.

Usage:
    >>> from croncalc.infrastructure.logging import configure_logging
    >>> configure_logging(level="debug", format="json")
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, TextIO

ROOT_LOGGER_NAME = "croncalc"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_lock = threading.Lock()
_handler: logging.Handler | None = None


# =============================================================================
# Log Levels
# =============================================================================


class LogLevel(IntEnum):
    """Log severity levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_string(cls, level: str) -> "LogLevel":
        """Convert string to LogLevel (unknown names map to INFO)."""
        mapping = {
            "debug": cls.DEBUG,
            "info": cls.INFO,
            "warning": cls.WARNING,
            "warn": cls.WARNING,
            "error": cls.ERROR,
            "critical": cls.CRITICAL,
            "fatal": cls.CRITICAL,
        }
        return mapping.get(level.lower(), cls.INFO)


# =============================================================================
# Formatters
# =============================================================================


class JSONFormatter(logging.Formatter):
    """JSON log formatter.

    Outputs logs as JSON objects, one per line.

    Example output:
        {"timestamp":"2024-01-15T10:30:00+00:00","level":"debug","logger":"croncalc.expression","message":"..."}
    """

    def __init__(self, *, sort_keys: bool = False) -> None:
        super().__init__()
        self._sort_keys = sort_keys

    def format(self, record: logging.LogRecord) -> str:
        """Format record as JSON."""
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, sort_keys=self._sort_keys, default=str)


def _make_formatter(format: str) -> logging.Formatter:
    if format == "json":
        return JSONFormatter()
    if format == "text":
        return logging.Formatter(TEXT_FORMAT)
    raise ValueError(f"Unknown log format: {format!r} (expected 'text' or 'json')")


# =============================================================================
# Configuration
# =============================================================================


def configure_logging(
    *,
    level: str | int = LogLevel.INFO,
    format: str = "text",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``croncalc`` logger.

    Calling this again replaces the handler installed by the previous call
    instead of stacking a second one.

    Args:
        level: Log level name or number.
        format: Output format (text, json).
        stream: Destination stream (default: stderr).

    Returns:
        The configured ``croncalc`` logger.
    """
    global _handler

    if isinstance(level, str):
        level = LogLevel.from_string(level)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_make_formatter(format))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
        logger.addHandler(handler)
        logger.setLevel(int(level))
        _handler = handler
    return logger


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`."""
    global _handler

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
            _handler = None
        logger.setLevel(logging.NOTSET)
