"""Logging setup for storm tracker command-line execution."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text

# Lookup context passed through ``extra=``; copied onto the event when present.
CONTEXT_FIELDS = ("storm_id", "storm_name", "season", "source", "reason")


def storm_context(**fields: Any) -> dict[str, Any]:
    """Build an ``extra`` mapping, dropping empty values and unknown keys."""
    return {
        key: value
        for key, value in fields.items()
        if key in CONTEXT_FIELDS and value not in (None, "")
    }


class JsonConsoleFormatter(logging.Formatter):
    """JSON formatter: one event per line, with storm lookup context."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                event[key] = sanitize_text(str(value))
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(name: str = "storm_tracker", level: int = logging.INFO) -> logging.Logger:
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
