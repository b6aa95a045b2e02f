"""Structured JSON logging for the command line and embedding applications."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TextIO
from uuid import uuid4

__all__ = ["JsonFormatter", "configure_logging"]

PACKAGE_LOGGER_NAME = "llm_footprint"

_STRUCTURED_RESERVED_KEYS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


class JsonFormatter(logging.Formatter):
    """Render log records as JSON with the ``extra`` fields as context."""

    def __init__(self, *, default_trace_id: str | None = None) -> None:
        super().__init__()
        self._default_trace_id = default_trace_id

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        trace_id = getattr(record, "trace_id", None) or self._default_trace_id

        context: dict[str, object] = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STRUCTURED_RESERVED_KEYS and key != "trace_id"
        }

        payload: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "trace_id": trace_id,
            "context": context,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text

        return json.dumps(payload, default=str)


def configure_logging(
    level: int | str = logging.WARNING,
    *,
    stream: TextIO | None = None,
    trace_id: str | None = None,
) -> logging.Logger:
    """Attach a JSON handler to the package logger.

    Calling it again replaces the handler installed by the previous call
    instead of stacking a second one.

    Args:
        level: Logging level name or number.
        stream: Destination stream; ``sys.stderr`` when omitted.
        trace_id: Identifier stamped on every record; generated when omitted.

    Returns:
        The configured package logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_llm_footprint_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter(default_trace_id=trace_id or str(uuid4())))
    handler._llm_footprint_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
