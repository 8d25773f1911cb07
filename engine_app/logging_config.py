"""Structured JSON logging for engine diagnostics.

Every engine event is a JSON line carrying the event name, the active
operation and a correlation id, with event fields nested under ``data``.
Catalog details that may identify a user (brand, price, notes, image urls)
are masked before they reach a handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator, Optional

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)
OPERATION: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("operation", default=None)

# Attributes every LogRecord carries; anything else was passed through ``extra``.
_RECORD_ATTRS = set(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}
_SENSITIVE_KEYS = frozenset({"user_id", "email", "image_url", "notes", "brand", "price"})
_EMAIL_PATTERN = re.compile(r"[\w.\-]+@[\w.\-]+")
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "operation": getattr(record, "operation", None) or OPERATION.get(),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        data = dict(getattr(record, "data", None) or {})
        data.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in payload and key != "data"
        )
        if data:
            payload["data"] = redact_for_log(data)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def configure_logging(level: int | str | None = None, fmt: str | None = None) -> None:
    """Install a single stream handler on the root logger.

    ``LOG_LEVEL`` and ``LOG_FORMAT`` (``json`` or ``plain``) are read from the
    environment when not passed explicitly.
    """

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    desired_format = (fmt or os.getenv("LOG_FORMAT", "json")).lower()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if desired_format == "json" else logging.Formatter(_PLAIN_FORMAT))
    logging.basicConfig(level=desired_level, handlers=[handler], force=True)


def _redact_string(value: str) -> str:
    if _EMAIL_PATTERN.search(value):
        return _EMAIL_PATTERN.sub("[redacted-email]", value)
    if value.lower().startswith(("http://", "https://")):
        return "[redacted-url]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Recursively mask sensitive keys and email/url strings."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _redact_string(payload)
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    return str(payload)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind ``correlation_id`` (or a fresh one) for the duration of the block."""

    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Tag logs emitted inside the block with ``name``.

    Nested operations keep the caller's correlation id so one engine call can
    be followed end to end.
    """

    operation_token = OPERATION.set(name)
    try:
        with correlation_context(correlation_id or CORRELATION_ID.get()) as scoped_id:
            yield scoped_id
    finally:
        OPERATION.reset(operation_token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with ``fields`` attached as structured data."""

    correlation_id = fields.pop("correlation_id", None) or CORRELATION_ID.get()
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={
            "event": event,
            "operation": OPERATION.get(),
            "correlation_id": correlation_id,
            "data": redact_for_log(fields),
        },
    )


__all__ = [
    "CORRELATION_ID",
    "OPERATION",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
