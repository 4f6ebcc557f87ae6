"""Stdout logging configuration for blobfs components.

Log lines carry three layers of fields: core fields (timestamp, level,
logger, message), the bound ``log_context`` and any ``extra=`` mapping passed
at the call site. Later layers win on key collisions.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from packages.blobfs_shared.config import LoggingSettings

from . import fields
from .context import bind_context, get_context

# Loggers owned by the Azure SDK; its HTTP policy logs every request at INFO.
SDK_LOGGER_NAMES: tuple[str, ...] = ("azure",)

_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
    ).__dict__
) | {"message", "asctime", "context"}


class ContextFilter(logging.Filter):
    """Attach the bound logging context to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = get_context()
        return True


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return bound context merged with call-site ``extra=`` fields."""
    merged: dict[str, Any] = {}
    context = getattr(record, "context", None)
    if isinstance(context, dict):
        merged.update(context)
    for key, value in record.__dict__.items():
        if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_"):
            merged[key] = value
    return merged


class JsonFormatter(logging.Formatter):
    """Newline-delimited JSON with stable core fields first."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.now(UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        payload.update(record_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Human-readable line followed by sorted ``key=value`` fields."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra = record_fields(record)
        if not extra:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(extra.items()))
        return f"{message} {suffix}"


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    sdk_level: str = "WARNING",
) -> None:
    """Route all logging to one stdout handler.

    Calling again replaces the handler rather than adding a second one.
    ``sdk_level`` caps the Azure SDK loggers independently of ``level``.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if json_output else PlainFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in SDK_LOGGER_NAMES:
        logging.getLogger(name).setLevel(sdk_level.upper())

    bind_context(
        **{fields.SERVICE: service or None, fields.ENVIRONMENT: environment or None}
    )


def configure_logging_from_settings(settings: LoggingSettings) -> None:
    """Apply ``logging.*`` settings to the root logger."""
    configure_logging(
        level=settings.level,
        json_output=settings.json_output,
        service=settings.service,
        environment=settings.environment,
        sdk_level=settings.sdk_level,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger from the standard logging hierarchy."""
    return logging.getLogger(name)
