"""Structured JSON logger for imghost.

Every record is emitted as a single-line JSON object.  Structured fields are
passed through ``extra={"extra_fields": {...}}`` and are run through
:func:`imghost.utils.redact.redact` before serialisation, so a credential
that slips into a log call is masked rather than written out.

Typical output::

    {"ts": "2026-01-01T12:00:00.123456+00:00", "level": "INFO",
     "logger": "imghost.upload", "message": "upload complete",
     "provider": "catbox", "size_bytes": 48213}

Usage::

    from imghost.observability import get_logger

    log = get_logger("imghost.providers")
    log.info("upload started", extra={"extra_fields": {"provider": "imgur"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from imghost.utils.redact import redact


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts`` (ISO-8601 UTC), ``level``, ``logger``,
    ``message``.  ``exception`` and ``stack_info`` are added when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            log_entry.update(redact(extra_fields))

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# One handler per logger name so repeated get_logger calls stay idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "imghost",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name, ``"imghost"`` or a dotted child such as
        ``"imghost.transport"``.
    level:
        Minimum level, as an ``int`` or a case-insensitive name.  Applied
        only the first time a given *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper()) if isinstance(level, str) else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger


def set_level(level: int | str) -> None:
    """Set *level* on every logger created through :func:`get_logger`."""
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    for name in _configured_loggers:
        logging.getLogger(name).setLevel(resolved)
