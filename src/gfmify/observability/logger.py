"""Structured JSON logging for gfmify.

Library modules log through plain child loggers (``gfmify.math``,
``gfmify.sanitize``, ...) and never configure handlers themselves.  Call
:func:`get_logger` once to attach a JSON handler to the ``gfmify`` logger;
every child record then propagates to it as a single-line JSON object::

    {"ts": "2026-10-17T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "gfmify.math", "message": "math rendering failed",
     "display": "block", "expression": "\\\\frac{1}", "error": "..."}

Usage::

    from gfmify.observability import get_logger

    get_logger(level="WARNING")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Structured fields passed with
    ``extra={"extra_fields": {...}}`` are merged into the top-level object;
    ``exc_info`` and ``stack_info`` are serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name so that repeated ``get_logger`` calls never
# stack duplicate handlers.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "gfmify",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"gfmify"``, the parent of every logger
        the library uses internally.
    level:
        Minimum log level, as an ``int`` or a case-insensitive name.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The logger, with a :class:`StructuredFormatter` handler attached on
        the first call for *name*.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
