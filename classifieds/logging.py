"""Logging setup for the marketplace.

Marketplace events carry context through ``extra``::

    logger.info("Posted ad %d", ad.id, extra={"ad_id": ad.id, "user_id": owner_id})

Both formatters render the fields listed in ``CONTEXT_FIELDS``: the JSON
formatter as top-level keys, the standard one as a ``[key=value ...]``
suffix. Records without context are formatted as usual.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import IO, Any

ROOT_LOGGER = "classifieds"

CONTEXT_FIELDS = ("ad_id", "user_id", "price", "outcome")

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _context(record: logging.LogRecord) -> dict[str, Any]:
    context = {}
    for name in CONTEXT_FIELDS:
        value = getattr(record, name, None)
        if value is None:
            continue
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, Enum):
            value = value.value
        context[name] = value
    return context


class ContextFormatter(logging.Formatter):
    """Plain-text formatter that appends marketplace context."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        return f"{line} [{pairs}]"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, context fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: IO[str] | None = None,
) -> None:
    """Configure logging for classifieds.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO.
    format_type : str
        "standard" or "json".
    stream : IO[str] | None
        Where records go. Defaults to stderr, which keeps the interactive
        menu on stdout readable.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = ContextFormatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger(ROOT_LOGGER).setLevel(log_level)

    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` inside the ``classifieds`` hierarchy.

    Names outside it (scripts, ``__main__``) are nested under
    ``classifieds`` so the level set by ``setup_logging`` applies.
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
