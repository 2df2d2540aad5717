"""
Logging utilities for sqlpaginate.

The library itself only emits DEBUG records (the SQL it builds, the rows it
drains) through module loggers and never configures handlers on import.
Applications and the CLI call ``configure_logging`` once, choosing between a
human-readable console format and JSON lines.

Usage:
    from sqlpaginate.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_logs=True)
    log = get_logger(__name__)
    log.debug("built sql", extra={"table": "employees", "arg_count": 2})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

# Attributes every LogRecord has; anything else was passed through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as JSON string."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    for key, value in vars(record).items():
        if key in _RESERVED_ATTRS or key == "extra":
            continue
        payload[key] = value
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


# Logger every sqlpaginate module logs through (``sqlpaginate.<module>``).
PACKAGE_LOGGER = "sqlpaginate"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"


def _logging_config(level: str, json_logs: bool) -> Dict[str, Any]:
    """dictConfig schema with one stderr handler, for the root and the package loggers."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": CONSOLE_DATEFMT},
            "json": {"()": JsonFormatter},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "json" if json_logs else "console",
            }
        },
        "loggers": {
            PACKAGE_LOGGER: {"level": level},
        },
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Route log records to stderr, as console lines or JSON.

    Parameters
    ----------
    level : str
        Level name for the root and ``sqlpaginate`` loggers, any case.
    json_logs : bool
        Emit one JSON object per record instead of console lines.
    force : bool
        Replace handlers installed earlier. Without it an application that
        already set up logging is left alone.
    """
    if not force and logging.getLogger().handlers:
        return
    logging.config.dictConfig(_logging_config(level, json_logs))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger called ``name``; the package logger when no name is given."""
    return logging.getLogger(name or PACKAGE_LOGGER)


__all__ = ["PACKAGE_LOGGER", "configure_logging", "get_logger", "JsonFormatter"]
