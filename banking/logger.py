"""Structured JSON logging for the application."""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from functools import lru_cache


class JsonFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created).astimezone()
        directory = os.path.basename(os.path.dirname(record.pathname))
        caller = os.path.join(directory, record.filename) if directory else record.filename
        entry = {
            "level": record.levelname.lower(),
            "timestamp": created.isoformat(timespec="milliseconds"),
            "caller": f"{caller}:{record.lineno}",
            "msg": record.getMessage(),
            **(getattr(record, "fields", None) or {}),
        }
        return json.dumps(entry, default=str)


@lru_cache(maxsize=None)
def get_logger() -> logging.Logger:
    """Return the application logger, writing JSON at info level to stderr."""
    logger = logging.getLogger("banking")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger


def _log(level: int, msg: str, fields: dict) -> None:
    get_logger().log(level, msg, extra={"fields": fields}, stacklevel=3)


def info(msg: str, **kwargs) -> None:
    """Log at info level; keyword arguments become extra fields."""
    _log(logging.INFO, msg, kwargs)


def debug(msg: str, **kwargs) -> None:
    """Log at debug level; keyword arguments become extra fields."""
    _log(logging.DEBUG, msg, kwargs)


def error(msg: str, **kwargs) -> None:
    """Log at error level; keyword arguments become extra fields."""
    _log(logging.ERROR, msg, kwargs)