"""Logging setup for the ``persevere`` logger hierarchy.

Library modules log through ``logging.getLogger("persevere.<area>")`` and
never install handlers themselves. Applications that want to see those
records call configure_logging() once at startup:

    >>> from persevere import configure_logging
    >>> configure_logging(format="json", level="DEBUG")

Level and format default to settings (PERSEVERE_LOG_LEVEL, PERSEVERE_LOG_FORMAT).
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from persevere.foundation.config import get_settings

ROOT_LOGGER = "persevere"

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update((k, v) for k, v in record.__dict__.items() if k not in _RESERVED)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=repr, option=orjson.OPT_NON_STR_KEYS).decode()


_CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Handler installed by configure_logging, replaced on reconfiguration
_handler: logging.Handler | None = None


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger inside the persevere hierarchy."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> logging.Logger:
    """Attach a handler to the persevere logger. Format: "console", "json", "none"."""
    global _handler
    settings = get_settings().logging
    format = format or settings.format
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, (level or settings.level).upper(), logging.WARNING))

    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None

    match format:
        case "console":
            _handler = logging.StreamHandler(output or sys.stderr)
            _handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        case "json":
            _handler = logging.StreamHandler(output or sys.stdout)
            _handler.setFormatter(JsonFormatter())
        case "none":
            _handler = logging.NullHandler()
        case _:
            raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")

    logger.addHandler(_handler)
    return logger
