"""Logging helpers shared by all gpsearch modules."""

import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "WARNING"


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, typically called with ``__name__``."""
    return logging.getLogger(name)


def _coerce_level(level: Union[str, int, None]) -> int:
    if level is None:
        return logging.getLevelName(DEFAULT_LEVEL)
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        return logging.getLevelName(DEFAULT_LEVEL)
    return resolved


def configure_logging(level: Union[str, int, None] = None, stream: Optional[TextIO] = None) -> None:
    """
    Configure the ``gpsearch`` logger hierarchy.

    Logs go to stderr so stdout only ever carries search results.

    Args:
        level: Level name or number. Unknown names fall back to WARNING.
        stream: Output stream (default: sys.stderr)
    """
    root = logging.getLogger("gpsearch")
    root.setLevel(_coerce_level(level))
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
