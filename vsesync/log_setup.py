"""Configuration of the package logger."""

from __future__ import annotations

import logging
from typing import TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_LOGGER_NAME = "vsesync"


def setup_logging(level: str, stream: TextIO) -> logging.Logger:
    """Send the package's log output to ``stream`` at the named level."""
    try:
        numeric = _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"not a valid log level: {level!r}") from None
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger