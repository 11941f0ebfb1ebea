"""Logging helpers shared by the engine and the command line front-end."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "tableeditor"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it when *name* is given."""

    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Calling this again only adjusts the level; handlers are never duplicated.
    """

    global _configured
    logger = get_logger()
    logger.setLevel(level)
    if _configured:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True
    return logger


def reset_logging() -> None:
    """Drop handlers installed by :func:`setup_logging`. Used by tests."""

    global _configured
    logger = get_logger()
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    _configured = False
