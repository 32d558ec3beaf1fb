"""Shared utilities for stratify."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "STRATIFY_LOG_LEVEL"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"

DEFAULT_LOG_LEVEL = logging.WARNING

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


_handler: logging.Handler | None = None


def resolve_log_level(level: int | None = None) -> int:
    """Pick the log level from the argument, then the environment.

    Examples:
        >>> resolve_log_level(logging.DEBUG) == logging.DEBUG
        True
    """
    if level is not None:
        return level
    env_level = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    return _LEVELS.get(env_level, DEFAULT_LOG_LEVEL)


def configure_logging(level: int | None = None) -> None:
    """Send stratify log records to stderr.

    Replaces the handler installed by a previous call so repeated CLI
    invocations in one process do not duplicate output.
    """
    global _handler

    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(_handler)
    root_logger.setLevel(resolve_log_level(level))
