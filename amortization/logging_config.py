"""Centralized logging configuration for the amortization package.

Modules obtain their logger with ``get_logger(__name__)``; nothing is emitted
until ``configure_logging`` installs a handler, which the command-line entry
point does once at startup. The level defaults to the
``AMORTIZATION_LOG_LEVEL`` environment variable.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import ENV_LOG_LEVEL, get_setting

PACKAGE_LOGGER = "amortization"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for ``name`` (typically ``__name__``)."""
    return logging.getLogger(name)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger to write to stderr.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to the environment variable or WARNING.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    log_level_str = level or get_setting(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)
    return logger
