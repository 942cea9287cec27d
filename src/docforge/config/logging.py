"""Logging configuration using rich for readable console output."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from docforge.config.settings import get_settings

_ROOT_LOGGER = "docforge"


def setup_logging(level: str | None = None, console: Console | None = None) -> logging.Logger:
    """Configure the docforge logger hierarchy.

    Calling this more than once replaces the previously installed handler
    instead of stacking a second one.

    Args:
        level: Logging level name, e.g. "DEBUG" or "INFO". Defaults to the
            configured ``log_level`` setting.
        console: Optional rich console to write to (defaults to stderr).

    Returns:
        The configured package logger.
    """
    if level is None:
        level = get_settings().log_level
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module."""
    return logging.getLogger(name)
