"""Centralized logging configuration for the ``netwrth`` package.

- ``configure_logging(...)``: attach a single ``RichHandler`` to the package
  root logger. Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger, making sure the package root has a
  ``NullHandler`` when nothing has been configured so library use stays quiet.

Library modules never attach their own handlers.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_PKG_LOGGER_NAME = "netwrth"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        return logging.WARNING
    env_val = os.getenv("NETWRTH_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(level: int | str | None = None, *, console: Console | None = None) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Level as int or name ("DEBUG", "INFO", ...). When None,
            ``NETWRTH_LOG_LEVEL`` is used, falling back to WARNING.
        console: Rich console for output (defaults to stderr).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.setLevel(_parse_level(level))
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name with a silent default for library use."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
