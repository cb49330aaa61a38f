"""Centralized logging configuration for pathfinder.

All modules log through children of the ``pathfinder`` logger, which owns a
single stderr handler. Stdout is left to result output.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "pathfinder"

_DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Set once the package logger has its handler
_configured = False


def setup_root_logger(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
    force: bool = False,
) -> None:
    """Attach the single package handler to the ``pathfinder`` logger.

    Args:
        level: Logging level (default: INFO).
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stderr StreamHandler).
        force: Replace an existing configuration instead of keeping it.
    """
    global _configured

    if _configured and not force:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Let records reach the root logger so pytest can capture them
    root_logger.propagate = True

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger that inherits the pathfinder configuration.

    Args:
        name: Logger name (typically __name__ from calling module).
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the package logger and its handlers."""
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def level_name() -> str:
    """Return the effective package level name, e.g. for passing to workers."""
    return logging.getLevelName(
        logging.getLogger(ROOT_LOGGER_NAME).getEffectiveLevel()
    )


def set_level_from_name(name: Optional[str]) -> None:
    """Apply a level given by name; unknown names fall back to INFO.

    Does nothing when ``name`` is empty.
    """
    if not name:
        return
    level = logging.getLevelName(name.upper())
    set_global_log_level(level if isinstance(level, int) else logging.INFO)


setup_root_logger()
