"""Logging setup for native-launchers."""

from __future__ import annotations

import logging
from typing import Optional

from .env import get_log_level

_PACKAGE_LOGGER = "native_launchers"
_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the package logger. ``None`` returns the package logger itself."""
    if name is None or name == _PACKAGE_LOGGER:
        return logging.getLogger(_PACKAGE_LOGGER)
    if name.startswith(_PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_PACKAGE_LOGGER}.{name}")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger.

    Calling this more than once replaces the handler instead of stacking duplicates.

    Parameters
    ----------
    level : str, optional
        One of DEBUG, INFO, WARNING, ERROR. Defaults to NATIVE_LAUNCHERS_LOG_LEVEL.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    level = (level or get_log_level()).upper()
    if level not in _VALID_LEVELS:
        raise ValueError(f"Invalid log_level: {level}")

    logger = get_logger()
    logger.setLevel(getattr(logging, level))
    for handler in list(logger.handlers):
        if getattr(handler, "_native_launchers", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    handler._native_launchers = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger


def log_debug(logger: logging.Logger, debug: bool, message: str, *args) -> None:
    """Log a debug message, promoted to INFO when the build runs in debug mode."""
    logger.log(logging.INFO if debug else logging.DEBUG, message, *args)
