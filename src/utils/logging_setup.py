"""
Logging setup for the settings store.

One stream handler is attached to the package logger ("src") the first
time get_logger() is called; every module logger is a child of it, so
messages from all modules share one format and one level. The level comes
from StoreSettings.log_level unless passed explicitly.
"""

import logging
import sys
from typing import Optional

from src.config.settings import get_settings


PACKAGE_LOGGER_NAME = "src"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger once and return it.

    Args:
        log_level: Level name (e.g. "DEBUG"). Defaults to the configured
                   StoreSettings.log_level.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if log_level is None:
        level = get_settings().logging_level
    else:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger under the configured package logger.

    Usage example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Loaded settings")
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not package_logger.handlers:
        setup_logger()
    return logging.getLogger(name)
