"""
Logging for the audioviewer package.

All modules log through one named logger that writes to stderr, so rich
tables printed by the CLI on stdout stay clean.
"""

import logging
import sys
from typing import Optional


LOGGER_NAME = "audioviewer"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = LOGGER_NAME, level: str = "INFO") -> logging.Logger:
    """
    Configure a logger with a single stderr handler.

    Args:
        name: Logger name (default: "audioviewer")
        level: Logging level as string ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


_default_logger: Optional[logging.Logger] = None


def get_default_logger() -> logging.Logger:
    """Get or create the package logger at INFO level."""
    global _default_logger
    if _default_logger is None:
        _default_logger = setup_logger()
    return _default_logger


def configure_logging(level: str = "INFO") -> None:
    """
    Set the package log level, as chosen by the CLI --log-level option.

    Modules bind the logger object at import time, so the same named logger
    is reconfigured in place.
    """
    global _default_logger
    _default_logger = setup_logger(LOGGER_NAME, level)
