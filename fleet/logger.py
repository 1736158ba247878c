"""
Centralised logging configuration.
Logs to console and, when SENTINEL_LOG_FILE is set, to a rotating file.
"""

import logging
from logging.handlers import RotatingFileHandler

from .config import get_settings

_configured = False


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    settings = get_settings()
    level = settings.LOG_LEVEL.upper()
    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    if settings.LOG_FILE:
        # keeps last 5 x 5MB log files
        file_handler = RotatingFileHandler(
            filename=settings.LOG_FILE,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
