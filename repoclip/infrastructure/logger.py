"""
Package logger used as the human-readable diagnostic stream.
"""

import logging
import sys


LOGGER_NAME = "RepoClip"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return the package logger.

    The handler is attached only once, so calling this repeatedly
    just adjusts the level.
    """

    _logger = logging.getLogger(name)
    if not _logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _logger.addHandler(handler)

    _logger.setLevel(level)
    return _logger


logger = setup_logger()


__all__ = [
    "LOGGER_NAME",
    "logger",
    "setup_logger",
]
