"""
Logging setup for GazeDwell.

Console output by default; a log file only when explicitly enabled.
Gaze and pointer coordinates are logged at DEBUG level only.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.WARNING


def _attach(logger: logging.Logger, handler: logging.Handler, level: int):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logger(
    name: str = "gazedwell",
    level: str = "WARNING",
    log_file: Optional[Path] = None,
    enable_file_logging: bool = False,
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again only changes the level of the existing handlers.

    Args:
        name: Root logger name for the package
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown -> WARNING)
        log_file: Destination when file logging is enabled
        enable_file_logging: Also write to ``log_file``

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    numeric_level = _parse_level(level)
    logger.setLevel(numeric_level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(numeric_level)
        return logger

    _attach(logger, logging.StreamHandler(sys.stdout), numeric_level)
    logger.propagate = False

    if enable_file_logging and log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), numeric_level)
        except OSError as e:
            logger.warning(f"File logging unavailable ({log_file}): {e}")
        else:
            logger.info(f"Logging to {log_file}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; inherits the package configuration."""
    return logging.getLogger(name)
