"""
Logging Utilities

Sets up logging for the project. Every module obtains its logger through
`setup_logger(__name__)`; the workflow script later applies the configured
level and log file to all package loggers with `configure_package_logging`.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "scanner_registration"

_CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
_FILE_FORMAT = '%(asctime)s | %(levelname)s | %(processName)s[%(process)d] | %(name)s | %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _file_handler(log_file: str, level: int) -> logging.FileHandler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def setup_logger(name: str,
                 level: int = logging.INFO,
                 log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__)
        level: Logging level (default: logging.INFO)
        log_file: Optional log file path. If provided, logs will be written to this file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers
    if logger.handlers:
        return logger

    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        logger.addHandler(_file_handler(log_file, level))

    return logger


def parse_level(level: Union[str, int]) -> int:
    """Map 'DEBUG'/'info'/20 style values to a logging level."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level}")
    return value


def configure_package_logging(level: Union[str, int] = logging.INFO,
                              log_file: Optional[str] = None) -> None:
    """
    Apply a level (and optional log file) to every logger created by the package.

    Loggers are created at import time with INFO; this re-levels them and their
    handlers once configuration has been loaded.

    Args:
        level: Level name or number
        log_file: If given, a file handler is attached to each package logger
    """
    lvl = parse_level(level)
    manager = logging.Logger.manager
    names = [n for n in list(manager.loggerDict) if n == PACKAGE_LOGGER or n.startswith(PACKAGE_LOGGER + ".")]
    for name in names:
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue
        logger.setLevel(lvl)
        for handler in logger.handlers:
            handler.setLevel(lvl)
        if log_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
            logger.addHandler(_file_handler(log_file, lvl))
