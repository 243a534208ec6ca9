"""
Logging System - console and file logging for the ``easycore`` logger.

Provides colored console logging and optional file logging with rotation.
Library code only creates loggers; hosts and the CLI call setup_logging().
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

import colorlog

LOGGER_NAME = "easycore"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# handlers added by setup_logging(), replaced on the next call
_installed_handlers: list[logging.Handler] = []


def resolve_level(level: int | str) -> int:
    """Turn a level name such as "debug" into its numeric value."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(
    level: int | str = "INFO",
    log_file: str | Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the ``easycore`` logger.

    Console output is colored; ``log_file`` adds a rotating plain-text file.
    Calling it again replaces the handlers of the previous call.
    """
    root_logger = logging.getLogger(LOGGER_NAME)
    root_logger.setLevel(resolve_level(level))

    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console_formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s | %(levelname)-8s | %(name)s%(reset)s | %(message)s",
        datefmt=DATE_FORMAT,
        log_colors=LOG_COLORS,
    )
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(console_formatter)
    _installed_handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt=DATE_FORMAT,
            )
        )
        file_handler.setLevel(logging.DEBUG)
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root_logger.addHandler(handler)

    root_logger.debug("Logging initialized (level=%s)", level)
    return root_logger
