# region_annote/logging_config.py
"""Logging configuration for region_annote."""
from __future__ import annotations

import logging
import sys
from typing import Optional

LOGGER_NAME = "region_annote"

logger = logging.getLogger(LOGGER_NAME)


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to log levels for terminal output."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors and sys.stderr.isatty():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
    use_colors: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        verbose: If True, set level to DEBUG (transitions and rejections are logged)
        quiet: If True, set level to ERROR only
        log_file: Optional path to also write logs to
        use_colors: If True, use colored output in terminal
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.INFO

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_fmt = "%(levelname)s: %(message)s"
    if verbose:
        console_fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    console_handler.setFormatter(ColoredFormatter(console_fmt, datefmt="%H:%M:%S", use_colors=use_colors))
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Child logger for a module (pass __name__)."""
    return logging.getLogger(f"{LOGGER_NAME}.{name.split('.')[-1]}")
