"""
Logging setup for LoanQuill.

Library modules only call ``logging.getLogger(__name__)``; applications
(the CLI, tests) call ``configure_logging`` once to attach handlers.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(level: str) -> int:
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    return getattr(logging, level.upper())


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for module.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if not name or not isinstance(name, str):
        raise ValueError("Logger name must be a non-empty string")
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    use_rich: bool = True,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string for plain and file handlers
        log_file: Log file path
        use_rich: Console output through rich instead of a plain stream handler
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
    """
    numeric = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric)
    root_logger.handlers.clear()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    if use_rich:
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric)
    root_logger.addHandler(console_handler)

    if log_file:
        add_file_handler(root_logger, log_file, level, formatter, max_file_size, backup_count)


def set_log_level(level: str) -> None:
    """Set the root logger and all of its handlers to ``level``."""
    numeric = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric)
    for handler in root_logger.handlers:
        handler.setLevel(numeric)


def add_file_handler(
    logger: logging.Logger,
    file_path: str,
    level: str = "INFO",
    formatter: Optional[logging.Formatter] = None,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> RotatingFileHandler:
    """
    Add a rotating file handler to logger.

    Returns:
        The handler that was added
    """
    if not file_path or not isinstance(file_path, str):
        raise ValueError("File path must be a non-empty string")

    log_dir = os.path.dirname(file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(file_path, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8")
    file_handler.setLevel(_level(level))
    file_handler.setFormatter(formatter or logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)
    return file_handler
