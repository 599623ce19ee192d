"""Logging configuration for the seat ledger."""

import logging
from pathlib import Path

from ..config import get_log_file, get_log_level

PACKAGE_LOGGER = "seat_ledger"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str | None = None, log_file: str | Path | None = None
) -> logging.Logger:
    """Configure the package logger with a console and an optional file handler.

    Calling it again replaces the handlers instead of adding more.

    Args:
        level: Logging level name; defaults to LOG_LEVEL
        log_file: File to append log output to; defaults to SEAT_LEDGER_LOG_FILE

    Returns:
        The package logger
    """
    level_name = (level or get_log_level()).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    log_file = log_file or get_log_file()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the package logger."""
    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
