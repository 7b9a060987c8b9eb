"""
Logging setup for ONYX Terminal.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers. Applications configure the ``onyx_terminal`` package logger once,
either from a ``LoggingConfig`` via ``configure_logging`` or explicitly via
``setup_logger``.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from .config import LoggingConfig


PACKAGE_LOGGER = "onyx_terminal"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
# Longest suffix first so 'MB' is not read as 'B'
SIZE_UNITS = (
    ("GB", 1024 ** 3),
    ("MB", 1024 ** 2),
    ("KB", 1024),
    ("B", 1),
)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',     # Cyan
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


class MarketContextFormatter(logging.Formatter):
    """
    File formatter that prefixes the market a record refers to.

    Records carrying ``symbol`` and/or ``timeframe`` extras (for example from a
    ``logging.LoggerAdapter``) are written as ``[BTC][1m] message``.
    """

    CONTEXT_KEYS = ("symbol", "timeframe")

    def formatMessage(self, record: logging.LogRecord) -> str:
        context = "".join(
            f"[{getattr(record, key)}]" for key in self.CONTEXT_KEYS if hasattr(record, key)
        )
        if context:
            record.message = f"{context} {record.message}"
        return super().formatMessage(record)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_file: str, level: int, max_size: str, backup_count: int) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=_parse_size(max_size),
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(MarketContextFormatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
    name: str,
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_size: str = "10MB",
    backup_count: int = 5,
    console_output: bool = True
) -> logging.Logger:
    """
    Set up a logger with optional console output and file rotation.

    Existing handlers on the logger are replaced, so calling this again
    reconfigures rather than duplicates output.

    Args:
        name: Logger name
        level: Logging level name; unknown names fall back to INFO
        log_file: Rotating log file path (optional)
        max_size: Maximum log file size before rotation, e.g. '10MB'
        backup_count: Number of rotated files to keep
        console_output: Whether to log to stderr

    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(log_level)

    if console_output:
        logger.addHandler(_console_handler(log_level))
    if log_file:
        logger.addHandler(_file_handler(log_file, log_level, max_size, backup_count))

    logger.propagate = False
    return logger


def configure_logging(config: LoggingConfig, verbose: bool = False) -> logging.Logger:
    """Configure the package logger from a LoggingConfig section."""
    return setup_logger(
        PACKAGE_LOGGER,
        level="DEBUG" if verbose else config.level,
        log_file=config.file_path,
        max_size=config.max_size,
        backup_count=config.backup_count,
    )


def get_logger(name: str, level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Get a console logger, optionally mirrored to a rotating file."""
    return setup_logger(name=name, level=level, log_file=log_file)


def _parse_size(size_str: str) -> int:
    """Parse a size such as '10MB' or '512kb' into bytes; 10MB if unparseable."""
    text = size_str.upper().strip()

    for unit, multiplier in SIZE_UNITS:
        if text.endswith(unit):
            try:
                return int(float(text[:-len(unit)]) * multiplier)
            except ValueError:
                break

    try:
        return int(text)
    except ValueError:
        return DEFAULT_MAX_BYTES
