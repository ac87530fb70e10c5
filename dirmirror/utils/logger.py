"""
Logging Configuration and Utilities

All dirmirror modules log through children of the ``dirmirror`` logger.
``setup_logging`` attaches a console handler (stderr, coloured on a terminal
or JSON) and optionally a size-rotated log file.

Author: dirmirror Project
License: MIT
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER_NAME = "dirmirror"

CONSOLE_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
FILE_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
JSON_CONSOLE_FIELDS = '%(asctime)s %(name)s %(levelname)s %(message)s'
JSON_FILE_FIELDS = '%(asctime)s %(name)s %(levelname)s %(module)s %(funcName)s %(lineno)d %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name with ANSI escapes."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Other handlers share the record and must see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname)
        if color:
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _resolve_level(log_level) -> int:
    # Accepts level names in any case and LogLevel members
    name = str(getattr(log_level, "value", log_level)).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return level


def _console_handler(stream, json_format: bool) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    if json_format:
        handler.setFormatter(JsonFormatter(JSON_CONSOLE_FIELDS))
    elif getattr(stream, "isatty", lambda: False)():
        handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(path: str, max_bytes: int, backup_count: int, json_format: bool) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8')
    if json_format:
        handler.setFormatter(JsonFormatter(JSON_FILE_FIELDS))
    else:
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_level="INFO",
    log_to_file: bool = False,
    log_file_path: str = "logs/dirmirror.log",
    log_rotation_size: int = 10485760,  # 10MB
    log_retention_count: int = 5,
    json_format: bool = False,
    stream=None
) -> logging.Logger:
    """
    Configure the ``dirmirror`` logger.

    Replaces any handlers from an earlier call. Console output goes to stderr
    so that command output on stdout stays machine readable.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Also write to a rotating log file
        log_file_path: Path to log file
        log_rotation_size: Max log file size before rotation (bytes)
        log_retention_count: Number of backup log files to keep
        json_format: Use JSON formatting for logs
        stream: Console stream (defaults to sys.stderr)

    Returns:
        The configured ``dirmirror`` logger

    Raises:
        ValueError: If log_level is not a known level name
    """
    level = _resolve_level(log_level)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handlers = [_console_handler(stream or sys.stderr, json_format)]
    if log_to_file:
        handlers.append(_file_handler(log_file_path, log_rotation_size, log_retention_count, json_format))

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    # Prevent propagation to root logger
    logger.propagate = False

    logger.debug(f"Logging initialized at {logging.getLevelName(level)} level")
    if log_to_file:
        logger.debug(f"File logging enabled: {log_file_path}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger beneath the ``dirmirror`` logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
