"""
Logging Configuration

Provides centralized logging configuration for the clinic chat client.
"""

import json
import logging
import logging.handlers
import os
import sys
from enum import Enum
from typing import IO, Optional

from .constants import LOG_FORMAT, LOG_DATE_FORMAT


class LogLevel(Enum):
    """Enumeration of logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with a colored level name."""
        level_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        original_levelname = record.levelname
        record.levelname = f"{level_color}{record.levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = original_levelname


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    _RESERVED_ATTRS = frozenset((
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'lineno', 'funcName', 'created',
        'msecs', 'relativeCreated', 'thread', 'threadName',
        'processName', 'process', 'getMessage', 'exc_info',
        'exc_text', 'stack_info', 'taskName', 'message', 'asctime',
    ))

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            'timestamp': self.formatTime(record, self.datefmt or LOG_DATE_FORMAT),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'thread_name': record.threadName,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry['stack_info'] = record.stack_info

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in self._RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# Third-party loggers that log every frame at DEBUG
NOISY_LIBRARY_LOGGERS = ("websockets",)


def _make_formatter(json_format: bool, colored: bool) -> logging.Formatter:
    if json_format:
        return JsonFormatter()
    if colored:
        return ColoredFormatter(LOG_FORMAT, LOG_DATE_FORMAT)
    return logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_colors: bool = True,
    json_format: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    stream: Optional[IO[str]] = None,
    library_level: str = "WARNING"
) -> logging.Logger:
    """
    Set up logging configuration for the client.

    Replaces any handlers already on the root logger, so calling it again
    reconfigures rather than duplicates output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, logs only to console.
        enable_colors: Whether to color level names on a terminal stream.
        json_format: Whether to use JSON format for structured logging.
        max_file_size: Maximum size of log file before rotation.
        backup_count: Number of backup files to keep.
        stream: Console stream, stdout when not given.
        library_level: Level for the websockets library loggers.

    Returns:
        Configured root logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    stream = stream or sys.stdout

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(numeric_level)
    is_terminal = hasattr(stream, "isatty") and stream.isatty()
    console_handler.setFormatter(_make_formatter(json_format, enable_colors and is_terminal))
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(_make_formatter(json_format, colored=False))
        logger.addHandler(file_handler)

    library_numeric_level = getattr(logging, library_level.upper(), logging.WARNING)
    for name in NOISY_LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_numeric_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__). If None, uses caller's module name.

    Returns:
        Logger instance.
    """
    if name is None:
        import inspect
        frame = inspect.currentframe()
        try:
            caller_frame = frame.f_back
            name = caller_frame.f_globals.get('__name__', 'unknown')
        finally:
            del frame

    return logging.getLogger(name)


def configure_from_env(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Configure logging from environment variables.

    Environment variables:
        CLINIC_CHAT_LOG_LEVEL: Logging level (default: INFO)
        CLINIC_CHAT_LOG_FILE: Log file path (optional)
        CLINIC_CHAT_LOG_COLORS: Enable colors (default: true)
        CLINIC_CHAT_LOG_JSON: Use JSON format (default: false)
        CLINIC_CHAT_LOG_MAX_SIZE: Max file size in bytes (default: 10MB)
        CLINIC_CHAT_LOG_BACKUP_COUNT: Number of backup files (default: 5)

    Args:
        level: Level that takes priority over CLINIC_CHAT_LOG_LEVEL.
        log_file: Log file that takes priority over CLINIC_CHAT_LOG_FILE.
        stream: Console stream, stdout when not given.

    Returns:
        Configured root logger.

    Raises:
        ValueError: If a numeric variable is not an integer.
    """
    level = level or os.getenv("CLINIC_CHAT_LOG_LEVEL", "INFO")
    log_file = log_file or os.getenv("CLINIC_CHAT_LOG_FILE")
    enable_colors = os.getenv("CLINIC_CHAT_LOG_COLORS", "true").lower() == "true"
    json_format = os.getenv("CLINIC_CHAT_LOG_JSON", "false").lower() == "true"
    max_file_size = int(os.getenv("CLINIC_CHAT_LOG_MAX_SIZE", str(10 * 1024 * 1024)))
    backup_count = int(os.getenv("CLINIC_CHAT_LOG_BACKUP_COUNT", "5"))

    return setup_logging(
        level=level,
        log_file=log_file,
        enable_colors=enable_colors,
        json_format=json_format,
        max_file_size=max_file_size,
        backup_count=backup_count,
        stream=stream
    )
