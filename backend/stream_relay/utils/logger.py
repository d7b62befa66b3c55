"""
Centralized logging configuration for the relay and the client
"""

import logging
import sys
from typing import Optional
from datetime import datetime

from stream_relay.config.base import settings

CONSOLE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Custom formatter with color support for different log levels"""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        # Color a copy so other handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"

        return super().format(record)


def _file_handler(log_file: str) -> logging.Handler:
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return file_handler


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (usually __name__)
        level: Log level, defaults to settings.LOG_LEVEL

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Don't add handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    # File handler (without colors)
    if settings.LOG_FILE:
        try:
            logger.addHandler(_file_handler(settings.LOG_FILE))
        except OSError as e:
            # If file logging fails, just use console
            logger.warning(f"Could not create file handler: {e}")

    # Handlers live here, keep records away from the root logger
    logger.propagate = False
    return logger


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Setup global logging configuration

    Args:
        level: Default log level
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Loggers from get_logger() carry their own handlers and level
    for name, existing in logging.root.manager.loggerDict.items():
        if name.startswith("stream_relay") and isinstance(existing, logging.Logger):
            existing.setLevel(numeric_level)

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            root_logger.addHandler(_file_handler(log_file))
        except OSError as e:
            print(f"Warning: Could not create file handler for {log_file}: {e}", file=sys.stderr)


class LoggerMixin:
    """Mixin class to add logging capabilities to any class"""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for the current class"""
        return get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")


class PerformanceLogger:
    """Times a single operation, e.g. one call to the remote API"""

    def __init__(self, name: str):
        self.logger = get_logger(f"perf.{name}")
        self.operation = None
        self.start_time = None

    def start(self, operation: str):
        """Start timing an operation"""
        self.operation = operation
        self.start_time = datetime.now()
        self.logger.info(f"Starting {operation}")

    def end(self, additional_info: Optional[str] = None) -> Optional[float]:
        """End timing and log the result"""
        if self.start_time is None:
            self.logger.warning("end() called without start()")
            return None

        duration = (datetime.now() - self.start_time).total_seconds()
        info_str = f" - {additional_info}" if additional_info else ""
        self.logger.info(f"Completed {self.operation} in {duration:.3f}s{info_str}")
        self.start_time = None
        return duration
