# sfclient/core/logging.py
"""
Centralized logging system for the streaming client.

Provides:
- StreamLogger: Global logging configuration
- LoggingMixin: Consistent logging behavior for classes
- Utility functions: Context logging helpers

Console output goes to stderr, stdout is reserved for discovered addresses.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL

ROOT_LOGGER_NAME = 'sfclient'

CONTEXT_ATTRS = [
    'endpoint', 'range', 'cursor', 'block', 'previous', 'step', 'handle_forks',
    'retry_delay', 'restart_count', 'stats', 'address_count', 'tracked_count',
    'dedup_scope', 'output', 'error',
]


class StreamFormatter(logging.Formatter):
    def __init__(self, include_context: bool = False):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        base_msg = f"{timestamp} - {record.name} - {record.levelname} - {record.getMessage()}"

        if not self.include_context:
            return base_msg

        context_parts = []
        for attr in CONTEXT_ATTRS:
            if hasattr(record, attr):
                context_parts.append(f"{attr}={getattr(record, attr)}")

        if context_parts:
            return f"{base_msg} | {' '.join(context_parts)}"

        return base_msg


class StreamLogger:
    """Global logging configuration and management"""

    _configured = False
    _log_level = logging.INFO

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  structured_format: bool = True,
                  trace: bool = False) -> None:

        if cls._configured:
            return

        cls._log_level = getattr(logging, log_level.upper())

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(logging.DEBUG if trace else cls._log_level)

        root_logger.handlers.clear()

        if console_enabled:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(root_logger.level)
            console_handler.setFormatter(StreamFormatter(include_context=structured_format))
            root_logger.addHandler(console_handler)

        if log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)

            file_formatter = StreamFormatter(include_context=True)

            file_handler = logging.FileHandler(log_dir / 'sfclient.log')
            file_handler.setLevel(root_logger.level)
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

            error_handler = logging.FileHandler(log_dir / 'sfclient_errors.log')
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            root_logger.addHandler(error_handler)

        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()
        cls._configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._configured:
            cls.configure()

        if not name.startswith(ROOT_LOGGER_NAME):
            name = f'{ROOT_LOGGER_NAME}.{name}'

        return logging.getLogger(name)


def trace_requested(env: Optional[dict] = None) -> bool:
    env = env if env is not None else os.environ
    return env.get("SF_TRACE", "").strip().lower() in ("1", "true", "yes", "on")


# === Utility Functions ===

def get_class_logger(cls_instance) -> logging.Logger:
    module = cls_instance.__class__.__module__
    class_name = cls_instance.__class__.__name__

    if module.startswith(f'{ROOT_LOGGER_NAME}.'):
        module = module[len(ROOT_LOGGER_NAME) + 1:]

    logger_name = f"{module}.{class_name}"
    return StreamLogger.get_logger(logger_name)


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if logger.isEnabledFor(level):
        record = logger.makeRecord(
            logger.name, level, "", 0, message, (), None
        )
        for key, value in context.items():
            setattr(record, key, value)
        logger.handle(record)


# === LoggingMixin for Classes ===

class LoggingMixin:
    """
    Mixin to add consistent logging behavior to any class.

    Provides convenient logging methods that automatically:
    - Create class-specific loggers
    - Support structured context logging
    """

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class"""
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, logging.ERROR, message, **context)
