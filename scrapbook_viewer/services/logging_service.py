"""
Logging service implementation for Scrapbook Viewer.
Wraps the stdlib logging module with console/file handlers and key=value extras.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List
from pathlib import Path
import logging
import sys
from datetime import datetime
from enum import Enum

from .interfaces import ILogger

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def numeric(self) -> int:
        return getattr(logging, self.value)


def _format_extra_info(kwargs: Dict[str, Any]) -> str:
    if not kwargs:
        return ""
    return " [" + ", ".join(f"{key}={value}" for key, value in kwargs.items()) + "]"


class LoggingService(ILogger):
    """Logger backed by a named stdlib logger.

    The ``scrapbook_viewer`` package loggers (``logging.getLogger(__name__)`` in
    core modules) propagate to the handlers installed here when ``name`` is the
    package root.
    """

    def __init__(self, name: str = "scrapbook_viewer", log_file: Optional[Path] = None,
                 console_level: LogLevel = LogLevel.INFO, file_level: LogLevel = LogLevel.DEBUG):
        self._name = name
        self._log_file = log_file
        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stdout)
        self._console_handler.setLevel(console_level.numeric)
        self._console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None
        if log_file:
            self._setup_file_handler(log_file, file_level)

    def _setup_file_handler(self, log_file: Path, level: LogLevel) -> None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            print(f"Failed to set up file logging: {e}", file=sys.stderr)
            return
        handler.setLevel(level.numeric)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        self._logger.addHandler(handler)
        self._file_handler = handler

    @property
    def name(self) -> str:
        return self._name

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(f"{message}{_format_extra_info(kwargs)}")

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(f"{message}{_format_extra_info(kwargs)}")

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(f"{message}{_format_extra_info(kwargs)}")

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        full_message = f"{message}{_format_extra_info(kwargs)}"
        if exception:
            self._logger.error(full_message, exc_info=exception)
        else:
            self._logger.error(full_message)

    def log_system_info(self, info: Dict[str, Any]) -> None:
        self.info("System info", **info)


class NullLogger(ILogger):
    """Null logger implementation for testing or when logging is disabled."""

    def debug(self, message: str, **kwargs) -> None:
        pass

    def info(self, message: str, **kwargs) -> None:
        pass

    def warning(self, message: str, **kwargs) -> None:
        pass

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        pass


class MemoryLogger(ILogger):
    """In-memory logger for testing purposes."""

    def __init__(self, max_entries: int = 1000):
        self._max_entries = max_entries
        self._entries: List[Dict[str, Any]] = []

    def debug(self, message: str, **kwargs) -> None:
        self._add_entry("DEBUG", message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._add_entry("INFO", message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._add_entry("WARNING", message, kwargs)

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs) -> None:
        entry_kwargs = dict(kwargs)
        if exception:
            entry_kwargs['exception'] = str(exception)
        self._add_entry("ERROR", message, entry_kwargs)

    def _add_entry(self, level: str, message: str, kwargs: Dict[str, Any]) -> None:
        self._entries.append({
            'timestamp': datetime.now(),
            'level': level,
            'message': message,
            'kwargs': kwargs,
        })
        if len(self._entries) > self._max_entries:
            self._entries = self._entries[-self._max_entries:]

    def get_entries(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get log entries, optionally filtered by level."""
        if level:
            return [e for e in self._entries if e['level'] == level]
        return self._entries.copy()

    def clear(self) -> None:
        self._entries.clear()
