"""Logging infrastructure for PlainTasks.

Provides the Logger interface used by the command line front end, and the
mapping from PlainTasks log levels to standard library levels used by the
language server modules.
"""

from __future__ import annotations

import abc
import enum
import logging as _stdlib_logging


class LogLevel(enum.Enum):
    """Log verbosity levels for PlainTasks diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors (unusable configuration)
    ERROR = 1  # Fatal errors plus failed requests
    WARN = 2   # Errors plus rejected notifications, configuration fallbacks
    INFO = 3   # Warnings plus server lifecycle (default)
    DEBUG = 4  # Info plus document store activity
    TRACE = 5  # Debug plus per-request details

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Look up a level by case-insensitive name (e.g. "debug").

        Raises:
            ValueError: If the name is not a known level
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(level.name.lower() for level in cls)
            raise ValueError(f"Unknown log level '{name}' (expected one of: {valid})") from None

    def to_stdlib(self) -> int:
        """Return the equivalent standard library logging level."""
        return _STDLIB_LEVELS[self]


_STDLIB_LEVELS = {
    LogLevel.FATAL: _stdlib_logging.CRITICAL,
    LogLevel.ERROR: _stdlib_logging.ERROR,
    LogLevel.WARN: _stdlib_logging.WARNING,
    LogLevel.INFO: _stdlib_logging.INFO,
    LogLevel.DEBUG: _stdlib_logging.DEBUG,
    # The standard library has nothing finer than DEBUG
    LogLevel.TRACE: _stdlib_logging.NOTSET + 1,
}


class Logger(abc.ABC):
    """Interface for leveled diagnostic output."""

    @abc.abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        ...

    @abc.abstractmethod
    def push_level(self, level: LogLevel) -> None:
        ...

    @abc.abstractmethod
    def pop_level(self) -> LogLevel:
        ...

    def fatal(self, *args, **kwargs) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args, **kwargs) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args, **kwargs) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)
