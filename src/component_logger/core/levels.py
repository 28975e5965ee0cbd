"""Log level taxonomy shared with the remote logging endpoint.

The endpoint expects exactly five case-sensitive level strings. Anything
else is rejected here, before a call reaches the network.
"""

from __future__ import annotations

import logging
from enum import Enum

__all__ = [
    "InvalidLevelError",
    "LogLevel",
    "parse_level",
    "from_python_level",
]


class InvalidLevelError(ValueError):
    """Raised for a level string outside the five known values."""


class LogLevel(str, Enum):
    """Severity of a component log event (wire value is the member value)."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def python_level(self) -> int:
        """Equivalent stdlib logging level, used by the fallback sink."""
        return _PYTHON_LEVELS[self]


_PYTHON_LEVELS: dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}


def parse_level(level: LogLevel | str) -> LogLevel:
    """Validate a level given as an enum member or its exact string.

    Args:
        level: LogLevel member, or one of "DEBUG", "INFO", "WARN",
            "ERROR", "FATAL". Matching is case-sensitive.

    Returns:
        The matching LogLevel.

    Raises:
        InvalidLevelError: For any other value, including "debug",
            "WARNING" and "CRITICAL".

    Example:
        >>> parse_level("WARN")
        <LogLevel.WARN: 'WARN'>
        >>> parse_level("warn")
        Traceback (most recent call last):
        ...
        InvalidLevelError: Unknown log level 'warn'; expected one of ...
    """
    if isinstance(level, LogLevel):
        return level
    try:
        return LogLevel(level)
    except ValueError:
        expected = ", ".join(member.value for member in LogLevel)
        raise InvalidLevelError(
            f"Unknown log level {level!r}; expected one of {expected}"
        ) from None


def from_python_level(levelno: int) -> LogLevel:
    """Map a stdlib logging level number onto the five-level taxonomy.

    Values between the standard levels round down (e.g. 25 -> INFO).
    Anything below INFO is DEBUG.
    """
    if levelno >= logging.CRITICAL:
        return LogLevel.FATAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARN
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG
