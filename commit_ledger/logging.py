"""Logging helpers built on femtologging.

Messages are formatted before they reach femtologging so every record is a
plain string, whichever thread the femtologging worker flushes it from.

Example:
>>> from commit_ledger.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Mapped %d events", 3)

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Log levels understood by femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a log level name.

    Returns
    -------
    tuple[str, bool]
        The upper-cased level (``INFO`` when unusable) and whether the input
        was rejected.

    """
    normalized = (level or "").strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)
    return (LogLevel.INFO.value, True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging's root handler at ``level``.

    Returns the same pair as :func:`normalize_log_level` so callers can warn
    about an invalid setting once logging is live.
    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


class _SupportsLog(typ.Protocol):
    """Protocol for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _emit(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None = None,
) -> None:
    message = template % args if args else template
    logger.log(level.value, message, exc_info=exc_info, stack_info=False)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting."""
    _emit(logger, LogLevel.INFO, template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting."""
    _emit(logger, LogLevel.WARNING, template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting."""
    _emit(logger, LogLevel.ERROR, template, args, exc_info)


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_error",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
