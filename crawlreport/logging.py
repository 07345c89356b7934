"""femtologging helpers shared by every crawlreport module.

femtologging takes a finished message string, so every helper here renders
its percent-style template before handing the record over.

Example:
>>> from crawlreport.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Rendering report for %s", "job-1")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger

_FALLBACK_LEVEL = "INFO"


class LogLevel(enum.StrEnum):
    """Values accepted by ``CRAWLREPORT_LOG_LEVEL``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Return ``(level, replaced)`` for a raw ``CRAWLREPORT_LOG_LEVEL`` value.

    Parameters
    ----------
    level : str | None
        Value read from the environment, possibly padded or lower-case.

    Returns
    -------
    tuple[str, bool]
        The canonical level name, and ``True`` when the input was missing or
        unknown and ``INFO`` was substituted.

    """
    candidate = (level or "").strip().upper()
    try:
        return (LogLevel(candidate).value, False)
    except ValueError:
        return (_FALLBACK_LEVEL, True)


def configure_logging(level: str, *, force: bool = False) -> tuple[str, bool]:
    """Install the root femtologging handler and return the level used.

    ``force`` replaces a handler installed by an earlier call, which the
    runtime needs when granian workers re-import the app factory.
    """
    resolved, replaced = normalize_log_level(level)
    basicConfig(level=resolved, force=force)
    return (resolved, replaced)


class _SupportsLog(typ.Protocol):
    """The slice of the femtologging logger these helpers call."""

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
    exc_info: object | None,
) -> None:
    message = template % args if args else template
    logger.log(level.value, message, exc_info=exc_info, stack_info=False)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log ``template % args`` at INFO."""
    _emit(logger, LogLevel.INFO, template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log ``template % args`` at WARNING."""
    _emit(logger, LogLevel.WARNING, template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log ``template % args`` at ERROR."""
    _emit(logger, LogLevel.ERROR, template, args, exc_info)


def log_exception(
    logger: _SupportsLog, exc: BaseException, template: str, *args: object
) -> None:
    """Log ``template % args`` at ERROR with ``exc`` attached as exc_info.

    Used by the HTTP error handlers for failures that end in a 500, where the
    traceback is the only record of what went wrong.
    """
    _emit(logger, LogLevel.ERROR, template, args, exc)


__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
