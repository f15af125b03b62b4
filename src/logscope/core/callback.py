"""Callback adapter: log from code that only understands plain callbacks.

Useful for interfacing with libraries that accept logging hooks (HTTP clients,
cloud SDKs, schedulers). The callback captures the env at extraction time, so
it keeps logging with that domain and data however the caller's scope changes
afterwards, and it uses the time it is called with rather than the time it
was created.

Example:
    >>> with domain_scope("s3"):
    ...     emit = get_logger_io()
    >>> emit(datetime.now(UTC), LogLevel.INFO, "uploaded", {"key": "a.txt"})  # domain "s3"
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Callable

from ..foundation.types import JsonDict, JsonValue, LogLevel

if TYPE_CHECKING:
    from .env import LoggerEnv

LoggerIO = Callable[[datetime, LogLevel, str, JsonValue], None]


def logger_io(env: LoggerEnv) -> LoggerIO:
    """Callback emitting through `env` (an immutable snapshot)."""
    return env.emit


def _record_level(levelno: int) -> LogLevel:
    if levelno >= logging.WARNING:
        return LogLevel.ATTENTION
    return LogLevel.INFO if levelno >= logging.INFO else LogLevel.TRACE


class CallbackHandler(logging.Handler):
    """stdlib logging handler that re-emits records through a captured callback.

    Attach it to a third-party library's logger to have that library's
    records appear under the domain and data active when the handler was made.

    Example:
        >>> handler = CallbackHandler(ambient.get_logger_io())
        >>> logging.getLogger("botocore").addHandler(handler)
    """

    def __init__(self, emit: LoggerIO, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._emit = emit

    def emit(self, record: logging.LogRecord) -> None:
        data: JsonDict = {"logger": record.name}
        if record.exc_info:
            data["exc_info"] = logging.Formatter().formatException(record.exc_info)
        try:
            text = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        self._emit(datetime.fromtimestamp(record.created, tz=UTC), _record_level(record.levelno), text, data)
