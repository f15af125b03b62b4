"""Context-variable backed logging capability.

The ambient LoggerEnv lives in a ContextVar, so it travels with the logical
call: asyncio tasks inherit a copy at creation, `contextvars.copy_context()`
carries it into threads, and concurrent branches never share a mutable cell.
Scoping sets the variable and resets it in a `finally` block.

Quick Start:
    >>> from logscope import MemorySink, log_info_, local_data, run_log
    >>> sink = MemorySink()
    >>> def handler() -> None:
    ...     local_data({"req": "42"}, lambda: log_info_("start"))
    ...     log_info_("end")
    >>> run_log("svc", sink, handler)
    >>> [m.data for m in sink.messages]
    [{'req': '42'}, {}]

Scopes set with `data_scope`/`domain_scope` inside a generator stay active
while the generator is suspended at a `yield`; use the callable forms there.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Callable, TextIO, TypeVar

from ..foundation.config import get_settings
from ..foundation.types import DataPrecedence, JsonValue, LogLevel
from ..sinks import ConsoleSink, JsonSink, NullSink, Sink, StdlibSink, close_sink
from .capability import LogOps
from .env import LoggerEnv

if TYPE_CHECKING:
    from types import TracebackType

    from .env import Pairs

T = TypeVar("T")

_env: ContextVar[LoggerEnv | None] = ContextVar("logscope_env", default=None)
_default_env: LoggerEnv | None = None


def now() -> datetime:
    """Current wall-clock time (UTC)."""
    return datetime.now(UTC)


def _scoped(env: LoggerEnv, fn: Callable[[], T]) -> T:
    token = _env.set(env)
    try:
        return fn()
    finally:
        _env.reset(token)


async def _ascoped(env: LoggerEnv, fn: Callable[[], Awaitable[T]]) -> T:
    token = _env.set(env)
    try:
        return await fn()
    finally:
        _env.reset(token)


class AmbientLog(LogOps):
    """Log capability reading the env of the current context.

    Stateless: every instance sees the same ambient env, so a single shared
    instance (`ambient`) is enough.
    """

    __slots__ = ()

    def log_message(self, level: LogLevel, text: str, data: JsonValue) -> None:
        self.get_logger_env().emit(now(), level, text, data)

    def local_data(self, pairs: Pairs, fn: Callable[[], T]) -> T:
        return _scoped(self.get_logger_env().with_data(pairs), fn)

    def local_domain(self, name: str, fn: Callable[[], T]) -> T:
        return _scoped(self.get_logger_env().with_domain(name), fn)

    async def alocal_data(self, pairs: Pairs, fn: Callable[[], Awaitable[T]]) -> T:
        return await _ascoped(self.get_logger_env().with_data(pairs), fn)

    async def alocal_domain(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        return await _ascoped(self.get_logger_env().with_domain(name), fn)

    def get_logger_env(self) -> LoggerEnv:
        env = _env.get()
        return env if env is not None else default_env()

    def __repr__(self) -> str:
        return f"AmbientLog({self.get_logger_env()!r})"


ambient = AmbientLog()


# ─────────────────────────────────────────────────────────────────────────────
# Sessions
# ─────────────────────────────────────────────────────────────────────────────


def new_env(component: str, sink: Sink, *, precedence: DataPrecedence | None = None) -> LoggerEnv:
    """Root env for a session: empty domain and data."""
    return LoggerEnv(sink=sink, component=component,
                     precedence=precedence or get_settings().data_precedence)


def run_log(component: str, sink: Sink, fn: Callable[[], T], *, precedence: DataPrecedence | None = None) -> T:
    """Run `fn` in a fresh logging session bound to `sink`."""
    return _scoped(new_env(component, sink, precedence=precedence), fn)


async def arun_log(
    component: str,
    sink: Sink,
    fn: Callable[[], Awaitable[T]],
    *,
    precedence: DataPrecedence | None = None,
) -> T:
    """Await `fn()` in a fresh logging session bound to `sink`."""
    return await _ascoped(new_env(component, sink, precedence=precedence), fn)


@contextmanager
def log_session(
    component: str,
    sink: Sink,
    *,
    precedence: DataPrecedence | None = None,
    close: bool = False,
) -> Iterator[LoggerEnv]:
    """Context manager form of `run_log`. With close=True the sink is closed on exit.

    Example:
        >>> with log_session("worker", JsonSink()):
        ...     log_info_("ready")
    """
    env = new_env(component, sink, precedence=precedence)
    token = _env.set(env)
    try:
        yield env
    finally:
        _env.reset(token)
        if close:
            close_sink(sink)


class _Scope:
    """Reusable and re-entrant: each `__enter__` pushes a token that the matching exit resets."""

    __slots__ = ("_derive", "_tokens")

    def __init__(self, derive: Callable[[LoggerEnv], LoggerEnv]) -> None:
        self._derive = derive
        self._tokens: list[Token[LoggerEnv | None]] = []

    def __enter__(self) -> LoggerEnv:
        env = self._derive(ambient.get_logger_env())
        self._tokens.append(_env.set(env))
        return env

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        _env.reset(self._tokens.pop())


class data_scope(_Scope):
    """Context manager adding key/value pairs to all messages within the scope.

    Example:
        >>> with data_scope(request_id="abc123"):
        ...     log_info_("processing")  # includes request_id
        >>> log_info_("done")  # no request_id
    """

    __slots__ = ()

    def __init__(self, pairs: Pairs = (), /, **kw: object) -> None:
        super().__init__(lambda env: env.with_data(pairs).with_data(kw))


class domain_scope(_Scope):
    """Context manager pushing a domain segment for the duration of the scope."""

    __slots__ = ()

    def __init__(self, name: str) -> None:
        super().__init__(lambda env: env.with_domain(name))


# ─────────────────────────────────────────────────────────────────────────────
# Default Session
# ─────────────────────────────────────────────────────────────────────────────


def make_sink(format: str, *, output: TextIO | None = None, colors: bool | None = None) -> Sink:  # noqa: A002
    """Build a stock sink by format name: "console", "json", "stdlib" or "none"."""
    match format:
        case "console": return ConsoleSink(output=output or sys.stderr, colors=colors)
        case "json": return JsonSink(output=output or sys.stdout)
        case "stdlib": return StdlibSink(logging.getLogger(get_settings().stdlib_logger))
        case "none": return NullSink()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', 'stdlib' or 'none'")


def configure_logging(
    format: str | None = None,  # noqa: A002 - matches the settings field
    *,
    component: str | None = None,
    sink: Sink | None = None,
    output: TextIO | None = None,
    colors: bool | None = None,
    precedence: DataPrecedence | None = None,
) -> LoggerEnv:
    """Configure the default session used outside `run_log`/`log_session`.

    Unset arguments fall back to settings (LOGSCOPE_* environment variables).
    """
    global _default_env
    settings = get_settings()
    if sink is None:
        sink = make_sink(format or settings.format, output=output,
                         colors=colors if colors is not None else settings.colors)
    _default_env = LoggerEnv(sink=sink, component=component or settings.component,
                             precedence=precedence or settings.data_precedence)
    return _default_env


def default_env() -> LoggerEnv:
    """Env of the default session, configured from settings on first use."""
    return _default_env if _default_env is not None else configure_logging()


def reset_logging() -> None:
    """Forget the default session (useful for testing)."""
    global _default_env
    _default_env = None


# Shortcuts on the shared ambient capability

log_message = ambient.log_message
local_data = ambient.local_data
local_domain = ambient.local_domain
alocal_data = ambient.alocal_data
alocal_domain = ambient.alocal_domain
get_logger_env = ambient.get_logger_env
get_logger_io = ambient.get_logger_io
log_attention = ambient.log_attention
log_info = ambient.log_info
log_trace = ambient.log_trace
log_attention_ = ambient.log_attention_
log_info_ = ambient.log_info_
log_trace_ = ambient.log_trace_
