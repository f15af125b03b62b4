"""The logging capability: what any log-capable computation can do.

Every log-capable object carries a LoggerEnv that can be extended locally
with `local_data` and `local_domain`. The scoped forms run a zero-argument
computation and restore the previous env on every exit path: normal return,
exception, or cancellation. Nothing raised by the computation is caught or
altered.

Quick Start:
    >>> from logscope import MemorySink, ambient, run_log
    >>> sink = MemorySink()
    >>> def work() -> None:
    ...     ambient.log_info("fetched", {"rows": 3})
    >>> run_log("main", sink, lambda: ambient.local_domain("db", work))
    >>> sink.messages[0].qualified_domain
    'db'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Callable, Protocol, TypeVar, runtime_checkable

from ..foundation.types import EMPTY_OBJECT, JsonValue, LogLevel, to_json_value

if TYPE_CHECKING:
    from .callback import LoggerIO
    from .env import LoggerEnv, Pairs

T = TypeVar("T")


@runtime_checkable
class LogCapable(Protocol):
    """Protocol for computations with logging capabilities."""

    def log_message(self, level: LogLevel, text: str, data: JsonValue) -> None: ...
    def local_data(self, pairs: Pairs, fn: Callable[[], T]) -> T: ...
    def local_domain(self, name: str, fn: Callable[[], T]) -> T: ...
    async def alocal_data(self, pairs: Pairs, fn: Callable[[], Awaitable[T]]) -> T: ...
    async def alocal_domain(self, name: str, fn: Callable[[], Awaitable[T]]) -> T: ...
    def get_logger_env(self) -> LoggerEnv: ...


class LogOps(ABC):
    """Base for log-capable implementations.

    Subclasses supply the capability operations; the level helpers below are
    built on `log_message` and carry no state of their own.
    """

    __slots__ = ()

    @abstractmethod
    def log_message(self, level: LogLevel, text: str, data: JsonValue) -> None:
        """Write a message to the log using the current env and wall-clock time."""

    @abstractmethod
    def local_data(self, pairs: Pairs, fn: Callable[[], T]) -> T:
        """Run `fn` with `pairs` appended to the ambient data."""

    @abstractmethod
    def local_domain(self, name: str, fn: Callable[[], T]) -> T:
        """Run `fn` with `name` pushed onto the domain."""

    @abstractmethod
    async def alocal_data(self, pairs: Pairs, fn: Callable[[], Awaitable[T]]) -> T:
        """Await `fn()` with `pairs` appended to the ambient data."""

    @abstractmethod
    async def alocal_domain(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Await `fn()` with `name` pushed onto the domain."""

    @abstractmethod
    def get_logger_env(self) -> LoggerEnv:
        """Current env. Useful for building loggers that work outside this capability."""

    def get_logger_io(self) -> LoggerIO:
        """Plain callback logging "as" the current context; see `logscope.core.callback`."""
        from .callback import logger_io
        return logger_io(self.get_logger_env())

    # Level helpers

    def log_attention(self, text: str, payload: object) -> None:
        self.log_message(LogLevel.ATTENTION, text, to_json_value(payload))

    def log_info(self, text: str, payload: object) -> None:
        self.log_message(LogLevel.INFO, text, to_json_value(payload))

    def log_trace(self, text: str, payload: object) -> None:
        self.log_message(LogLevel.TRACE, text, to_json_value(payload))

    def log_attention_(self, text: str) -> None:
        """Like `log_attention`, without additional data."""
        self.log_attention(text, EMPTY_OBJECT)

    def log_info_(self, text: str) -> None:
        """Like `log_info`, without additional data."""
        self.log_info(text, EMPTY_OBJECT)

    def log_trace_(self, text: str) -> None:
        """Like `log_trace`, without additional data."""
        self.log_trace(text, EMPTY_OBJECT)
