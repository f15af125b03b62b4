"""Generic delegation of the logging capability through wrapper layers.

A layer wraps an inner log-capable computation (the ambient capability or
another layer) and adds its own behaviour: retries, transactions, task
groups. Any layer built on `LogLayer` is log-capable itself without
layer-specific logging code:

- `log_message` and `get_logger_env` forward to the inner capability.
- `local_data`/`local_domain` capture the layer's state, run the inner
  capability's scoped operation with a body that resumes the layer from that
  state, then restore the layer from the state the body handed back. The
  inner scope therefore covers all of the layer's wrapped logic and is
  unwound by the inner capability, however many layers are stacked.

Subclasses with state override the control protocol (`capture`, `resume`,
`aresume`, `restore`); stateless layers need nothing.

Example:
    >>> layer = Transactional(Retrying(ambient))
    >>> layer.local_domain("sync", lambda: layer.log_info_("hello"))  # domain "sync"
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from ..core.capability import LogOps

if TYPE_CHECKING:
    from ..core.capability import LogCapable
    from ..core.env import LoggerEnv, Pairs
    from ..foundation.types import JsonValue, LogLevel

S = TypeVar("S")
T = TypeVar("T")


class LogLayer(LogOps, Generic[S]):
    """Base for wrapper computations over an inner log-capable computation.

    If a scoped body raises, the error propagates unchanged and `restore` is
    skipped: the layer keeps whatever state the body left behind.
    """

    __slots__ = ("inner",)

    def __init__(self, inner: LogCapable) -> None:
        self.inner = inner

    # Control protocol

    def capture(self) -> S:
        """Snapshot of the layer's state taken before entering an inner scope."""
        return None  # type: ignore[return-value]

    def resume(self, state: S, fn: Callable[[], T]) -> tuple[T, S]:
        """Run `fn` with the layer resumed from `state`; return its result and the new state."""
        return fn(), state

    async def aresume(self, state: S, fn: Callable[[], Awaitable[T]]) -> tuple[T, S]:
        return await fn(), state

    def restore(self, state: S) -> None:
        """Reinstate the state handed back by `resume`."""

    def _control(self, scope: Callable[[Callable[[], tuple[T, S]]], tuple[T, S]], fn: Callable[[], T]) -> T:
        state = self.capture()
        result, state = scope(lambda: self.resume(state, fn))
        self.restore(state)
        return result

    async def _acontrol(
        self,
        scope: Callable[[Callable[[], Awaitable[tuple[T, S]]]], Awaitable[tuple[T, S]]],
        fn: Callable[[], Awaitable[T]],
    ) -> T:
        state = self.capture()
        result, state = await scope(lambda: self.aresume(state, fn))
        self.restore(state)
        return result

    # Capability, delegated

    def log_message(self, level: LogLevel, text: str, data: JsonValue) -> None:
        self.inner.log_message(level, text, data)

    def get_logger_env(self) -> LoggerEnv:
        return self.inner.get_logger_env()

    def local_data(self, pairs: Pairs, fn: Callable[[], T]) -> T:
        return self._control(lambda body: self.inner.local_data(pairs, body), fn)

    def local_domain(self, name: str, fn: Callable[[], T]) -> T:
        return self._control(lambda body: self.inner.local_domain(name, body), fn)

    async def alocal_data(self, pairs: Pairs, fn: Callable[[], Awaitable[T]]) -> T:
        return await self._acontrol(lambda body: self.inner.alocal_data(pairs, body), fn)

    async def alocal_domain(self, name: str, fn: Callable[[], Awaitable[T]]) -> T:
        return await self._acontrol(lambda body: self.inner.alocal_domain(name, body), fn)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inner!r})"


class StateLayer(LogLayer[S]):
    """Layer owning a state value that survives scoped bodies.

    Changes a body makes to the state inside `local_data`/`local_domain` are
    visible after the scope exits. Not meant to be shared by concurrently
    running tasks: each task should wrap its own StateLayer.

    Example:
        >>> counter = StateLayer(ambient, 0)
        >>> counter.local_data({"k": 1}, lambda: counter.modify(lambda n: n + 1))
        >>> counter.get()
        1
    """

    __slots__ = ("state",)

    def __init__(self, inner: LogCapable, initial: S) -> None:
        super().__init__(inner)
        self.state = initial

    def get(self) -> S:
        return self.state

    def put(self, state: S) -> None:
        self.state = state

    def modify(self, f: Callable[[S], S]) -> None:
        self.state = f(self.state)

    def capture(self) -> S:
        return self.state

    def resume(self, state: S, fn: Callable[[], T]) -> tuple[T, S]:
        self.state = state
        result = fn()
        return result, self.state

    async def aresume(self, state: S, fn: Callable[[], Awaitable[T]]) -> tuple[T, S]:
        self.state = state
        result = await fn()
        return result, self.state

    def restore(self, state: S) -> None:
        self.state = state

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inner!r}, state={self.state!r})"
