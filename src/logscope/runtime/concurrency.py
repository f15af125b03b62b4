"""Concurrency wrappers that carry the logging context with the logical call.

asyncio tasks already inherit a copy of the creating context. Executor
threads do not, so everything here that hands work to a thread runs it inside
`contextvars.copy_context()` taken at submission time.

Example:
    >>> async with TaskGroup(ambient) as tg:
    ...     tg.spawn(fetch_a, domain="a")
    ...     tg.spawn(fetch_b, domain="b")
    >>> rows = await to_thread(read_rows, path)  # logs with the caller's domain/data
"""

from __future__ import annotations

import asyncio
import contextvars
import functools
import os
from collections.abc import Awaitable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

from .layers import LogLayer

if TYPE_CHECKING:
    from types import TracebackType

    from ..core.capability import LogCapable
    from ..core.env import Pairs

T = TypeVar("T")
P = ParamSpec("P")

DEFAULT_THREAD_WORKERS = min(32, (os.cpu_count() or 1) + 4)


async def to_thread(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a sync function in the default executor under a copy of the current context."""
    loop = asyncio.get_running_loop()
    ctx = contextvars.copy_context()
    return await loop.run_in_executor(None, functools.partial(ctx.run, func, *args, **kwargs))


@dataclass(slots=True)
class ContextThreadPool:
    """Thread pool whose tasks see the submitter's logging context.

    Example:
        >>> with ContextThreadPool(4) as pool:
        ...     futures = [pool.submit(process, item) for item in items]
    """

    max_workers: int = DEFAULT_THREAD_WORKERS
    thread_name_prefix: str = "logscope-"
    _executor: ThreadPoolExecutor | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    @property
    def executor(self) -> ThreadPoolExecutor:
        """Get or create the underlying executor."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix,
            )
        return self._executor

    def submit(self, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> Future[T]:
        ctx = contextvars.copy_context()
        return self.executor.submit(ctx.run, func, *args, **kwargs)

    def map(self, func: Callable[[T], object], items: list[T]) -> list[object]:
        """Map `func` over items in the pool; each call gets its own context copy."""
        return [f.result() for f in [self.submit(func, item) for item in items]]

    async def run(self, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
        loop = asyncio.get_running_loop()
        ctx = contextvars.copy_context()
        return await loop.run_in_executor(self.executor, functools.partial(ctx.run, func, *args, **kwargs))

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> ContextThreadPool:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                 exc_tb: TracebackType | None) -> None:
        self.shutdown(wait=True)


class TaskGroup(LogLayer[None]):
    """Layer around `asyncio.TaskGroup`; children may run under their own scope.

    Each child starts from the context current at `spawn`, then applies its
    own domain/data, so siblings never observe each other's scope. The first
    failing child cancels the rest, as with `asyncio.TaskGroup`.
    """

    __slots__ = ("_group",)

    def __init__(self, inner: LogCapable) -> None:
        super().__init__(inner)
        self._group: asyncio.TaskGroup | None = None

    async def __aenter__(self) -> TaskGroup:
        self._group = asyncio.TaskGroup()
        await self._group.__aenter__()
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None,
                        exc_tb: TracebackType | None) -> bool | None:
        group, self._group = self._group, None
        if group is None:
            raise RuntimeError("TaskGroup is not entered; use 'async with TaskGroup(...)'")
        return await group.__aexit__(exc_type, exc_val, exc_tb)

    def spawn(
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        domain: str | None = None,
        data: Pairs | None = None,
        name: str | None = None,
    ) -> asyncio.Task[T]:
        """Start `fn()` as a child task, optionally under its own domain and data."""
        if self._group is None:
            raise RuntimeError("TaskGroup is not entered; use 'async with TaskGroup(...)'")

        async def child() -> T:
            body = fn
            if data is not None:
                body = functools.partial(self.alocal_data, data, body)
            if domain is not None:
                body = functools.partial(self.alocal_domain, domain, body)
            return await body()

        return self._group.create_task(child(), name=name)
