"""Retry wrapper: rerun a computation on failure, logging through the inner capability.

Each attempt runs inside `local_data(attempt=n)`, so everything the attempt
logs carries its attempt number. Failures that will be retried are logged at
attention level; the last failure propagates unchanged.

Example:
    >>> retrying = Retrying(ambient, RetryPolicy(max_retries=2, backoff=ConstantBackoff(0.1)))
    >>> rows = retrying.call(lambda: fetch_rows(cursor))
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Annotated, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer

from logscope.foundation.config import get_settings

from ..layers import LogLayer
from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from logscope.core.capability import LogCapable

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """When and how often to retry.

    Attributes:
        max_retries: Maximum retry attempts (0 = no retries)
        backoff: Backoff strategy for delay calculation
        retry_on: Exception types that trigger a retry
        on_retry: Optional callback (attempt, error, delay) called before sleeping
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    retry_on: tuple[type[Exception], ...] = (Exception,)
    on_retry: Callable[[int, Exception, float], None] | None = Field(default=None, exclude=True, repr=False)

    @field_serializer("retry_on")
    def _serialize_retry_on(self, v: tuple[type[Exception], ...]) -> list[str]:
        return [t.__name__ for t in v]

    @computed_field
    @property
    def is_disabled(self) -> bool:
        """Whether retries are effectively disabled."""
        return self.max_retries == 0 or not self.retry_on

    @classmethod
    def from_settings(cls) -> RetryPolicy:
        """Policy built from LOGSCOPE_RETRY_* settings."""
        s = get_settings().retry
        return cls(
            max_retries=s.max_retries,
            backoff=ExponentialBackoff.from_settings(s),
        )

    def should_retry(self, exc: Exception, attempt: int) -> bool:
        """Whether to retry after `exc` on 0-indexed `attempt`."""
        return attempt < self.max_retries and isinstance(exc, self.retry_on)

    def get_delay(self, attempt: int) -> float:
        return self.backoff.delay(attempt)


NO_RETRY = RetryPolicy(max_retries=0, retry_on=())


class Retrying(LogLayer[None]):
    """Layer running computations with retries.

    The attempt counter is local to each `call`/`acall`, so one instance can
    serve concurrent calls. The body sees its 1-based attempt number in the
    ambient data under "attempt".
    """

    __slots__ = ("policy",)

    def __init__(self, inner: LogCapable, policy: RetryPolicy | None = None) -> None:
        super().__init__(inner)
        self.policy = policy if policy is not None else RetryPolicy.from_settings()

    def _next_delay(self, exc: Exception, attempt: int) -> float | None:
        """Delay before the next attempt, or None when `exc` should propagate."""
        if not self.policy.should_retry(exc, attempt):
            return None
        delay = self.policy.get_delay(attempt)
        self.log_attention("retrying", {
            "attempt": attempt + 1,
            "max_retries": self.policy.max_retries,
            "delay": round(delay, 3),
            "error": repr(exc),
        })
        if self.policy.on_retry:
            self.policy.on_retry(attempt, exc, delay)
        return delay

    def call(self, fn: Callable[[], T]) -> T:
        """Run `fn`, retrying per policy. Blocks while backing off."""
        attempt = 0
        while True:
            try:
                return self.local_data({"attempt": attempt + 1}, fn)
            except Exception as exc:
                if (delay := self._next_delay(exc, attempt)) is None:
                    raise
            time.sleep(delay)
            attempt += 1

    async def acall(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Await `fn()`, retrying per policy. Cancellation during backoff propagates."""
        attempt = 0
        while True:
            try:
                return await self.alocal_data({"attempt": attempt + 1}, fn)
            except Exception as exc:
                if (delay := self._next_delay(exc, attempt)) is None:
                    raise
            await asyncio.sleep(delay)
            attempt += 1
