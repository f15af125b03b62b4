"""Delay schedules for the retry wrapper.

A schedule maps a 0-indexed retry number to seconds of sleep. Every schedule
is bounded: no delay is negative and none exceeds its `max_delay`, jitter
included. `ExponentialBackoff.from_settings` takes its bounds from
LOGSCOPE_RETRY_* settings.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from logscope.foundation.config import RetrySettings


@runtime_checkable
class Backoff(Protocol):
    def delay(self, attempt: int) -> float: ...


def _check_bounds(base: float, max_delay: float) -> None:
    if base < 0:
        raise ValueError(f"base delay must be >= 0, got {base}")
    if max_delay < base:
        raise ValueError(f"max_delay ({max_delay}) must be >= base delay ({base})")


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """`base * multiplier**attempt`, capped at `max_delay`.

    With jitter the delay is drawn uniformly from [d/2, 3d/2] and capped
    again, so concurrent retries spread out without breaking the bound.
    """

    base: float = 0.5
    max_delay: float = 30.0
    multiplier: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        _check_bounds(self.base, self.max_delay)
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> ExponentialBackoff:
        return cls(
            base=settings.base_delay,
            max_delay=settings.max_delay,
            multiplier=settings.multiplier,
            jitter=settings.jitter,
        )

    def delay(self, attempt: int) -> float:
        d = min(self.base * self.multiplier ** attempt, self.max_delay)
        if self.jitter:
            d = min(random.uniform(d / 2, d * 1.5), self.max_delay)
        return d


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """`base + increment * attempt`, capped at `max_delay`."""

    base: float = 0.5
    increment: float = 0.5
    max_delay: float = 30.0

    def __post_init__(self) -> None:
        _check_bounds(self.base, self.max_delay)

    def delay(self, attempt: int) -> float:
        return min(self.base + self.increment * attempt, self.max_delay)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    delay_seconds: float = 0.0

    def __post_init__(self) -> None:
        _check_bounds(self.delay_seconds, self.delay_seconds)

    def delay(self, attempt: int) -> float:
        return self.delay_seconds
