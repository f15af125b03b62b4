"""Sink contract: the terminal consumer of log messages.

A sink receives one fully merged LogMessage per `log_message` call. Sinks may
perform I/O and may raise; the context layer propagates such errors unchanged.
The context layer adds no synchronisation: a sink shared by concurrent
computations must be safe for concurrent `emit` calls itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from ..foundation.types import LogMessage


@runtime_checkable
class Sink(Protocol):
    """Protocol for message sinks."""

    def emit(self, message: LogMessage) -> None: ...


def close_sink(sink: Sink) -> None:
    """Close a sink if it supports closing."""
    if (close := getattr(sink, "close", None)) is not None:
        close()


@dataclass(slots=True)
class NullSink:
    """Discards every message."""

    def emit(self, message: LogMessage) -> None:
        pass


@dataclass(slots=True)
class CallbackSink:
    """Adapts a plain function into a sink.

    Example:
        >>> sink = CallbackSink(lambda m: print(m.format()))
    """

    callback: Callable[[LogMessage], None]

    def emit(self, message: LogMessage) -> None:
        self.callback(message)
