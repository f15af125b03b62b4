"""Error types raised by logscope's stock sinks.

The context layer defines no errors of its own: anything raised inside a
scoped computation, or by a sink, propagates unchanged.
"""

from __future__ import annotations


class LogscopeError(Exception):
    """Base class for errors raised by logscope itself."""


class SinkClosedError(LogscopeError, RuntimeError):
    """A message was emitted to a sink after it was closed."""

    def __init__(self, sink: object) -> None:
        super().__init__(f"{type(sink).__name__} is closed")
        self.sink = sink
