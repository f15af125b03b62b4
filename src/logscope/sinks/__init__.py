"""Stock sinks. Backends proper (Elasticsearch, files, ...) plug in through `Sink`."""

from .base import CallbackSink, NullSink, Sink, close_sink
from .console import ConsoleSink, JsonSink
from .memory import MemorySink
from .stdlib import StdlibSink

__all__ = [
    "CallbackSink",
    "ConsoleSink",
    "JsonSink",
    "MemorySink",
    "NullSink",
    "Sink",
    "StdlibSink",
    "close_sink",
]
