"""In-memory sink for tests and buffering."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..foundation.errors import SinkClosedError
from ..foundation.types import LogLevel, LogMessage


@dataclass(slots=True)
class MemorySink:
    """Thread-safe buffer of emitted messages.

    Example:
        >>> sink = MemorySink()
        >>> run_log("main", sink, lambda: log_info_("hello"))
        >>> sink.texts
        ['hello']
    """

    _messages: list[LogMessage] = field(default_factory=list, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    closed: bool = False

    def emit(self, message: LogMessage) -> None:
        with self._lock:
            if self.closed:
                raise SinkClosedError(self)
            self._messages.append(message)

    def close(self) -> None:
        with self._lock:
            self.closed = True

    @property
    def messages(self) -> list[LogMessage]:
        """Snapshot of emitted messages, oldest first."""
        with self._lock:
            return list(self._messages)

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.messages]

    def at_level(self, level: LogLevel) -> list[LogMessage]:
        return [m for m in self.messages if m.level == level]

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
