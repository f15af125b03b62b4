"""Console sinks: human-readable lines and JSON Lines."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO

import orjson

from ..foundation.types import LogLevel, LogMessage

_COLORS = {"reset": "\033[0m", "bold": "\033[1m", "dim": "\033[2m", "red": "\033[31m",
           "green": "\033[32m", "yellow": "\033[33m", "cyan": "\033[36m"}
_NO_COLORS = {k: "" for k in _COLORS}
_LEVEL_COLORS = {LogLevel.TRACE: _COLORS["dim"], LogLevel.INFO: _COLORS["green"], LogLevel.ATTENTION: _COLORS["yellow"]}


@dataclass(slots=True)
class ConsoleSink:
    """Human-readable console output.

    Format: ``2024-01-03 10:30:45 INFO main/worker.fetch: fetched {"url": ...}``
    """

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None  # None = auto-detect

    def __post_init__(self) -> None:
        if self.colors is None:
            self.colors = getattr(self.output, "isatty", lambda: False)()

    def emit(self, message: LogMessage) -> None:
        if not self.colors:
            print(message.format(), file=self.output)
            return
        c = _COLORS
        source = "/".join(filter(None, (message.component, message.qualified_domain)))
        parts = [f"{c['dim']}{message.time:%Y-%m-%d %H:%M:%S}{c['reset']}",
                 f"{_LEVEL_COLORS.get(message.level, c['dim'])}{message.level.name}{c['reset']}",
                 f"{c['cyan']}{source}:{c['reset']}",
                 f"{c['bold']}{message.text}{c['reset']}"]
        if message.data != {}:
            parts.append(orjson.dumps(message.data, option=orjson.OPT_NON_STR_KEYS).decode())
        print(" ".join(parts), file=self.output)


@dataclass(slots=True)
class JsonSink:
    """JSON Lines output for log aggregation (Elasticsearch, Loki, Datadog, etc.)."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def emit(self, message: LogMessage) -> None:
        print(orjson.dumps(message.model_dump(mode="json"), option=orjson.OPT_NON_STR_KEYS).decode(),
              file=self.output)
