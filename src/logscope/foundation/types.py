"""Message model: log levels, structured messages and JSON coercion.

Uses Pydantic models for validation/serialization. Messages are built fresh per
emission via model_construct and never mutated afterwards.
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Any, Union

import orjson
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic_core import to_jsonable_python

# JSON type aliases - using Any for recursive types to avoid Pydantic resolution issues
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

DOMAIN_SEPARATOR = "."


class LogLevel(IntEnum):
    """Severity of a log message. Ordered: TRACE < INFO < ATTENTION.

    Values match stdlib logging's DEBUG/INFO/WARNING so sinks bridging to
    `logging` can pass them through unchanged.
    """

    TRACE = 10
    INFO = 20
    ATTENTION = 30

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, text: str) -> LogLevel:
        """Parse level name case-insensitively ("info", "ATTENTION", ...)."""
        try:
            return cls[text.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {text!r}. Use 'trace', 'info' or 'attention'") from None


class DataPrecedence(StrEnum):
    """Which side wins when call-site data and ambient data share a key."""

    MESSAGE = "message"
    AMBIENT = "ambient"


class LogMessage(BaseModel):
    """A single structured log message.

    Attributes:
        component: Name of the logging session that produced the message
        domain: Domain segments, outermost first
        time: Event time (UTC)
        level: Severity
        text: Human-readable message
        data: Structured payload (ambient data already merged in)
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", revalidate_instances="never",
        json_schema_extra={"title": "Log Message", "examples": [{
            "component": "main", "domain": "worker.fetch", "time": "2024-01-03T10:30:45Z",
            "level": "info", "text": "fetched", "data": {"url": "https://example.com"},
        }]},
    )

    component: str
    domain: tuple[str, ...] = ()
    time: datetime
    level: LogLevel
    text: str
    data: JsonValue = None

    @property
    def qualified_domain(self) -> str:
        """Domain segments joined with '.'."""
        return DOMAIN_SEPARATOR.join(self.domain)

    @field_serializer("domain")
    def _serialize_domain(self, v: tuple[str, ...]) -> str:
        return DOMAIN_SEPARATOR.join(v)

    @field_serializer("level")
    def _serialize_level(self, v: LogLevel) -> str:
        return str(v)

    def format(self) -> str:
        """Render as a single human-readable line."""
        source = "/".join(filter(None, (self.component, self.qualified_domain)))
        line = f"{self.time:%Y-%m-%d %H:%M:%S} {self.level.name} {source}: {self.text}"
        if self.data == {}:
            return line
        return f"{line} {orjson.dumps(self.data, option=orjson.OPT_NON_STR_KEYS).decode()}"

    __str__ = format


EMPTY_OBJECT: JsonDict = {}


def to_json_value(payload: object) -> JsonValue:
    """Coerce an arbitrary payload into a JSON value.

    Handles Pydantic models, dataclasses, enums, datetimes, UUIDs, mappings and
    sequences. Anything without a JSON form falls back to its str().
    """
    match payload:
        case None | bool() | int() | float() | str():
            return payload
        case dict() if all(isinstance(k, str) for k in payload):
            return {k: to_json_value(v) for k, v in payload.items()}
        case _:
            return to_jsonable_python(payload, fallback=str)
