"""Logger environment: the scoped context carried by a logging computation.

A LoggerEnv is an immutable value. Scoping never mutates it; `with_data` and
`with_domain` return derived copies that live only as long as the scoped
sub-computation that installed them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import TYPE_CHECKING, Union

from ..foundation.types import (
    DOMAIN_SEPARATOR,
    DataPrecedence,
    JsonDict,
    JsonValue,
    LogLevel,
    LogMessage,
    to_json_value,
)

if TYPE_CHECKING:
    from ..sinks import Sink

Pair = tuple[str, JsonValue]
Pairs = Union[Mapping[str, object], Iterable[tuple[str, object]]]


def normalize_pairs(pairs: Pairs) -> tuple[Pair, ...]:
    """Accept a mapping or an iterable of (key, value) pairs; coerce values to JSON."""
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    return tuple((str(k), to_json_value(v)) for k, v in items)


@dataclass(frozen=True, slots=True)
class LoggerEnv:
    """Current domain, accumulated data and the sink messages go to.

    Attributes:
        sink: Terminal consumer of messages
        component: Session name, fixed for the whole session
        domain: Domain stack, outermost first
        data: Ambient key/value pairs in insertion order (duplicates allowed, last wins)
        precedence: Which side wins when call-site data and ambient data collide
    """

    sink: Sink
    component: str = "main"
    domain: tuple[str, ...] = ()
    data: tuple[Pair, ...] = ()
    precedence: DataPrecedence = field(default=DataPrecedence.MESSAGE, compare=False)

    @property
    def qualified_domain(self) -> str:
        return DOMAIN_SEPARATOR.join(self.domain)

    def with_data(self, pairs: Pairs) -> LoggerEnv:
        """Derive an env with `pairs` appended after the existing data."""
        return replace(self, data=(*self.data, *normalize_pairs(pairs)))

    def with_domain(self, name: str) -> LoggerEnv:
        """Derive an env with `name` pushed onto the domain stack."""
        return replace(self, domain=(*self.domain, name))

    def ambient_object(self) -> JsonDict:
        """Ambient pairs as a JSON object; later pairs win."""
        return dict(self.data)

    def merged_data(self, data: JsonValue) -> JsonValue:
        """Layer call-site data over the ambient data.

        Object payloads are merged key by key. Any other payload is kept as is
        when there is no ambient data, otherwise it is stored under "_data".
        The result never shares containers with the caller's payload.
        """
        data = to_json_value(data)
        if isinstance(data, dict):
            if not self.data:
                return data
            ambient = self.ambient_object()
            if self.precedence is DataPrecedence.AMBIENT:
                return {**data, **ambient}
            return {**ambient, **data}
        if not self.data:
            return data
        return {"_data": data, **self.ambient_object()}

    def make_message(self, time: datetime, level: LogLevel, text: str, data: JsonValue) -> LogMessage:
        return LogMessage.model_construct(
            component=self.component,
            domain=self.domain,
            time=time,
            level=level,
            text=text,
            data=self.merged_data(data),
        )

    def emit(self, time: datetime, level: LogLevel, text: str, data: JsonValue) -> None:
        """Build a message in this env and pass it to the sink. Sink errors propagate."""
        self.sink.emit(self.make_message(time, level, text, data))
