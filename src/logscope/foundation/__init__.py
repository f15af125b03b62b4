"""Foundation: message model, errors and configuration."""

from .errors import LogscopeError, SinkClosedError
from .types import (
    DOMAIN_SEPARATOR,
    DataPrecedence,
    EMPTY_OBJECT,
    JsonDict,
    JsonPrimitive,
    JsonValue,
    LogLevel,
    LogMessage,
    to_json_value,
)

__all__ = [
    "DOMAIN_SEPARATOR", "DataPrecedence", "EMPTY_OBJECT", "JsonDict", "JsonPrimitive", "JsonValue",
    "LogLevel", "LogMessage", "to_json_value",
    "LogscopeError", "SinkClosedError",
]
