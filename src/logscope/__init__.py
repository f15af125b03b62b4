"""logscope: structured, leveled logging with scoped context.

Any computation can emit messages carrying a hierarchical domain and
accumulated key/value data, independent of the sink that receives them.
Scoped context is restored on every exit path and follows the logical call
across asyncio tasks, threads, and wrapper layers (retries, transactions,
task groups).

Example:
    >>> from logscope import JsonSink, local_domain, log_info, log_session
    >>>
    >>> with log_session("main", JsonSink()):
    ...     local_domain("worker", lambda: log_info("started", {"pid": 1}))
"""

from .core import (
    AmbientLog,
    CallbackHandler,
    LogCapable,
    LoggerEnv,
    LoggerIO,
    LogOps,
    alocal_data,
    alocal_domain,
    ambient,
    arun_log,
    configure_logging,
    data_scope,
    domain_scope,
    get_logger_env,
    get_logger_io,
    local_data,
    local_domain,
    log_attention,
    log_attention_,
    log_info,
    log_info_,
    log_message,
    log_session,
    log_trace,
    log_trace_,
    logger_io,
    reset_logging,
    run_log,
)
from .foundation import (
    DataPrecedence,
    JsonValue,
    LogLevel,
    LogMessage,
    LogscopeError,
    SinkClosedError,
    to_json_value,
)
from .foundation.config import LogscopeSettings, clear_settings_cache, get_settings
from .runtime import (
    ContextThreadPool,
    LogLayer,
    RetryPolicy,
    Retrying,
    StateLayer,
    TaskGroup,
    Transactional,
    to_thread,
)
from .sinks import CallbackSink, ConsoleSink, JsonSink, MemorySink, NullSink, Sink, StdlibSink

__version__ = "0.1.0"

__all__ = [
    # Message model
    "LogLevel", "LogMessage", "JsonValue", "DataPrecedence", "to_json_value",
    # Capability
    "LogCapable", "LogOps", "LoggerEnv", "AmbientLog", "ambient",
    "log_message", "local_data", "local_domain", "alocal_data", "alocal_domain", "get_logger_env",
    "log_attention", "log_info", "log_trace", "log_attention_", "log_info_", "log_trace_",
    "data_scope", "domain_scope",
    # Sessions & configuration
    "run_log", "arun_log", "log_session", "configure_logging", "reset_logging",
    "LogscopeSettings", "get_settings", "clear_settings_cache",
    # Callback adapter
    "LoggerIO", "logger_io", "get_logger_io", "CallbackHandler",
    # Layers
    "LogLayer", "StateLayer", "Retrying", "RetryPolicy", "Transactional", "TaskGroup",
    "ContextThreadPool", "to_thread",
    # Sinks
    "Sink", "CallbackSink", "ConsoleSink", "JsonSink", "MemorySink", "NullSink", "StdlibSink",
    # Errors
    "LogscopeError", "SinkClosedError",
]
