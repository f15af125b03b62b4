"""Core: logger env, the logging capability and its ambient implementation."""

from .ambient import (
    AmbientLog,
    alocal_data,
    alocal_domain,
    ambient,
    arun_log,
    configure_logging,
    data_scope,
    default_env,
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
    make_sink,
    new_env,
    now,
    reset_logging,
    run_log,
)
from .callback import CallbackHandler, LoggerIO, logger_io
from .capability import LogCapable, LogOps
from .env import LoggerEnv, Pair, Pairs, normalize_pairs

__all__ = [
    # Env & capability
    "LoggerEnv", "Pair", "Pairs", "normalize_pairs", "LogCapable", "LogOps",
    # Ambient capability
    "AmbientLog", "ambient", "now",
    "log_message", "local_data", "local_domain", "alocal_data", "alocal_domain", "get_logger_env",
    "log_attention", "log_info", "log_trace", "log_attention_", "log_info_", "log_trace_",
    "data_scope", "domain_scope",
    # Sessions
    "run_log", "arun_log", "log_session", "new_env",
    "configure_logging", "default_env", "make_sink", "reset_logging",
    # Callback adapter
    "LoggerIO", "logger_io", "get_logger_io", "CallbackHandler",
]
