"""Configuration management using pydantic-settings."""

from .settings import LogscopeSettings, RetrySettings, clear_settings_cache, get_settings

__all__ = [
    "LogscopeSettings",
    "RetrySettings",
    "clear_settings_cache",
    "get_settings",
]
