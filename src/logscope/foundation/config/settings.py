"""Environment-based configuration using pydantic-settings.

Example:
    >>> from logscope.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.component
    'main'

    # Or with environment variables:
    # LOGSCOPE_COMPONENT=worker
    # LOGSCOPE_FORMAT=json
    # LOGSCOPE_RETRY__MAX_RETRIES=5
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..types import DataPrecedence


class RetrySettings(BaseSettings):
    """Defaults for the retry wrapper."""

    model_config = SettingsConfigDict(
        env_prefix="LOGSCOPE_RETRY_",
        extra="ignore",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    base_delay: NonNegativeFloat = Field(default=0.5, description="Base delay in seconds")
    max_delay: PositiveFloat = Field(default=30.0, description="Maximum delay in seconds")
    multiplier: PositiveFloat = Field(default=2.0, description="Exponential backoff base")
    jitter: bool = True


class LogscopeSettings(BaseSettings):
    """Root settings for logscope.

    Example environment variables:
        LOGSCOPE_COMPONENT=api
        LOGSCOPE_FORMAT=json
        LOGSCOPE_DATA_PRECEDENCE=ambient
    """

    model_config = SettingsConfigDict(
        env_prefix="LOGSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    component: str = Field(default="main", min_length=1, description="Component name of the default session")
    format: Literal["console", "json", "stdlib", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force console colours (None = auto-detect)")
    data_precedence: DataPrecedence = DataPrecedence.MESSAGE
    stdlib_logger: str = Field(default="logscope", description="Logger name used by the stdlib sink")

    retry: RetrySettings = Field(default_factory=RetrySettings)

    @field_validator("format", "data_precedence", mode="before")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_settings() -> LogscopeSettings:
    """Get the global settings instance (cached)."""
    return LogscopeSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
