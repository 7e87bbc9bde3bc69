"""Environment-based configuration using pydantic-settings.

Provides the defaults that RetryPolicy falls back to, plus logging
configuration. Supports .env files and nested configuration.

Example:
    >>> from persevere.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.max_retries
    3
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # PERSEVERE_RETRY_MAX_RETRIES=5
    # PERSEVERE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeInt, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Default retry configuration. Durations are milliseconds."""

    model_config = SettingsConfigDict(
        env_prefix="PERSEVERE_RETRY_",
        extra="ignore",
    )

    max_retries: NonNegativeInt = Field(default=3, description="Retries after the first attempt")
    retry_delay: NonNegativeInt = Field(default=1000, description="Base delay between attempts (ms)")
    timeout: PositiveInt | None = Field(default=None, description="Overall session timeout (ms)")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PERSEVERE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class PersevereSettings(BaseSettings):
    """Root settings for persevere.

    Loads configuration from environment variables with PERSEVERE_ prefix.

    Example environment variables:
        PERSEVERE_RETRY_MAX_RETRIES=5
        PERSEVERE_RETRY_RETRY_DELAY=250
        PERSEVERE_RETRY_TIMEOUT=10000
        PERSEVERE_LOG_LEVEL=DEBUG
        PERSEVERE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="PERSEVERE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> PersevereSettings:
    """Get the global settings instance (cached)."""
    return PersevereSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
