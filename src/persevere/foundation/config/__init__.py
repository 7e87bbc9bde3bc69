"""Configuration management using pydantic-settings.

Provides environment-based defaults with type safety and validation.
"""

from .settings import (
    LoggingSettings,
    PersevereSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "PersevereSettings",
    "RetrySettings",
    "clear_settings_cache",
    "get_settings",
]
