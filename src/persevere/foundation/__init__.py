"""Foundation - Core building blocks for persevere.

Contains: error handling, config.
"""

from __future__ import annotations

from .config import (
    LoggingSettings,
    PersevereSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from .errors import ErrorCode, RetryCancelled, RetryError, RetryTimeout

__all__ = [
    # Errors
    "ErrorCode", "RetryError", "RetryCancelled", "RetryTimeout",
    # Config
    "PersevereSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
]
