"""Error handling for persevere.

- ErrorCode: Classification of engine-produced failures
- RetryError: Base exception for the engine's own outcomes
- RetryCancelled/RetryTimeout: Cancellation and timeout outcomes
"""

from .errors import (
    DEFAULT_CANCEL_REASON,
    TIMEOUT_MESSAGE,
    ErrorCode,
    RetryCancelled,
    RetryError,
    RetryTimeout,
)

__all__ = [
    "ErrorCode",
    "RetryError",
    "RetryCancelled",
    "RetryTimeout",
    "DEFAULT_CANCEL_REASON",
    "TIMEOUT_MESSAGE",
]
