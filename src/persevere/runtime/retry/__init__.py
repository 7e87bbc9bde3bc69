"""Retry engine with decay, cooperative cancellation and an overall timeout.

Example:
    >>> from persevere.runtime.retry import RetryPolicy, retry
    >>>
    >>> policy = RetryPolicy(
    ...     max_retries=3,
    ...     retry_delay=500,
    ...     decay=2,
    ...     timeout=10_000,
    ... )
    >>> data = await retry(fetch_quotes, policy)
"""

from .backoff import (
    Backoff,
    ConstantBackoff,
    DecayBackoff,
    DecayFunction,
    ExponentialBackoff,
    resolve_backoff,
)
from .engine import Operation, retry, retry_sync, retrying
from .policy import BeforeRetryHook, RetryPolicy

__all__ = [
    # Backoff strategies
    "Backoff",
    "ConstantBackoff",
    "ExponentialBackoff",
    "DecayBackoff",
    "DecayFunction",
    "resolve_backoff",
    # Policy
    "RetryPolicy",
    "BeforeRetryHook",
    # Execution
    "Operation",
    "retry",
    "retry_sync",
    "retrying",
]
