"""Runtime - Execution flow and control.

Contains: retry engine, concurrency primitives, observability.
"""

from __future__ import annotations

from .concurrency import CancellationSource, CancellationToken, delay, run_sync
from .observability import configure_logging, get_logger
from .retry import (
    Backoff,
    ConstantBackoff,
    DecayBackoff,
    ExponentialBackoff,
    RetryPolicy,
    resolve_backoff,
    retry,
    retry_sync,
    retrying,
)

__all__ = [
    # Concurrency
    "CancellationToken", "CancellationSource", "delay", "run_sync",
    # Retry
    "RetryPolicy", "Backoff", "ConstantBackoff", "ExponentialBackoff", "DecayBackoff", "resolve_backoff",
    "retry", "retry_sync", "retrying",
    # Observability
    "configure_logging", "get_logger",
]
