"""Persevere - Retry fallible calls with backoff, cancellation and timeouts.

One awaitable call resolves with the operation's first successful result or
fails with a well-defined terminal error: the operation's own last exception,
RetryCancelled, or RetryTimeout.

Quick Start:
    >>> from persevere import retry
    >>>
    >>> async def fetch_rates() -> dict:
    ...     return await client.get("/rates")
    >>>
    >>> rates = await retry(fetch_rates, max_retries=3, retry_delay=1000, decay=2)
    >>> # waits 1000ms, 2000ms, 4000ms between attempts

Cancellation and Timeout:
    >>> from persevere import CancellationSource, RetryCancelled, RetryTimeout
    >>>
    >>> source = CancellationSource()
    >>> try:
    ...     await retry(
    ...         lambda token: download(url, cancellation_token=token),
    ...         cancellation_token=source.token,
    ...         timeout=30_000,
    ...     )
    ... except RetryCancelled as e:
    ...     print("stopped:", e.reason)
    ... except RetryTimeout:
    ...     print("gave up after 30s")

Observing Retries:
    >>> async def report(attempt: int, error: Exception) -> None:
    ...     log.warning("retrying", attempt=attempt, error=str(error))
    >>>
    >>> await retry(flaky, on_before_retry=report)

Synchronous Callers:
    >>> from persevere import retry_sync
    >>> config = retry_sync(load_config, max_retries=2)

Decorator:
    >>> from persevere import retrying
    >>>
    >>> @retrying(max_retries=5, retry_delay=200)
    ... async def send(message: str) -> None:
    ...     await queue.put(message)
"""

__version__ = "0.1.0"

from .foundation import (
    ErrorCode,
    PersevereSettings,
    RetryCancelled,
    RetryError,
    RetryTimeout,
    clear_settings_cache,
    get_settings,
)
from .runtime import (
    Backoff,
    CancellationSource,
    CancellationToken,
    ConstantBackoff,
    DecayBackoff,
    ExponentialBackoff,
    RetryPolicy,
    configure_logging,
    delay,
    resolve_backoff,
    retry,
    retry_sync,
    retrying,
)

__all__ = [
    "__version__",
    # Engine
    "retry",
    "retry_sync",
    "retrying",
    "delay",
    # Policy
    "RetryPolicy",
    "Backoff",
    "ConstantBackoff",
    "ExponentialBackoff",
    "DecayBackoff",
    "resolve_backoff",
    # Cancellation
    "CancellationToken",
    "CancellationSource",
    # Errors
    "ErrorCode",
    "RetryError",
    "RetryCancelled",
    "RetryTimeout",
    # Config & logging
    "PersevereSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
]
