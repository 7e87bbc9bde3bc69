"""Retry policy configuration.

A RetryPolicy bundles everything one retry session needs: the retry budget,
the base delay and its decay, the cancellation token, the observation hook
and the overall timeout. Durations are milliseconds.

Optimizations:
- Frozen for immutability and safe sharing between sessions
- Defaults pulled from settings once per construction
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Callable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    computed_field,
)

from persevere.foundation.config import get_settings
from persevere.runtime.concurrency import CancellationToken

from .backoff import Backoff, DecayFunction, resolve_backoff

BeforeRetryHook = Callable[[int, Exception], Awaitable[None] | None]


def _default_max_retries() -> int:
    return get_settings().retry.max_retries


def _default_retry_delay() -> int:
    return get_settings().retry.retry_delay


def _default_timeout() -> int | None:
    return get_settings().retry.timeout


class RetryPolicy(BaseModel):
    """Configurable retry policy for one retry session.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        retry_delay: Base wait between attempts, in milliseconds
        decay: Number > 1 for exponential growth, a function
            ``(retry, retry_delay) -> ms``, or None for a constant wait
        cancellation_token: Cooperative cancellation signal
        on_before_retry: Hook ``(attempt_index, rejection)`` awaited after the
            wait and before the next attempt
        timeout: Wall-clock ceiling for the whole session, in milliseconds

    Example:
        >>> policy = RetryPolicy(max_retries=5, retry_delay=200, decay=2)
        >>> [policy.get_delay(k) for k in (1, 2, 3)]
        [200.0, 400.0, 800.0]
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For CancellationToken protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_retries: NonNegativeInt = Field(default_factory=_default_max_retries)
    retry_delay: NonNegativeInt = Field(default_factory=_default_retry_delay)
    decay: float | DecayFunction | None = Field(default=None, repr=False)
    cancellation_token: CancellationToken | None = Field(default=None, exclude=True, repr=False)
    on_before_retry: BeforeRetryHook | None = Field(default=None, exclude=True, repr=False)
    timeout: PositiveInt | None = Field(default_factory=_default_timeout)

    @computed_field
    @property
    def max_attempts(self) -> int:
        """Total attempts the session may make."""
        return self.max_retries + 1

    @property
    def backoff(self) -> Backoff:
        """Backoff strategy resolved from retry_delay and decay."""
        return resolve_backoff(self.retry_delay, self.decay)

    def get_delay(self, retry: int) -> float:
        """Get delay in milliseconds before the given 1-indexed retry."""
        return self.backoff.delay(retry)

    def with_overrides(self, **overrides: object) -> RetryPolicy:
        """Return a validated copy with the given fields replaced."""
        if not overrides:
            return self
        return type(self)(**{**dict(self), **overrides})
