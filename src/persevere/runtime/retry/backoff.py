"""Backoff strategies for retry policies.

Computes the wait before each retry from the policy's base delay and decay:
- ConstantBackoff: Fixed delay (decay unset or <= 1)
- ExponentialBackoff: delay * decay ^ (retry - 1) (decay > 1)
- DecayBackoff: Caller-supplied decay function

Durations are milliseconds. Retry ordinals are 1-indexed (first retry = 1).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

DecayFunction = Callable[[int, int], float]


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation."""

    def delay(self, retry: int) -> float:
        """Calculate delay in milliseconds before the given retry.

        Args:
            retry: 1-indexed retry ordinal

        Returns:
            Delay in milliseconds
        """
        ...


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Same delay before every retry.

    Attributes:
        delay_ms: Fixed delay in milliseconds (default: 1000)
    """

    delay_ms: int = 1000

    def delay(self, retry: int) -> float:
        return self.delay_ms


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential growth without jitter or cap.

    Delay = base * (multiplier ^ (retry - 1)), so the first retry waits
    ``base``. With base=1000, multiplier=2: 1000, 2000, 4000, ...
    Delays past the float range saturate at ``math.inf``.

    Attributes:
        base: Initial delay in milliseconds (default: 1000)
        multiplier: Growth factor, must be > 1 (default: 2.0)
    """

    base: int = 1000
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.multiplier <= 1:
            raise ValueError(f"multiplier must be > 1, got {self.multiplier}")

    def delay(self, retry: int) -> float:
        try:
            return float(self.base * (self.multiplier ** (retry - 1)))
        except OverflowError:
            return math.inf


@dataclass(frozen=True, slots=True)
class DecayBackoff:
    """Delegates to a decay function called as ``decay(retry, base)``.

    Exceptions raised by the function propagate to the caller.
    """

    decay: DecayFunction
    base: int = 1000

    def delay(self, retry: int) -> float:
        return self.decay(retry, self.base)


def resolve_backoff(retry_delay: int, decay: float | DecayFunction | None = None) -> Backoff:
    """Build the backoff strategy for a base delay and decay setting."""
    if decay is None:
        return ConstantBackoff(retry_delay)
    if callable(decay):
        return DecayBackoff(decay, retry_delay)
    if decay <= 1:
        return ConstantBackoff(retry_delay)
    return ExponentialBackoff(retry_delay, decay)
