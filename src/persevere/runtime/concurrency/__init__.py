"""Concurrency primitives for the retry engine.

Key Components:
    - CancellationToken/CancellationSource: One-shot cooperative cancellation
    - delay: Timer wait pre-emptible by a token
    - first_settled: First-settle race, losers left to the caller
    - detach/discard: Abandon or cancel a losing task without leaking it
    - resolve/run_sync: Sync/async interop

Pure asyncio, no threads except for run_sync inside a running loop.
"""

from __future__ import annotations

from .cancellation import CancelCallback, CancellationSource, CancellationToken, Unsubscribe
from .interop import resolve, run_sync
from .task import detach, detached_count, discard, spawn
from .wait import delay, first_settled

__all__ = [
    # Cancellation
    "CancellationToken", "CancellationSource", "CancelCallback", "Unsubscribe",
    # Waiting
    "delay", "first_settled",
    # Tasks
    "spawn", "detach", "discard", "detached_count",
    # Interop
    "resolve", "run_sync",
]
