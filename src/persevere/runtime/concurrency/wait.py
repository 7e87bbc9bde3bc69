"""Wait primitives for the retry engine.

Provides:
    - delay: Timer wait that a cancellation token can pre-empt
    - first_settled: First-settle race over several awaitables

Example:
    >>> source = CancellationSource()
    >>> source.cancel_after(0.5, "stop")
    >>> await delay(10_000, source.token)  # raises RetryCancelled after 0.5s
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar

from persevere.foundation.errors import RetryCancelled

if TYPE_CHECKING:
    from .cancellation import CancellationToken

T = TypeVar("T")


def _settle(waiter: asyncio.Future[None], exc: BaseException | None = None) -> None:
    if waiter.done():
        return
    if exc is None:
        waiter.set_result(None)
    else:
        waiter.set_exception(exc)


async def delay(duration_ms: float, cancellation_token: CancellationToken | None = None) -> None:
    """Wait ``duration_ms`` milliseconds unless cancelled first.

    Args:
        duration_ms: Wait duration in milliseconds (negative means zero)
        cancellation_token: Optional token that pre-empts the wait

    Raises:
        RetryCancelled: If the token is already cancelled (no timer is
            started) or becomes cancelled before the timer elapses
    """
    if cancellation_token is not None and cancellation_token.is_cancelled:
        raise RetryCancelled(cancellation_token.reason)

    loop = asyncio.get_running_loop()
    waiter: asyncio.Future[None] = loop.create_future()
    timer = loop.call_later(max(duration_ms, 0) / 1000, _settle, waiter)
    unsubscribe = None
    if cancellation_token is not None:
        unsubscribe = cancellation_token.on_cancel(lambda reason: _settle(waiter, RetryCancelled(reason)))
    try:
        await waiter
    finally:
        timer.cancel()
        if unsubscribe is not None:
            unsubscribe()


async def first_settled(*aws: Awaitable[T]) -> asyncio.Task[T]:
    """Wait until one of several awaitables settles and return its task.

    The winner is the first task to finish, in completion order, whether it
    returned, raised, or was cancelled. Losing tasks are left untouched so the
    caller decides whether to cancel or abandon them. If the waiting task is
    cancelled, every task is cancelled before CancelledError propagates.

    Raises:
        ValueError: If no awaitables provided
    """
    if not aws:
        raise ValueError("first_settled() requires at least one awaitable")

    loop = asyncio.get_running_loop()
    tasks = [asyncio.ensure_future(a) for a in aws]
    winner: asyncio.Future[asyncio.Task[T]] = loop.create_future()

    def on_done(task: asyncio.Task[T]) -> None:
        if not winner.done():
            winner.set_result(task)

    for task in tasks:
        task.add_done_callback(on_done)

    try:
        return await winner
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise
    finally:
        for task in tasks:
            task.remove_done_callback(on_done)
