"""Task helpers for unstructured work that may outlive its caller.

The timeout race abandons the losing retry loop rather than killing it.
An abandoned task must stay referenced until it finishes (the event loop
only keeps weak references) and its outcome must be retrieved so it never
surfaces as "exception was never retrieved".
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

T = TypeVar("T")

# Strong references to detached tasks until they complete
_detached: set[asyncio.Task[object]] = set()


def spawn(coro: Coroutine[object, object, T], *, name: str | None = None) -> asyncio.Task[T]:
    """Start a task on the running loop."""
    return asyncio.create_task(coro, name=name)


def _consume(task: asyncio.Task[object]) -> None:
    """Retrieve and drop a finished task's outcome."""
    _detached.discard(task)
    if not task.cancelled():
        task.exception()


def detach(task: asyncio.Task[T]) -> None:
    """Let a task keep running with its outcome discarded.

    The task is not cancelled. Whatever it eventually returns or raises is
    dropped silently.
    """
    if task.done():
        _consume(task)  # type: ignore[arg-type]
        return
    _detached.add(task)  # type: ignore[arg-type]
    task.add_done_callback(_consume)  # type: ignore[arg-type]


def discard(task: asyncio.Task[T]) -> None:
    """Cancel a task and drop its outcome without awaiting it."""
    task.cancel()
    detach(task)


def detached_count() -> int:
    """Number of detached tasks still running."""
    return len(_detached)
