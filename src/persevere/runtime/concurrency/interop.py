"""Sync/async interoperability utilities.

Bridges synchronous and asynchronous code:
    - resolve: Await a value if it is awaitable, otherwise return it
    - run_sync: Run async code from sync context

Example:
    >>> # Sync and async callables behave the same once resolved
    >>> value = await resolve(operation())

    >>> # Call async from sync
    >>> result = run_sync(async_function())
"""

from __future__ import annotations

import asyncio
import contextvars
import inspect
import threading
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Coroutine

T = TypeVar("T")


async def resolve(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def run_sync(coro: Coroutine[object, object, T]) -> T:
    """Run async coroutine from synchronous context.

    1. No running loop -> asyncio.run()
    2. Called from within an event loop -> fresh loop in a worker thread

    Example:
        >>> result = run_sync(retry(fetch))
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    # Inside a running loop (Jupyter, nested frameworks): blocking here is
    # the caller's choice, but the coroutine needs a loop of its own
    return _run_in_thread_loop(coro)


def _run_in_thread_loop(coro: Coroutine[object, object, T]) -> T:
    """Run coroutine in a new thread with its own event loop."""
    result: T | None = None
    error: BaseException | None = None
    done = threading.Event()
    ctx = contextvars.copy_context()

    def runner() -> None:
        nonlocal result, error
        try:
            result = ctx.run(asyncio.run, coro)
        except BaseException as e:
            error = e
        finally:
            done.set()

    thread = threading.Thread(target=runner, name="persevere-run-sync", daemon=True)
    thread.start()
    done.wait()

    if error is not None:
        raise error
    return result  # type: ignore[return-value]
