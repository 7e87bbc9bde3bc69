"""Retry engine: attempt loop, delay, cancellation and timeout composition.

One session walks the states

    Attempting(n) -> Succeeded | Cancelled | Failed | Waiting(n + 1)
    Waiting(n + 1) -> Cancelled | Attempting(n + 1)

where ``n`` counts completed attempts. With a timeout configured the whole
loop races a watchdog delay; whichever settles first decides the outcome.

Example:
    >>> from persevere import retry, CancellationSource
    >>> source = CancellationSource()
    >>> body = await retry(
    ...     lambda token: fetch(url, cancellation_token=token),
    ...     max_retries=5, retry_delay=200, decay=2, timeout=10_000,
    ...     cancellation_token=source.token,
    ... )
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Awaitable, Mapping
from typing import Callable, ParamSpec, TypeVar

from persevere.foundation.errors import RetryCancelled, RetryTimeout
from persevere.runtime.concurrency import (
    CancellationToken,
    delay,
    detach,
    discard,
    first_settled,
    resolve,
    run_sync,
    spawn,
)

from .policy import RetryPolicy

logger = logging.getLogger("persevere.retry")

T = TypeVar("T")
P = ParamSpec("P")

Operation = Callable[..., T | Awaitable[T]]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _bind_token(operation: Operation[T], token: CancellationToken | None) -> Callable[[], T | Awaitable[T]]:
    """Zero-argument call of ``operation`` carrying the session's token.

    A ``cancellation_token`` parameter gets the token by keyword. Otherwise
    a required first positional parameter gets it positionally. Operations
    with neither are called bare, so their defaults stay untouched.
    """
    try:
        params = list(inspect.signature(operation).parameters.values())
    except (TypeError, ValueError):
        return operation  # Builtins without introspectable signatures

    named = next((p for p in params if p.name == "cancellation_token"), None)
    if named is not None and named.kind is not inspect.Parameter.POSITIONAL_ONLY:
        return functools.partial(operation, cancellation_token=token)
    if params and params[0].kind in _POSITIONAL and params[0].default is inspect.Parameter.empty:
        return functools.partial(operation, token)
    return operation


def _coerce_policy(policy: RetryPolicy | Mapping[str, object] | None, overrides: Mapping[str, object]) -> RetryPolicy:
    if policy is None:
        return RetryPolicy(**overrides)
    if isinstance(policy, Mapping):
        return RetryPolicy(**{**policy, **overrides})
    return policy.with_overrides(**overrides)


async def _attempt_loop(operation: Operation[T], policy: RetryPolicy) -> T:
    """Run attempts until success, cancellation or an exhausted budget."""
    token = policy.cancellation_token
    call = _bind_token(operation, token)
    attempts = 0

    while True:
        try:
            return await resolve(call())
        except Exception as exc:
            attempts += 1
            # Cancellation outranks an exhausted budget
            if token is not None and token.is_cancelled:
                logger.debug(f"Attempt {attempts} failed after cancellation: {token.reason!r}")
                raise RetryCancelled(token.reason)
            if attempts > policy.max_retries:
                logger.debug(f"Giving up after {attempts} attempt(s): {exc!r}")
                raise
            rejection = exc
            wait = policy.get_delay(attempts)

        logger.debug(
            f"Retry {attempts}/{policy.max_retries} after {wait:.0f}ms "
            f"(attempt {attempts} failed: {rejection!r})"
        )
        await delay(wait, token)
        if policy.on_before_retry is not None:
            await resolve(policy.on_before_retry(attempts, rejection))


async def _watchdog(timeout: int, remaining: float, token: CancellationToken | None) -> None:
    await delay(remaining, token)
    raise RetryTimeout(timeout)


async def retry(
    operation: Operation[T],
    policy: RetryPolicy | Mapping[str, object] | None = None,
    **overrides: object,
) -> T:
    """Call ``operation`` until it succeeds or the policy gives up.

    The operation may be sync or async. It receives the session's
    cancellation token (or None) on every attempt through a
    ``cancellation_token`` parameter, or else through a required first
    positional parameter. Operations declaring neither are called bare.

    With a timeout, the first attempt gets one scheduling step before the
    watchdog is armed. An attempt settling within that step never allocates
    a watchdog; otherwise the watchdog waits for the rest of the timeout.

    Args:
        operation: Fallible callable to retry
        policy: RetryPolicy (or mapping of its fields); defaults from settings
        **overrides: RetryPolicy fields replacing those of ``policy``

    Returns:
        The first successful result

    Raises:
        Exception: The operation's last exception, unchanged, once retries run out
        RetryCancelled: The cancellation token fired before the session settled
        RetryTimeout: The timeout elapsed before the session settled
        pydantic.ValidationError: Invalid policy fields
    """
    session = _coerce_policy(policy, overrides)
    if session.timeout is None:
        return await _attempt_loop(operation, session)

    loop = asyncio.get_running_loop()
    started = loop.time()
    attempts = spawn(_attempt_loop(operation, session), name="persevere-attempts")
    try:
        await asyncio.sleep(0)
    except asyncio.CancelledError:
        discard(attempts)
        raise
    if attempts.done():
        return attempts.result()

    remaining = session.timeout - (loop.time() - started) * 1000
    watchdog = spawn(
        _watchdog(session.timeout, remaining, session.cancellation_token),
        name="persevere-watchdog",
    )
    winner = await first_settled(attempts, watchdog)

    if winner is attempts:
        discard(watchdog)
    else:
        # The in-flight attempt keeps running unless it honours the token
        detach(attempts)
        logger.debug(f"Watchdog settled first after {session.timeout}ms")
    return winner.result()


def retry_sync(
    operation: Operation[T],
    policy: RetryPolicy | Mapping[str, object] | None = None,
    **overrides: object,
) -> T:
    """Blocking variant of retry() for synchronous callers.

    Example:
        >>> config = retry_sync(load_remote_config, max_retries=2, retry_delay=500)
    """
    return run_sync(retry(operation, policy, **overrides))


def retrying(
    policy: RetryPolicy | Mapping[str, object] | None = None,
    **overrides: object,
) -> Callable[[Callable[P, T | Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator retrying every call of a sync or async function.

    The decorated function is always a coroutine function. A
    ``cancellation_token`` keyword given at call time replaces the policy's
    token for that call; it is forwarded to the function only if the
    function declares a ``cancellation_token`` parameter.

    Example:
        >>> @retrying(max_retries=3, decay=2)
        ... async def fetch_profile(user_id: int) -> dict:
        ...     return await client.get(f"/users/{user_id}")
        >>>
        >>> profile = await fetch_profile(42, cancellation_token=source.token)
    """
    base = _coerce_policy(policy, overrides)

    def decorator(func: Callable[P, T | Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        forwards_token = "cancellation_token" in inspect.signature(func).parameters

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            token = kwargs.pop("cancellation_token", None)
            session = base if token is None else base.with_overrides(cancellation_token=token)
            if forwards_token:
                kwargs["cancellation_token"] = session.cancellation_token

            def attempt() -> T | Awaitable[T]:
                return func(*args, **kwargs)

            return await retry(attempt, session)

        return wrapper

    return decorator
