"""Cooperative cancellation tokens.

A token is a one-shot, non-resettable signal. Consumers either check
``is_cancelled`` or subscribe with ``on_cancel`` and receive an unsubscribe
callable back. ``CancellationSource`` is the producer side.

Example:
    >>> source = CancellationSource()
    >>> unsubscribe = source.token.on_cancel(lambda reason: print("stop:", reason))
    >>> source.cancel("shutting down")
    stop: shutting down
    >>> source.cancel("again")  # no effect
    >>> source.token.reason
    'shutting down'
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol, runtime_checkable

from persevere.foundation.errors import DEFAULT_CANCEL_REASON

CancelCallback = Callable[[object], object]
Unsubscribe = Callable[[], None]


@runtime_checkable
class CancellationToken(Protocol):
    """Protocol for cancellation signals.

    Implementations must invoke each subscribed callback at most once, with
    the cancellation reason, and ignore any cancellation after the first.
    """

    @property
    def is_cancelled(self) -> bool: ...

    @property
    def reason(self) -> object: ...

    def on_cancel(self, callback: CancelCallback) -> Unsubscribe: ...


def _noop() -> None:
    pass


class _SourceToken:
    """Read-only view handed to consumers of a CancellationSource."""

    __slots__ = ("_source",)

    def __init__(self, source: CancellationSource) -> None:
        self._source = source

    @property
    def is_cancelled(self) -> bool:
        return self._source._cancelled

    @property
    def reason(self) -> object:
        return self._source._reason

    def on_cancel(self, callback: CancelCallback) -> Unsubscribe:
        """Subscribe to cancellation. Already-cancelled tokens never call back."""
        if self._source._cancelled:
            return _noop
        listeners = self._source._listeners
        key = object()
        listeners[key] = callback

        def unsubscribe() -> None:
            listeners.pop(key, None)

        return unsubscribe

    def __repr__(self) -> str:
        state = f"cancelled, reason={self.reason!r}" if self.is_cancelled else "active"
        return f"CancellationToken({state})"


class CancellationSource:
    """Producer of a one-shot cancellation signal.

    Example:
        >>> source = CancellationSource()
        >>> await retry(fetch, cancellation_token=source.token)
        >>> # elsewhere:
        >>> source.cancel("user navigated away")
    """

    __slots__ = ("_cancelled", "_reason", "_listeners", "_token", "_timer")

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: object = None
        self._listeners: dict[object, CancelCallback] = {}
        self._token = _SourceToken(self)
        self._timer: asyncio.TimerHandle | None = None

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: object = None) -> None:
        """Fire the signal. Later calls are ignored.

        The token reads as cancelled before any listener runs; listeners are
        invoked once each, in subscription order, then dropped.
        """
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = DEFAULT_CANCEL_REASON if reason is None else reason
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        listeners = list(self._listeners.values())
        self._listeners.clear()
        for callback in listeners:
            callback(self._reason)

    def cancel_after(self, seconds: float, reason: object = None) -> None:
        """Schedule cancellation on the running event loop."""
        if self._cancelled:
            return
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(max(seconds, 0.0), self.cancel, reason)

    def __repr__(self) -> str:
        return f"CancellationSource(cancelled={self._cancelled})"
