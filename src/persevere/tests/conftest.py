"""Shared fixtures: virtual-clock event loop and clean settings."""

from __future__ import annotations

import asyncio
import os
import selectors
from collections.abc import Iterator

import pytest

from persevere.foundation.config import clear_settings_cache


class _Clock:
    __slots__ = ("now",)

    def __init__(self) -> None:
        self.now = 0.0


class _VirtualSelector(selectors.DefaultSelector):
    """Selector that never blocks; advances the clock by the requested timeout."""

    def __init__(self, clock: _Clock) -> None:
        super().__init__()
        self._clock = clock

    def select(self, timeout: float | None = None) -> list[tuple[selectors.SelectorKey, int]]:
        events = super().select(0)
        if events or timeout == 0:
            return events
        if timeout is None:
            raise RuntimeError("virtual clock deadlock: nothing scheduled and nothing ready")
        self._clock.now += timeout
        return events


class VirtualClockLoop(asyncio.SelectorEventLoop):
    """Event loop where timers fire instantly in wall time.

    ``time()`` only moves when the loop would otherwise sleep, so timer
    ordering and elapsed durations are exact and tests never wait.
    """

    def __init__(self) -> None:
        self._clock = _Clock()
        super().__init__(selector=_VirtualSelector(self._clock))

    def time(self) -> float:
        return self._clock.now


@pytest.fixture
def virtual_loop() -> Iterator[VirtualClockLoop]:
    """Fresh virtual-clock loop; leftover tasks are cancelled on teardown."""
    loop = VirtualClockLoop()
    try:
        yield loop
    finally:
        pending = asyncio.all_tasks(loop)
        for task in pending:
            task.cancel()
        if pending:
            loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop PERSEVERE_* environment and the settings cache around each test."""
    for key in list(os.environ):
        if key.startswith("PERSEVERE_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


class Recorder:
    """Callable operation scripted with outcomes; records call times and args."""

    def __init__(self, *outcomes: object) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[float] = []
        self.tokens: list[object] = []

    def _next(self, token: object) -> object:
        self.calls.append(asyncio.get_running_loop().time())
        self.tokens.append(token)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def count(self) -> int:
        return len(self.calls)

    def gaps(self) -> list[float]:
        """Milliseconds between consecutive calls."""
        return [round((b - a) * 1000, 6) for a, b in zip(self.calls, self.calls[1:])]


class AsyncRecorder(Recorder):
    async def __call__(self, token: object) -> object:
        return self._next(token)


class SyncRecorder(Recorder):
    def __call__(self, token: object) -> object:
        return self._next(token)


@pytest.fixture
def async_op() -> type[AsyncRecorder]:
    return AsyncRecorder


@pytest.fixture
def sync_op() -> type[SyncRecorder]:
    return SyncRecorder
