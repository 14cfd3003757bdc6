"""Trailing-edge debouncing on the asyncio event loop."""

import asyncio
from typing import Callable


class Debouncer:
    """
    Coalesce bursts of calls per key into the last one.

    Each ``schedule`` cancels the pending timer for its key and starts a new
    one; the callback runs once the key has been quiet for ``delay_ms``.
    Without a running loop there is nothing to wait on, so the callback runs
    immediately.
    """

    def __init__(self, delay_ms: int = 120):
        self.delay_ms = delay_ms
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._callbacks: dict[str, Callable[[], None]] = {}

    def schedule(self, key: str, callback: Callable[[], None]) -> None:
        self.cancel(key)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback()
            return
        self._callbacks[key] = callback
        self._timers[key] = loop.call_later(self.delay_ms / 1000, self._fire, key)

    def _fire(self, key: str) -> None:
        self._timers.pop(key, None)
        callback = self._callbacks.pop(key, None)
        if callback is not None:
            callback()

    def pending(self, key: str) -> bool:
        return key in self._timers

    def flush(self, key: str) -> None:
        """Run the pending callback for ``key`` now."""
        timer = self._timers.get(key)
        if timer is None:
            return
        timer.cancel()
        self._fire(key)

    def cancel(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        self._callbacks.pop(key, None)

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)
