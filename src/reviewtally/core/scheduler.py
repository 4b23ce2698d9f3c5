"""Debounced refresh scheduling with an injectable timer backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

__all__ = [
    "DEFAULT_DEBOUNCE_MS",
    "TimerHandle",
    "TimerBackend",
    "AsyncioTimerBackend",
    "RefreshScheduler",
]

LOGGER = logging.getLogger(__name__)
DEFAULT_DEBOUNCE_MS = 200


class TimerHandle(Protocol):
    def cancel(self) -> None:  # pragma: no cover - protocol stub
        ...


class TimerBackend(Protocol):
    """Defers a callback; the returned handle can cancel it before it fires."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:  # pragma: no cover - protocol stub
        ...


class AsyncioTimerBackend:
    """Timer backend that schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)


class _ArmingHandle:
    """Stands in for the real handle while ``call_later`` is still running."""

    def cancel(self) -> None:
        return None


_ARMING = _ArmingHandle()


class RefreshScheduler:
    """Coalesces bursts of refresh requests into one deferred callback.

    Every :meth:`schedule` call cancels the pending timer (if any) and arms a
    new one after ``interval_ms``. At most one refresh is pending at a time, and
    a refresh that has started firing always runs to completion.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        interval_ms: int = DEFAULT_DEBOUNCE_MS,
        timer: TimerBackend | None = None,
    ) -> None:
        if callback is None:
            raise ValueError("callback is required")
        self._callback = callback
        self._interval_ms = max(0, int(interval_ms))
        self._timer: TimerBackend = timer or AsyncioTimerBackend()
        self._handle: TimerHandle | None = None
        self._generation = 0
        self._fire_count = 0

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        self._interval_ms = max(0, int(value))

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def fire_count(self) -> int:
        return self._fire_count

    def schedule(self) -> None:
        """(Re)arm the debounce timer."""

        self.cancel_pending()
        self._generation += 1
        generation = self._generation
        delay = self._interval_ms / 1000.0
        # Some backends fire synchronously inside call_later.
        self._handle = _ARMING
        try:
            handle = self._timer.call_later(delay, lambda: self._fire(generation))
        except Exception:
            self._handle = None
            raise
        if self._handle is _ARMING and generation == self._generation:
            self._handle = handle
        LOGGER.debug("Refresh scheduled in %sms (generation=%s)", self._interval_ms, generation)

    def cancel_pending(self) -> bool:
        """Cancel the pending refresh; returns ``True`` when one was pending."""

        handle = self._handle
        if handle is None:
            return False
        self._handle = None
        handle.cancel()
        return True

    def flush(self) -> bool:
        """Run a pending refresh immediately instead of waiting for the timer."""

        if not self.cancel_pending():
            return False
        self._run()
        return True

    def _fire(self, generation: int) -> None:
        # Stale timers from backends that cannot cancel reliably are ignored.
        if generation != self._generation or self._handle is None:
            return
        self._handle = None
        self._run()

    def _run(self) -> None:
        self._fire_count += 1
        try:
            self._callback()
        except Exception:
            LOGGER.exception("Scheduled refresh failed")
