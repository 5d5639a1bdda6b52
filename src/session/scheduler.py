"""
Deferred-callback schedulers for the game session.

The session never touches a real clock. It asks a Scheduler to run a
callback after a delay and keeps the returned handle so it can cancel it.
ManualScheduler drives time by hand (tests, the terminal CLI);
AsyncioScheduler hands callbacks to a running event loop.
"""

import asyncio
import heapq
import itertools
from typing import Any, Callable, List, Optional, Protocol, Tuple


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can invoke a callback after `delay` time units."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> Cancellable: ...


class TimerHandle:
    """Handle for a callback queued on a ManualScheduler."""

    def __init__(self, when: float, callback: Callable[[], Any]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        """Cancel the callback. Safe to call more than once."""
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"TimerHandle(when={self.when}, {state})"


class ManualScheduler:
    """
    Scheduler with a virtual clock that only moves when advance() is called.

    Attributes:
        now: Current virtual time
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        """Queue a callback to run `delay` units from now."""
        if delay < 0:
            raise ValueError(f"Delay must be >= 0, got {delay}")
        handle = TimerHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of queued callbacks that have not been cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def next_due(self) -> Optional[float]:
        """Time of the earliest live callback, or None if nothing is queued."""
        self._drop_cancelled()
        return self._queue[0][0] if self._queue else None

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due.

        Callbacks scheduled while advancing also run if they fall inside
        the window. Ties run in the order they were scheduled.

        Returns:
            Number of callbacks run
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative amount ({seconds})")

        deadline = self.now + seconds
        ran = 0

        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0][0] > deadline:
                break
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            handle.callback()
            ran += 1

        self.now = deadline
        return ran

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)
