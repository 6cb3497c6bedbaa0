"""Timer capability for the click disambiguator.

Anything with ``call_later(delay_seconds, callback)`` returning a handle
with ``cancel()`` works, which includes an asyncio event loop. The
manual scheduler below is driven explicitly by the host (or a test).
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class Scheduler(Protocol):
    """Schedules a callback to run once after a delay, on the caller's loop."""

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle: ...


class ManualTimer:
    """Handle returned by ManualScheduler."""

    __slots__ = ("when", "callback", "cancelled")

    def __init__(self, when: float, callback: Callable[[], object]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic single-threaded scheduler with an explicit clock.

    Example:
        >>> scheduler = ManualScheduler()
        >>> fired = []
        >>> _ = scheduler.call_later(0.3, lambda: fired.append("x"))
        >>> scheduler.advance(0.2)
        0
        >>> fired
        []
        >>> scheduler.advance(0.1)
        1
        >>> fired
        ['x']
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], object]) -> ManualTimer:
        timer = ManualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.when, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running due callbacks in order.

        Returns the number of callbacks that ran.
        """
        deadline = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            when, _, timer = heapq.heappop(self._queue)
            self._now = when
            if timer.cancelled:
                continue
            timer.callback()
            ran += 1
        self._now = deadline
        return ran
