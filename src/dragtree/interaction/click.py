"""Single-click vs double-click vs drag disambiguation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

from dragtree.interaction.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClickState(Enum):
    IDLE = "idle"
    ARMED_SINGLE_CLICK = "armed_single_click"
    DRAGGING = "dragging"


class ClickDisambiguator(Generic[T]):
    """Turns presses into single clicks, double clicks or nothing (drags).

    The first press arms a timer. A second press on the same target before
    it expires is a double click: the timer is cancelled and
    ``on_double_click`` runs. If the timer expires, ``on_single_click``
    runs. A drag starting while armed cancels the pending single click.

    Args:
        scheduler: Timer capability (an asyncio loop or ManualScheduler)
        on_single_click: Called with the target after the delay expires
        on_double_click: Called with the target on the second press
        delay_ms: Double-click window in milliseconds
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_single_click: Callable[[T], object],
        on_double_click: Callable[[T], object],
        delay_ms: float = 300.0,
    ) -> None:
        self._scheduler = scheduler
        self._on_single = on_single_click
        self._on_double = on_double_click
        self.delay_ms = delay_ms
        self._state = ClickState.IDLE
        self._target: T | None = None
        self._timer: TimerHandle | None = None

    @property
    def state(self) -> ClickState:
        return self._state

    @property
    def pending_target(self) -> T | None:
        """Target of the armed single click, if any."""
        return self._target if self._state is ClickState.ARMED_SINGLE_CLICK else None

    def pointer_down(self, target: T) -> None:
        """Register a press on target."""
        if self._state is ClickState.ARMED_SINGLE_CLICK:
            if self._target == target:
                self._cancel_timer()
                self._state = ClickState.IDLE
                self._target = None
                logger.debug("Double click on %r", target)
                self._on_double(target)
                return
            # A press elsewhere settles the earlier click right away
            previous = self._target
            self._cancel_timer()
            self._state = ClickState.IDLE
            self._target = None
            self._on_single(previous)  # type: ignore[arg-type]
        elif self._state is ClickState.DRAGGING:
            return

        self._state = ClickState.ARMED_SINGLE_CLICK
        self._target = target
        self._timer = self._scheduler.call_later(self.delay_ms / 1000.0, self._expire)

    def drag_started(self, target: T) -> None:
        """A press turned into a drag: drop any pending single click."""
        if self._state is ClickState.ARMED_SINGLE_CLICK:
            logger.debug("Drag on %r suppressed pending click on %r", target, self._target)
            self._cancel_timer()
        self._state = ClickState.DRAGGING
        self._target = target

    def drag_ended(self) -> None:
        if self._state is ClickState.DRAGGING:
            self._state = ClickState.IDLE
            self._target = None

    def _expire(self) -> None:
        if self._state is not ClickState.ARMED_SINGLE_CLICK:
            return
        target = self._target
        self._timer = None
        self._state = ClickState.IDLE
        self._target = None
        logger.debug("Single click on %r", target)
        self._on_single(target)  # type: ignore[arg-type]

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
