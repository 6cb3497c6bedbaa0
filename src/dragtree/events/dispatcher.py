"""Fan-out of session events to processors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from dragtree.events.processor import EventProcessor

if TYPE_CHECKING:
    from dragtree.events.types import Event

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="Event")


class EventDispatcher:
    """Delivers a session's events to its processors.

    Delivery is best-effort: a failing processor is logged and the session
    carries on. With ``strict=True`` the failure propagates to the caller
    of the gesture that emitted the event.

    Args:
        processors: Initial processors, notified in order
        strict: Re-raise processor failures
        session_id: Stamped onto events built with ``notify``
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
        session_id: str = "",
    ) -> None:
        self._processors: list[EventProcessor] = list(processors) if processors else []
        self._strict = strict
        self.session_id = session_id

    @property
    def active(self) -> bool:
        """True if there is at least one registered processor."""
        return bool(self._processors)

    def add(self, processor: EventProcessor) -> None:
        self._processors.append(processor)

    def notify(self, event_type: type[E], **fields: Any) -> E | None:
        """Build an event for this session and emit it.

        Nothing is built when no processor is listening.
        """
        if not self._processors:
            return None
        event = event_type(session_id=self.session_id, **fields)
        self.emit(event)
        return event

    def emit(self, event: Event) -> None:
        for processor in self._processors:
            try:
                processor.on_event(event)
            except Exception:
                if self._strict:
                    raise
                logger.warning(
                    "EventProcessor %s failed on %s", processor, type(event).__name__, exc_info=True
                )

    def shutdown(self) -> None:
        """Shut every processor down, then detach them.

        All processors get their shutdown call. In strict mode the first
        failure is re-raised afterwards.
        """
        processors, self._processors = self._processors, []
        errors: list[Exception] = []
        for processor in processors:
            try:
                processor.shutdown()
            except Exception as e:
                if self._strict:
                    errors.append(e)
                else:
                    logger.warning("EventProcessor %s failed during shutdown", processor, exc_info=True)
        if errors:
            raise errors[0]
