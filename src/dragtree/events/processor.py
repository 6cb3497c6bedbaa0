"""Event processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dragtree.events.types import (
        DragStartEvent,
        DropEvent,
        Event,
        InfoRequestedEvent,
        LayoutEvent,
        NodeToggledEvent,
        ReparentEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "LayoutEvent": "on_layout",
    "NodeToggledEvent": "on_node_toggled",
    "InfoRequestedEvent": "on_info_requested",
    "DragStartEvent": "on_drag_start",
    "DropEvent": "on_drop",
    "ReparentEvent": "on_reparent",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the session is closed. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_layout(self, event: LayoutEvent) -> None: ...
    def on_node_toggled(self, event: NodeToggledEvent) -> None: ...
    def on_info_requested(self, event: InfoRequestedEvent) -> None: ...
    def on_drag_start(self, event: DragStartEvent) -> None: ...
    def on_drop(self, event: DropEvent) -> None: ...
    def on_reparent(self, event: ReparentEvent) -> None: ...
