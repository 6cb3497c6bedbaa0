"""Event system for observing a tree session."""

from dragtree.events.dispatcher import EventDispatcher
from dragtree.events.processor import EventProcessor, TypedEventProcessor
from dragtree.events.types import (
    BaseEvent,
    DragStartEvent,
    DropEvent,
    Event,
    InfoRequestedEvent,
    LayoutEvent,
    NodeToggledEvent,
    ReparentEvent,
)

__all__ = [
    # Event types
    "BaseEvent",
    "DragStartEvent",
    "DropEvent",
    "Event",
    "InfoRequestedEvent",
    "LayoutEvent",
    "NodeToggledEvent",
    "ReparentEvent",
    # Processor interfaces
    "EventProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
