"""Event types emitted by a tree session."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field

from dragtree.interaction.changes import DropDecision


def _generate_event_id() -> str:
    """Generate a unique event ID."""
    return uuid.uuid4().hex[:16]


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all session events.

    Attributes:
        session_id: Identifier of the session that produced this event.
        event_id: Unique identifier for this event.
        timestamp: Unix timestamp when the event was created.
    """

    session_id: str
    event_id: str = field(default_factory=_generate_event_id)
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class LayoutEvent(BaseEvent):
    """Emitted after every layout pass.

    Attributes:
        reason: What triggered the pass ("initial", "toggle", "rebuild", "revert").
        node_count: Number of visible nodes laid out.
        link_count: Number of visible links.
    """

    reason: str = ""
    node_count: int = 0
    link_count: int = 0


@dataclass(frozen=True)
class NodeToggledEvent(BaseEvent):
    """Emitted when a node is collapsed or expanded.

    Attributes:
        node_id: Stable id of the node.
        node_name: Name of the node.
        collapsed: New state.
    """

    node_id: int = -1
    node_name: str = ""
    collapsed: bool = False


@dataclass(frozen=True)
class InfoRequestedEvent(BaseEvent):
    """Emitted when a single click resolves to a show-info request.

    Attributes:
        node_id: Stable id of the clicked node.
        node_name: Name of the clicked node.
    """

    node_id: int = -1
    node_name: str = ""


@dataclass(frozen=True)
class DragStartEvent(BaseEvent):
    """Emitted when a drag gesture is accepted.

    Attributes:
        node_id: Stable id of the dragged node.
        node_name: Name of the dragged node.
    """

    node_id: int = -1
    node_name: str = ""


@dataclass(frozen=True)
class DropEvent(BaseEvent):
    """Emitted when a drag gesture ends, whatever the decision.

    Attributes:
        node_id: Stable id of the dragged node.
        node_name: Name of the dragged node.
        decision: How the gesture ended.
        target_id: Nearest candidate parent, if any.
        distance: Distance to that candidate.
        travel: Distance moved since the drag started.
    """

    node_id: int = -1
    node_name: str = ""
    decision: DropDecision = DropDecision.REVERT_JITTER
    target_id: int | None = None
    distance: float | None = None
    travel: float = 0.0

    def __post_init__(self) -> None:
        # Coerce string decision values to DropDecision enum
        if isinstance(self.decision, str):
            object.__setattr__(self, "decision", DropDecision(self.decision))


@dataclass(frozen=True)
class ReparentEvent(BaseEvent):
    """Emitted when a node is moved under a new parent.

    Attributes:
        node_id: Stable id of the moved node.
        node_name: Name of the moved node.
        old_parent_id: Previous parent.
        new_parent_id: New parent.
        new_parent_name: Name of the new parent.
        updated_count: Number of nodes whose ancestor path changed.
    """

    node_id: int = -1
    node_name: str = ""
    old_parent_id: int = -1
    new_parent_id: int = -1
    new_parent_name: str = ""
    updated_count: int = 0


Event = (
    LayoutEvent
    | NodeToggledEvent
    | InfoRequestedEvent
    | DragStartEvent
    | DropEvent
    | ReparentEvent
)
