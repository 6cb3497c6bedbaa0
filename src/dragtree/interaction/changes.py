"""Descriptions of what a gesture changed.

The engine never touches the presentation layer; it returns one of these
and the rendering collaborator applies it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dragtree.layout.coordinates import Point


@dataclass(frozen=True)
class ChangeSet:
    """Node and link ids affected by a gesture step.

    Attributes:
        moved_node_ids: Nodes whose position changed outside a layout pass
        hidden_node_ids: Nodes to hide (the dragged subtree)
        hidden_link_ids: Links to hide (to the old parent and inside the subtree)
        restored_node_ids: Previously hidden nodes to show again
        restored_link_ids: Previously hidden links to show again
        rebuild: Discard everything rendered and redraw from a fresh layout
    """

    moved_node_ids: tuple[int, ...] = ()
    hidden_node_ids: tuple[int, ...] = ()
    hidden_link_ids: tuple[str, ...] = ()
    restored_node_ids: tuple[int, ...] = ()
    restored_link_ids: tuple[str, ...] = ()
    rebuild: bool = False


@dataclass(frozen=True)
class DragEcho:
    """Immediate position update for the node being dragged.

    Attributes:
        node_id: The dragged node
        position: New layout-space position (x breadth, y depth)
        changes: Visibility cut on the first move, position-only afterwards
    """

    node_id: int
    position: Point
    changes: ChangeSet


class DropDecision(Enum):
    """How a drag gesture ended.

    Values:
        COMMIT: The node was moved under a new parent
        REVERT_JITTER: Travel too small to be a drag
        REVERT_TOO_FAR: No candidate parent within the drop threshold
        REVERT_SAME_PARENT: Dropped back onto the current parent
        REVERT_REJECTED: The move was structurally invalid
    """

    COMMIT = "commit"
    REVERT_JITTER = "revert_jitter"
    REVERT_TOO_FAR = "revert_too_far"
    REVERT_SAME_PARENT = "revert_same_parent"
    REVERT_REJECTED = "revert_rejected"

    @property
    def committed(self) -> bool:
        return self is DropDecision.COMMIT


@dataclass(frozen=True)
class DropOutcome:
    """Result of ending a drag.

    Attributes:
        node_id: The dragged node
        decision: What happened
        target_id: Nearest candidate parent, if any
        distance: Distance from the drop point to the nearest candidate
        travel: Distance moved since the drag started
        changes: Restoration on revert, full rebuild on commit
        error: Reason the move was rejected, for REVERT_REJECTED
    """

    node_id: int
    decision: DropDecision
    target_id: int | None
    distance: float | None
    travel: float
    changes: ChangeSet
    error: str | None = None
