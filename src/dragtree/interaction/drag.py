"""Drag-and-drop reparenting.

One gesture runs in three phases:

    start  snapshot the node's position (the root never moves)
    move   first call detaches the subtree visually; every call echoes
           the new position
    end    find the nearest candidate parent and decide between a
           structural move and a revert

Candidates are the visible nodes that are neither the dragged node nor
inside its subtree, so a drop can never create a cycle. The model still
validates every move and a rejection only reverts the gesture.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dragtree.collapse import CollapseController
from dragtree.config import EngineConfig
from dragtree.exceptions import ReparentError
from dragtree.interaction.changes import ChangeSet, DragEcho, DropDecision, DropOutcome
from dragtree.layout.coordinates import Point
from dragtree.layout.engine import link_id

if TYPE_CHECKING:
    from dragtree.model import HierarchyModel, NodeRef, ReparentResult, TreeNode

logger = logging.getLogger(__name__)


@dataclass
class _DragState:
    node_id: int
    start: Point
    first_move: bool = True
    hidden_node_ids: tuple[int, ...] = ()
    hidden_link_ids: tuple[str, ...] = ()


class DragReparentEngine:
    """Interprets drag gestures as candidate reparenting.

    Args:
        model: The hierarchy to mutate on commit
        config: Supplies dnd_threshold and min_drag_travel
        collapse: Used to expand a collapsed drop target after a commit
    """

    def __init__(
        self,
        model: HierarchyModel,
        config: EngineConfig | None = None,
        collapse: CollapseController | None = None,
    ) -> None:
        self.model = model
        self.config = config or EngineConfig()
        self.collapse = collapse or CollapseController(model)
        self._state: _DragState | None = None
        self.last_result: ReparentResult | None = None

    @property
    def active_node_id(self) -> int | None:
        """Stable id of the node being dragged, if a gesture is in progress."""
        return self._state.node_id if self._state else None

    # -- phases -----------------------------------------------------------------

    def start(self, ref: NodeRef) -> bool:
        """Begin dragging a node. Returns False if it cannot be dragged."""
        node = self.model.node(ref)
        if node.is_root:
            logger.debug("Ignoring drag of root '%s'", node.name)
            return False
        if node.x is None or node.y is None or node not in self.model.visible_nodes():
            logger.debug("Ignoring drag of '%s': it is not laid out and visible", node.name)
            return False
        if self._state is not None:
            logger.warning(
                "Drag of node %d started while node %d is still being dragged",
                node.stable_id,
                self._state.node_id,
            )
            return False

        node.x0, node.y0 = node.x, node.y
        self._state = _DragState(node.stable_id, Point(node.x, node.y))
        return True

    def move(self, ref: NodeRef, dx: float, dy: float) -> DragEcho | None:
        """Apply a screen-space delta to the dragged node.

        Screen x runs along the depth axis, so (dx, dy) is applied as
        y += dx, x += dy. Returns None when no drag of this node is active.
        """
        node = self.model.node(ref)
        state = self._state
        if state is None or state.node_id != node.stable_id:
            return None

        changes = ChangeSet(moved_node_ids=(node.stable_id,))
        if state.first_move:
            state.first_move = False
            state.hidden_node_ids, state.hidden_link_ids = self._detach(node)
            changes = ChangeSet(
                moved_node_ids=(node.stable_id,),
                hidden_node_ids=state.hidden_node_ids,
                hidden_link_ids=state.hidden_link_ids,
            )

        node.x += dy  # type: ignore[operator]
        node.y += dx  # type: ignore[operator]
        return DragEcho(node.stable_id, Point(node.x, node.y), changes)  # type: ignore[arg-type]

    def end(self, ref: NodeRef) -> DropOutcome | None:
        """Finish the gesture: commit a move or revert the visual drag."""
        node = self.model.node(ref)
        state = self._state
        if state is None or state.node_id != node.stable_id:
            return None
        self._state = None

        travel = math.hypot(node.x - state.start.x, node.y - state.start.y)  # type: ignore[operator]
        target, distance = self.nearest_candidate(node)

        if travel <= self.config.min_drag_travel:
            decision = DropDecision.REVERT_JITTER
        elif target is None or distance >= self.config.dnd_threshold:  # type: ignore[operator]
            decision = DropDecision.REVERT_TOO_FAR
        elif target.stable_id == node.parent_id:
            decision = DropDecision.REVERT_SAME_PARENT
        else:
            try:
                result = self.model.reparent(node, target)
            except ReparentError as e:
                logger.warning("Rejected drop of '%s' on '%s': %s", node.name, target.name, e)
                return self._revert(
                    node, state, DropDecision.REVERT_REJECTED, target, distance, travel, str(e)
                )
            self.last_result = result
            self.collapse.expand(target)
            logger.info("Moved '%s' under '%s'", node.name, target.name)
            return DropOutcome(
                node_id=node.stable_id,
                decision=DropDecision.COMMIT,
                target_id=target.stable_id,
                distance=distance,
                travel=travel,
                changes=ChangeSet(moved_node_ids=result.updated_ids, rebuild=True),
            )

        logger.debug("Drag of '%s' reverted (%s, travel %.1f)", node.name, decision.value, travel)
        return self._revert(node, state, decision, target, distance, travel)

    # -- helpers ----------------------------------------------------------------

    def candidates(self, ref: NodeRef) -> list[TreeNode]:
        """Visible, positioned nodes that could become the new parent."""
        node = self.model.node(ref)
        return [
            m
            for m in self.model.visible_nodes()
            if m is not node
            and m.x is not None
            and m.y is not None
            and not self.model.is_descendant(m, node)
        ]

    def nearest_candidate(self, ref: NodeRef) -> tuple[TreeNode | None, float | None]:
        """Closest candidate to the node's current position (first wins ties)."""
        node = self.model.node(ref)
        best: TreeNode | None = None
        best_distance: float | None = None
        for m in self.candidates(node):
            d = math.hypot(node.x - m.x, node.y - m.y)  # type: ignore[operator]
            if best_distance is None or d < best_distance:
                best, best_distance = m, d
        return best, best_distance

    def _detach(self, node: TreeNode) -> tuple[tuple[int, ...], tuple[str, ...]]:
        """Visible descendants plus the links to hide while dragging."""
        hidden = [m for m in self.model.visible_nodes() if self.model.is_descendant(m, node)]
        links = [link_id(node.parent_id, node.stable_id)]  # type: ignore[arg-type]
        links.extend(link_id(m.parent_id, m.stable_id) for m in hidden)  # type: ignore[arg-type]
        return tuple(m.stable_id for m in hidden), tuple(links)

    def _revert(
        self,
        node: TreeNode,
        state: _DragState,
        decision: DropDecision,
        target: TreeNode | None,
        distance: float | None,
        travel: float,
        error: str | None = None,
    ) -> DropOutcome:
        node.x, node.y = state.start.x, state.start.y
        node.x0, node.y0 = node.x, node.y
        return DropOutcome(
            node_id=node.stable_id,
            decision=decision,
            target_id=target.stable_id if target is not None else None,
            distance=distance,
            travel=travel,
            changes=ChangeSet(
                moved_node_ids=(node.stable_id,),
                restored_node_ids=state.hidden_node_ids,
                restored_link_ids=state.hidden_link_ids,
            ),
            error=error,
        )
