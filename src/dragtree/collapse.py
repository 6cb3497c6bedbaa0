"""Per-node expand/collapse state machine.

Collapsing changes visibility only: the subtree stays in the model, the
structure and every ancestor path are untouched. Callers re-run the
layout after a toggle.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dragtree.model import HierarchyModel, NodeRef, TreeNode

logger = logging.getLogger(__name__)


class CollapseState(Enum):
    """Visibility state of a node's children.

    A true leaf is reported as EXPANDED; toggling it does nothing.
    """

    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


class CollapseController:
    """Toggles which subtrees are visible.

    Example:
        >>> controller = CollapseController(model)
        >>> controller.toggle(model.find("Root/A"))
        True
        >>> controller.state(model.find("Root/A"))
        <CollapseState.COLLAPSED: 'collapsed'>
    """

    def __init__(self, model: HierarchyModel) -> None:
        self.model = model

    def state(self, ref: NodeRef) -> CollapseState:
        node = self.model.node(ref)
        return CollapseState.COLLAPSED if node.collapsed else CollapseState.EXPANDED

    def toggle(self, ref: NodeRef) -> bool:
        """Flip a node between expanded and collapsed.

        Returns:
            False for a true leaf (no-op), True otherwise
        """
        node = self.model.node(ref)
        if node.is_leaf:
            return False
        self._set(node, not node.collapsed)
        return True

    def expand(self, ref: NodeRef) -> bool:
        """Show a node's children. Returns True if the state changed."""
        node = self.model.node(ref)
        if node.is_leaf or not node.collapsed:
            return False
        self._set(node, False)
        return True

    def collapse(self, ref: NodeRef) -> bool:
        """Hide a node's children. Returns True if the state changed."""
        node = self.model.node(ref)
        if node.is_leaf or node.collapsed:
            return False
        self._set(node, True)
        return True

    def collapse_to_depth(self, depth: int) -> list[int]:
        """Collapse every non-leaf at the given depth, expanding those above.

        Gives an initial overview of a large hierarchy, with the root at
        depth 0. Returns the stable ids whose state changed.
        """
        changed: list[int] = []
        for node in self.model:
            if node.is_leaf or node.depth > depth:
                continue
            want_collapsed = node.depth == depth
            if node.collapsed != want_collapsed:
                self._set(node, want_collapsed)
                changed.append(node.stable_id)
        return changed

    def expand_all(self) -> list[int]:
        """Expand every collapsed node. Returns the stable ids that changed."""
        changed = [node.stable_id for node in self.model if node.collapsed]
        for stable_id in changed:
            self._set(self.model.node(stable_id), False)
        return changed

    def _set(self, node: TreeNode, collapsed: bool) -> None:
        node.collapsed = collapsed
        logger.debug("%s '%s'", "Collapsed" if collapsed else "Expanded", node.name)
