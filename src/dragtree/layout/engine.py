"""LayoutEngine: positions for the visible tree.

The engine is the only place layout coordinates change (apart from the
drag echo). Each pass copies the previous ``x, y`` of every visited node
into ``x0, y0`` and writes fresh values; nothing else is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from dragtree.config import EngineConfig
from dragtree.layout.algorithms import LayoutItem, cluster, tidy_tree
from dragtree.layout.coordinates import ExtentBox, Point
from dragtree.layout.traversal import iter_visible

if TYPE_CHECKING:
    from dragtree.model import HierarchyModel, TreeNode

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Rendering class of a positioned node.

    Values:
        NODE: Expanded node with children
        LEAF: True leaf, nothing to expand
        COLLAPSED: Node whose children are hidden
    """

    NODE = "node"
    LEAF = "leaf"
    COLLAPSED = "collapsed"

    @classmethod
    def of(cls, node: TreeNode) -> NodeKind:
        if node.is_leaf:
            return cls.LEAF
        if node.collapsed:
            return cls.COLLAPSED
        return cls.NODE


def link_id(source_id: int, target_id: int) -> str:
    """Identity of the link from a parent to a child."""
    return f"{source_id}->{target_id}"


@dataclass(frozen=True)
class PositionedNode:
    """Read-only snapshot of one visible node after a layout pass."""

    stable_id: int
    name: str
    parent_id: int | None
    depth: int
    kind: NodeKind
    x: float
    y: float
    x0: float | None
    y0: float | None

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class PositionedLink:
    """Parent -> child link between two visible nodes."""

    source_id: int
    target_id: int
    source: Point
    target: Point

    @property
    def link_id(self) -> str:
        return link_id(self.source_id, self.target_id)


@dataclass(frozen=True)
class LayoutResult:
    """Output of one layout pass.

    Attributes:
        nodes: Visible nodes in pre-order
        links: One link per visible non-root node
        extent: Bounding box for viewport fitting
        depth_step: Depth distance between consecutive levels
    """

    nodes: tuple[PositionedNode, ...]
    links: tuple[PositionedLink, ...]
    extent: ExtentBox
    depth_step: float

    def node(self, stable_id: int) -> PositionedNode:
        for positioned in self.nodes:
            if positioned.stable_id == stable_id:
                return positioned
        raise KeyError(stable_id)

    @property
    def node_ids(self) -> tuple[int, ...]:
        return tuple(n.stable_id for n in self.nodes)

    @property
    def link_ids(self) -> tuple[str, ...]:
        return tuple(link.link_id for link in self.links)


class LayoutEngine:
    """Converts the visible tree into node and link positions.

    Args:
        config: Engine options (node_width, node_spacing, padding,
            depth_inset, algorithm)

    Example:
        >>> engine = LayoutEngine(EngineConfig(node_width=10, node_spacing=300))
        >>> result = engine.layout(model)
        >>> min(n.x for n in result.nodes)
        0.0
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    def layout(
        self,
        model: HierarchyModel,
        root: TreeNode | None = None,
        *,
        node_width: float | None = None,
        node_spacing: float | None = None,
    ) -> LayoutResult:
        """Run one layout pass over the visible tree under root.

        Args:
            model: The hierarchy
            root: Visible root of the pass (defaults to the model root)
            node_width: Overrides config.node_width for this pass
            node_spacing: Overrides config.node_spacing for this pass
        """
        cfg = self.config
        dx = cfg.node_width if node_width is None else node_width
        width = cfg.node_spacing if node_spacing is None else node_spacing
        start = model.node(root) if root is not None else model.root

        visible = list(iter_visible(model, start))
        items = {node.stable_id: LayoutItem(node.stable_id) for node, _ in visible}
        for node, _ in visible:
            items[node.stable_id].children = [items[c.stable_id] for c in model.children(node)]

        algorithm = cluster if cfg.algorithm == "cluster" else tidy_tree
        placement = algorithm(items[start.stable_id])

        height = max(depth for _, depth in visible)
        dy = width / (height + cfg.padding) if height + cfg.padding > 0 else width
        min_x = min(breadth for breadth, _ in placement.values()) * dx
        max_x = max(breadth for breadth, _ in placement.values()) * dx
        depth_shift = dy * cfg.padding / 2 - cfg.depth_inset

        positioned: list[PositionedNode] = []
        for node, depth in visible:
            breadth, level = placement[node.stable_id]
            node.x0, node.y0 = node.x, node.y
            node.x = breadth * dx - min_x
            node.y = level * dy + depth_shift
            positioned.append(
                PositionedNode(
                    stable_id=node.stable_id,
                    name=node.name,
                    parent_id=node.parent_id if node is not start else None,
                    depth=depth,
                    kind=NodeKind.of(node),
                    x=node.x,
                    y=node.y,
                    x0=node.x0,
                    y0=node.y0,
                )
            )

        by_id = {p.stable_id: p for p in positioned}
        links = tuple(
            PositionedLink(
                source_id=p.parent_id,
                target_id=p.stable_id,
                source=by_id[p.parent_id].point,
                target=p.point,
            )
            for p in positioned
            if p.parent_id is not None
        )

        # Breadth is shifted to start at 0, so min_x - margin is just -margin
        margin = dx
        extent = ExtentBox(
            x=0.0,
            y=0.0 - margin,
            width=width,
            height=(max_x - min_x) + margin,
        )
        logger.debug(
            "Laid out %d visible nodes (height %d, depth step %.2f)",
            len(positioned),
            height,
            dy,
        )
        return LayoutResult(
            nodes=tuple(positioned),
            links=links,
            extent=extent,
            depth_step=dy,
        )
