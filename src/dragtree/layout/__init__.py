"""Layout package - positions for the visible tree.

Usage:
    engine = LayoutEngine(EngineConfig(node_width=12))
    result = engine.layout(model)
    for node in result.nodes:
        draw(node.stable_id, node.y, node.x)  # depth axis is horizontal
"""

from dragtree.layout.algorithms import LayoutItem, cluster, tidy_tree
from dragtree.layout.coordinates import ExtentBox, Point
from dragtree.layout.engine import (
    LayoutEngine,
    LayoutResult,
    NodeKind,
    PositionedLink,
    PositionedNode,
    link_id,
)
from dragtree.layout.traversal import build_expansion_predicate, iter_visible, visible_height

__all__ = [
    "ExtentBox",
    "LayoutEngine",
    "LayoutItem",
    "LayoutResult",
    "NodeKind",
    "Point",
    "PositionedLink",
    "PositionedNode",
    "build_expansion_predicate",
    "cluster",
    "iter_visible",
    "link_id",
    "tidy_tree",
    "visible_height",
]
