"""Shared helper functions for hierarchy analysis.

Used by both core.py and validation.py to avoid duplication.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from dragtree.model.node import TreeNode


def build_nx_graph(nodes: Iterable[TreeNode]) -> nx.DiGraph:
    """Build a parent -> child DiGraph from node records.

    Nodes carry 'name' and 'parent' attributes so traversal helpers can
    work on the graph alone.
    """
    G = nx.DiGraph()
    nodes = list(nodes)
    for node in nodes:
        G.add_node(node.stable_id, name=node.name, parent=node.parent_id)
    for node in nodes:
        for child_id in node.child_ids:
            G.add_edge(node.stable_id, child_id)
    return G


def walk_parent_names(G: nx.DiGraph, node_id: int) -> tuple[str, ...]:
    """Names of all ancestors of node_id, nearest first, via parent links."""
    names: list[str] = []
    seen = {node_id}
    current = G.nodes[node_id]["parent"]
    while current is not None:
        if current in seen:
            raise ValueError(f"Parent cycle through node {current}")
        seen.add(current)
        names.append(G.nodes[current]["name"])
        current = G.nodes[current]["parent"]
    return tuple(names)
