"""Tree traversal utilities for layout.

Provides traversal of the visible tree with configurable expansion
predicates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dragtree.model import HierarchyModel, TreeNode

ExpansionPredicate = Callable[["TreeNode", int], bool]


def iter_visible(
    model: HierarchyModel,
    start: TreeNode | None = None,
    should_expand: ExpansionPredicate | None = None,
) -> Iterator[tuple[TreeNode, int]]:
    """Yield (node, depth) in pre-order through visible children only.

    Collapsed nodes are yielded but not entered. ``should_expand`` can
    stop the walk earlier, e.g. at a maximum depth.

    Args:
        model: The hierarchy
        start: Node to start from (defaults to the root), depth 0
        should_expand: Predicate (node, depth) -> bool
            Returns True if the node's visible children should be visited
    """
    stack = [(start or model.root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        if should_expand is not None and not should_expand(node, depth):
            continue
        children = model.children(node)
        stack.extend((child, depth + 1) for child in reversed(children))


def visible_height(model: HierarchyModel, start: TreeNode | None = None) -> int:
    """Longest visible path from start down to a leaf, in edges."""
    return max((depth for _, depth in iter_visible(model, start)), default=0)


def build_expansion_predicate(max_depth: int | None = None) -> ExpansionPredicate:
    """Factory for creating depth-based expansion predicates.

    Args:
        max_depth: Maximum depth to expand (None = unlimited)

    Returns:
        Predicate function (node, depth) -> bool

    Example:
        >>> predicate = build_expansion_predicate(max_depth=2)
        >>> predicate(node, 1)
        True
        >>> predicate(node, 2)
        False
    """
    if max_depth is None:
        return lambda node, depth: True

    def predicate(node: TreeNode, depth: int) -> bool:
        return depth < max_depth

    return predicate
