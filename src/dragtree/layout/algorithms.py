"""Node-size tree layout algorithms.

Both functions take a plain nested ``LayoutItem`` tree and return, per
item key, a ``(breadth, level)`` pair in separation units. The caller
scales breadth by the node width and level by the depth step.

``tidy_tree`` is the Reingold-Tilford algorithm with the linear-time
improvements of Walker and Buchheim et al., matching the placement of
``d3.tree().nodeSize(...)``. ``cluster`` is the dendrogram variant where
every leaf sits on the deepest level.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class LayoutItem:
    """One visible node handed to a layout algorithm."""

    key: int
    children: list[LayoutItem] = field(default_factory=list)


class _Walker:
    """Per-node working state of the tidy tree algorithm.

    z: preliminary breadth, m: modifier, c/s: change and shift for
    spreading apportioned space, t: thread, a: ancestor, A: default
    ancestor of the children, i: index among siblings.
    """

    __slots__ = ("item", "parent", "children", "A", "a", "z", "m", "c", "s", "t", "i", "x")

    def __init__(self, item: LayoutItem | None, i: int) -> None:
        self.item = item
        self.parent: _Walker | None = None
        self.children: list[_Walker] | None = None
        self.A: _Walker | None = None
        self.a: _Walker = self
        self.z = 0.0
        self.m = 0.0
        self.c = 0.0
        self.s = 0.0
        self.t: _Walker | None = None
        self.i = i
        self.x = 0.0


Separation = Callable[[_Walker, _Walker], float]


def default_separation(a: _Walker, b: _Walker) -> float:
    """Siblings sit one unit apart, cousins two."""
    return 1.0 if a.parent is b.parent else 2.0


def _build_walkers(root: LayoutItem) -> _Walker:
    tree = _Walker(root, 0)
    stack = [tree]
    while stack:
        node = stack.pop()
        items = node.item.children  # type: ignore[union-attr]
        if items:
            node.children = [_Walker(child, i) for i, child in enumerate(items)]
            for child in node.children:
                child.parent = node
            stack.extend(node.children)
    sentinel = _Walker(None, 0)
    sentinel.children = [tree]
    tree.parent = sentinel
    return tree


def _post_order(root: _Walker) -> list[_Walker]:
    """Left-to-right post-order (reverse of a right-to-left pre-order)."""
    order: list[_Walker] = []
    stack = [root]
    while stack:
        node = stack.pop()
        order.append(node)
        if node.children:
            stack.extend(node.children)
    order.reverse()
    return order


def _pre_order(root: _Walker) -> list[_Walker]:
    order: list[_Walker] = []
    stack = [root]
    while stack:
        node = stack.pop()
        order.append(node)
        if node.children:
            stack.extend(reversed(node.children))
    return order


def _next_left(v: _Walker) -> _Walker | None:
    return v.children[0] if v.children else v.t


def _next_right(v: _Walker) -> _Walker | None:
    return v.children[-1] if v.children else v.t


def _move_subtree(wm: _Walker, wp: _Walker, shift: float) -> None:
    change = shift / (wp.i - wm.i)
    wp.c -= change
    wp.s += shift
    wm.c += change
    wp.z += shift
    wp.m += shift


def _execute_shifts(v: _Walker) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children or []):
        w.z += shift
        w.m += shift
        change += w.c
        shift += w.s + change


def _next_ancestor(vim: _Walker, v: _Walker, ancestor: _Walker) -> _Walker:
    return vim.a if vim.a.parent is v.parent else ancestor


def _apportion(v: _Walker, w: _Walker | None, ancestor: _Walker, separation: Separation) -> _Walker:
    if w is None:
        return ancestor

    vip: _Walker | None = v
    vop: _Walker = v
    vim: _Walker | None = w
    vom: _Walker = v.parent.children[0]  # type: ignore[union-attr,index]
    sip = vip.m  # type: ignore[union-attr]
    sop = vop.m
    sim = vim.m  # type: ignore[union-attr]
    som = vom.m

    vim = _next_right(vim)  # type: ignore[arg-type]
    vip = _next_left(vip)  # type: ignore[arg-type]
    while vim is not None and vip is not None:
        vom = _next_left(vom)  # type: ignore[assignment]
        vop = _next_right(vop)  # type: ignore[assignment]
        vop.a = v
        shift = vim.z + sim - vip.z - sip + separation(vim, vip)
        if shift > 0:
            _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
            sip += shift
            sop += shift
        sim += vim.m
        sip += vip.m
        som += vom.m
        sop += vop.m
        vim = _next_right(vim)
        vip = _next_left(vip)

    if vim is not None and _next_right(vop) is None:
        vop.t = vim
        vop.m += sim - sop
    if vip is not None and _next_left(vom) is None:
        vom.t = vip
        vom.m += sip - som
        ancestor = v
    return ancestor


def _first_walk(v: _Walker, separation: Separation) -> None:
    siblings = v.parent.children  # type: ignore[union-attr]
    w = siblings[v.i - 1] if v.i else None  # type: ignore[index]
    if v.children:
        _execute_shifts(v)
        midpoint = (v.children[0].z + v.children[-1].z) / 2
        if w is not None:
            v.z = w.z + separation(v, w)
            v.m = v.z - midpoint
        else:
            v.z = midpoint
    elif w is not None:
        v.z = w.z + separation(v, w)
    parent = v.parent
    parent.A = _apportion(v, w, parent.A or siblings[0], separation)  # type: ignore[union-attr,index]


def tidy_tree(
    root: LayoutItem,
    separation: Separation = default_separation,
) -> dict[int, tuple[float, int]]:
    """Tidy tree placement: key -> (breadth units, depth level).

    Parents are centred over their children, siblings are at least one
    separation apart, and no two subtrees overlap. The root is at breadth 0.
    """
    tree = _build_walkers(root)
    for v in _post_order(tree):
        _first_walk(v, separation)
    tree.parent.m = -tree.z  # type: ignore[union-attr]

    result: dict[int, tuple[float, int]] = {}
    depths = {id(tree): 0}
    for v in _pre_order(tree):
        v.x = v.z + v.parent.m  # type: ignore[union-attr]
        v.m += v.parent.m  # type: ignore[union-attr]
        depth = depths[id(v)]
        for child in v.children or []:
            depths[id(child)] = depth + 1
        result[v.item.key] = (v.x, depth)  # type: ignore[union-attr]
    return result


def cluster(
    root: LayoutItem,
    separation: Separation = default_separation,
) -> dict[int, tuple[float, int]]:
    """Dendrogram placement: key -> (breadth units, depth level).

    Leaves are spaced in order and all placed on the deepest level;
    parents sit at the mean breadth of their children. The root is at
    breadth 0.
    """
    tree = _build_walkers(root)
    levels: dict[int, int] = {}
    previous: _Walker | None = None
    offset = 0.0
    for v in _post_order(tree):
        if v.children:
            v.x = sum(c.x for c in v.children) / len(v.children)
            levels[id(v)] = 1 + max(levels[id(c)] for c in v.children)
        else:
            if previous is not None:
                offset += separation(v, previous)
                v.x = offset
            else:
                v.x = 0.0
            levels[id(v)] = 0
            previous = v

    root_level = levels[id(tree)]
    return {
        v.item.key: (v.x - tree.x, root_level - levels[id(v)])  # type: ignore[union-attr]
        for v in _pre_order(tree)
    }
