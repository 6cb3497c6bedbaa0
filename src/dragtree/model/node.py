"""Node records and the raw-hierarchy schema."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

ChildrenAccessor = Callable[[Mapping[str, Any]], "Sequence[Mapping[str, Any]] | None"]


@dataclass(frozen=True)
class HierarchySchema:
    """Field names of the nested-object hierarchy format.

    Every raw field other than the name and children is carried through
    untouched as the node payload. The parent field is informational and
    rewritten on every successful move.
    """

    name_key: str = "Name"
    children_key: str = "Children"
    parent_key: str | None = "Father"


DEFAULT_SCHEMA = HierarchySchema()


@dataclass(eq=False)
class TreeNode:
    """One entity in the hierarchy, addressed by its stable id.

    Structure lives in ``parent_id`` and ``child_ids``; collapsing only
    flips ``collapsed`` so the real subtree is never discarded.

    Attributes:
        stable_id: Pre-order index assigned once at build time
        name: Display key, unique among siblings
        payload: Opaque pass-through fields (Synonyms, Verbs, Father, ...)
        parent_id: Stable id of the parent, None for the root
        child_ids: Ordered stable ids of the structural children
        collapsed: True when the children are hidden
        ancestor_path: Ancestor names, nearest parent first, excluding self
        x, y: Current breadth / depth position (None until laid out)
        x0, y0: Position before the latest layout pass or drag
    """

    stable_id: int
    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    parent_id: int | None = None
    child_ids: list[int] = field(default_factory=list)
    collapsed: bool = False
    ancestor_path: tuple[str, ...] = ()
    x: float | None = None
    y: float | None = None
    x0: float | None = None
    y0: float | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_leaf(self) -> bool:
        """True leaf: no structural children, collapsed or not."""
        return not self.child_ids

    @property
    def depth(self) -> int:
        return len(self.ancestor_path)

    @property
    def visible_child_ids(self) -> tuple[int, ...]:
        """Children reachable by layout; empty while collapsed."""
        if self.collapsed:
            return ()
        return tuple(self.child_ids)

    @property
    def hidden_child_ids(self) -> tuple[int, ...] | None:
        """Saved children while collapsed, None while expanded."""
        if self.collapsed:
            return tuple(self.child_ids)
        return None

    @property
    def synonyms(self) -> list[str]:
        return list(self.payload.get("Synonyms", []))

    @property
    def verbs(self) -> list[str]:
        return list(self.payload.get("Verbs", []))

    @property
    def position(self) -> tuple[float, float] | None:
        if self.x is None or self.y is None:
            return None
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"TreeNode({self.stable_id}, {self.name!r})"
