"""Exceptions for the dragtree engine.

Structural errors raised by a move are local: the session reverts the
gesture and keeps running. Build errors are fatal to construction only;
no partial model is ever returned.
"""

from __future__ import annotations

from collections.abc import Sequence


class DragtreeError(Exception):
    """Base class for all dragtree errors."""


class ConfigError(DragtreeError):
    """Raised when an engine option has an invalid value."""


class UnknownNodeError(DragtreeError, KeyError):
    """No node matches the given stable id or name path.

    Attributes:
        key: The stable id or path that was looked up
    """

    def __init__(self, key: int | str, message: str | None = None) -> None:
        self.key = key
        self.message = message or f"No node found for {key!r}"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Build-time errors
# ---------------------------------------------------------------------------


class HierarchyBuildError(DragtreeError):
    """Raised when a raw hierarchy cannot be turned into a model."""


class MalformedHierarchyError(HierarchyBuildError):
    """A raw node is missing its name or children, or has the wrong type.

    Attributes:
        location: Root-first names of the ancestors of the bad node
        reason: What is wrong with the node
    """

    def __init__(self, location: Sequence[str], reason: str) -> None:
        self.location = tuple(location)
        self.reason = reason
        where = "/".join(self.location) if self.location else "<root>"
        self.message = (
            f"Malformed hierarchy at '{where}': {reason}\n\n"
            f"How to fix: every node needs a string name and a list of children"
        )
        super().__init__(self.message)


class DuplicateSiblingNameError(HierarchyBuildError):
    """Two children of the same parent share a name.

    Ancestor-path membership tests rely on names being unique among
    siblings, so this is rejected both at build time and when a move
    would introduce the clash.

    Attributes:
        parent_name: Name of the parent holding the duplicates
        name: The repeated child name
    """

    def __init__(self, parent_name: str, name: str) -> None:
        self.parent_name = parent_name
        self.name = name
        self.message = (
            f"Duplicate sibling name: '{name}' under '{parent_name}'\n\n"
            f"How to fix: rename one of the children"
        )
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Reparent errors
# ---------------------------------------------------------------------------


class ReparentError(DragtreeError):
    """Base class for rejected structural moves.

    Attributes:
        node_id: Stable id of the node being moved
        target_id: Stable id of the requested new parent, if any
    """

    def __init__(
        self,
        node_id: int,
        target_id: int | None = None,
        message: str | None = None,
    ) -> None:
        self.node_id = node_id
        self.target_id = target_id
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        return f"Cannot move node {self.node_id} under node {self.target_id}"


class SelfOrAncestorTargetError(ReparentError):
    """The new parent is the node itself or one of its descendants."""

    def _default_message(self) -> str:
        return (
            f"Cannot move node {self.node_id} under node {self.target_id}: "
            f"the target is the node itself or inside its subtree"
        )


class RootReparentError(ReparentError):
    """The root has no parent and can never move."""

    def _default_message(self) -> str:
        return f"Node {self.node_id} is the root and cannot be moved"


class SiblingNameClashError(ReparentError):
    """The new parent already has a child with the moved node's name.

    Attributes:
        parent_name: Name of the requested new parent
        name: Name shared by the moved node and the existing child
    """

    def __init__(self, node_id: int, target_id: int, parent_name: str, name: str) -> None:
        self.parent_name = parent_name
        self.name = name
        super().__init__(node_id, target_id)

    def _default_message(self) -> str:
        return (
            f"Cannot move '{self.name}' under '{self.parent_name}': "
            f"a child with that name already exists"
        )


# ---------------------------------------------------------------------------
# Runtime guards
# ---------------------------------------------------------------------------


class InvariantViolation(DragtreeError):
    """The model's ancestor-path index disagrees with its structure.

    Attributes:
        problems: One line per inconsistent node
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        lines = "\n".join(f"  -> {p}" for p in problems)
        self.message = f"Tree invariants violated:\n{lines}"
        super().__init__(self.message)


class ReentrantCallError(DragtreeError):
    """A mutating session call was made while another one was running.

    Attributes:
        active: Name of the operation in progress
        attempted: Name of the operation that tried to start
    """

    def __init__(self, active: str, attempted: str) -> None:
        self.active = active
        self.attempted = attempted
        self.message = (
            f"'{attempted}' called while '{active}' is still running\n\n"
            f"How to fix: do not call back into the session from an event "
            f"processor; queue the call on your event loop instead"
        )
        super().__init__(self.message)


class DragInProgressError(ReentrantCallError):
    """A layout or toggle was requested between drag start and drag end.

    Attributes:
        node_id: Stable id of the node being dragged
    """

    def __init__(self, node_id: int, attempted: str) -> None:
        super().__init__("drag", attempted)
        self.node_id = node_id
        self.message = (
            f"'{attempted}' called while node {node_id} is being dragged\n\n"
            f"How to fix: finish the gesture with on_drag_end() first"
        )
        self.args = (self.message,)
