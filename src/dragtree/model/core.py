"""HierarchyModel: the canonical tree and its ancestor-path index."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import networkx as nx

from dragtree._utils import join_path, path_descends_from, split_path
from dragtree.exceptions import (
    RootReparentError,
    SelfOrAncestorTargetError,
    SiblingNameClashError,
    UnknownNodeError,
)
from dragtree.model._helpers import build_nx_graph
from dragtree.model.node import DEFAULT_SCHEMA, ChildrenAccessor, HierarchySchema, TreeNode
from dragtree.model.validation import (
    read_children,
    read_name,
    validate_sibling_names,
    verify_model,
)

logger = logging.getLogger(__name__)

NodeRef = TreeNode | int


@dataclass(frozen=True)
class ReparentResult:
    """What a successful move changed.

    Attributes:
        node_id: The moved node
        old_parent_id: Its parent before the move
        new_parent_id: Its parent after the move
        updated_ids: The moved node and every descendant (all paths changed)
    """

    node_id: int
    old_parent_id: int
    new_parent_id: int
    updated_ids: tuple[int, ...]


def _children_accessor(schema: HierarchySchema) -> ChildrenAccessor:
    key = schema.children_key

    def accessor(raw: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
        return raw[key]

    return accessor


class HierarchyModel:
    """Owns the node arena, the parent/children structure and ancestor paths.

    Nodes live in a list indexed by stable id; structural edits are index
    list edits. All structural change goes through ``reparent`` (and
    visibility through the collapse controller) so that for every node the
    ancestor path equals the names of its real ancestors, nearest first.

    Example:
        >>> model = HierarchyModel.build(
        ...     {"Name": "Root", "Children": [{"Name": "A", "Children": []}]}
        ... )
        >>> model.find("Root/A").ancestor_path
        ('Root',)
    """

    def __init__(self, nodes: list[TreeNode], schema: HierarchySchema = DEFAULT_SCHEMA) -> None:
        if not nodes:
            raise ValueError("A hierarchy needs at least a root node")
        self._nodes = nodes
        self._schema = schema
        self._nx_graph: nx.DiGraph | None = None
        self.revision = 0

    # -- construction -------------------------------------------------------

    @classmethod
    def build(
        cls,
        raw: Mapping[str, Any],
        children: ChildrenAccessor | None = None,
        *,
        schema: HierarchySchema = DEFAULT_SCHEMA,
    ) -> HierarchyModel:
        """Convert a nested-object hierarchy into a model.

        Stable ids follow pre-order from 0; ancestor paths are filled top
        down; every node starts expanded. Nothing is returned unless the
        whole input is valid.

        Args:
            raw: Root object of the nested hierarchy
            children: Returns a raw node's children (defaults to the
                schema's children field, which must be present)
            schema: Field names of the raw format

        Raises:
            MalformedHierarchyError: A node lacks a name or children list
            DuplicateSiblingNameError: Two siblings share a name
        """
        accessor = children or _children_accessor(schema)
        excluded = {schema.name_key, schema.children_key}
        nodes: list[TreeNode] = []

        # (raw, parent_id, ancestor_path) in pre-order
        stack: list[tuple[Any, int | None, tuple[str, ...]]] = [(raw, None, ())]
        while stack:
            item, parent_id, path = stack.pop()
            location = tuple(reversed(path))
            name = read_name(item, location, schema)
            raw_children = read_children(item, (*location, name), accessor)
            validate_sibling_names(
                name,
                [read_name(c, (*location, name), schema) for c in raw_children],
            )

            node = TreeNode(
                stable_id=len(nodes),
                name=name,
                payload={k: copy.deepcopy(v) for k, v in item.items() if k not in excluded},
                parent_id=parent_id,
                ancestor_path=path,
            )
            nodes.append(node)
            if parent_id is not None:
                nodes[parent_id].child_ids.append(node.stable_id)

            child_path = (name, *path)
            for child in reversed(raw_children):
                stack.append((child, node.stable_id, child_path))

        logger.debug("Built hierarchy '%s' with %d nodes", nodes[0].name, len(nodes))
        return cls(nodes, schema)

    # -- lookups -------------------------------------------------------------

    @property
    def schema(self) -> HierarchySchema:
        return self._schema

    @property
    def root(self) -> TreeNode:
        return self._nodes[0]

    def node(self, ref: NodeRef) -> TreeNode:
        """Resolve a stable id (or pass a node through), checking ownership."""
        if isinstance(ref, TreeNode):
            if ref.stable_id < len(self._nodes) and self._nodes[ref.stable_id] is ref:
                return ref
            raise UnknownNodeError(ref.stable_id, f"{ref!r} does not belong to this model")
        if isinstance(ref, bool) or not isinstance(ref, int) or not 0 <= ref < len(self._nodes):
            raise UnknownNodeError(ref)
        return self._nodes[ref]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        """Pre-order over the full model, collapsed subtrees included."""
        return self._walk(self.root, visible_only=False)

    def __contains__(self, ref: object) -> bool:
        try:
            self.node(ref)  # type: ignore[arg-type]
        except UnknownNodeError:
            return False
        return True

    def all_nodes(self) -> list[TreeNode]:
        """Every node in stable-id order, without walking the structure."""
        return list(self._nodes)

    def parent(self, ref: NodeRef) -> TreeNode | None:
        node = self.node(ref)
        return None if node.parent_id is None else self._nodes[node.parent_id]

    def children(self, ref: NodeRef) -> list[TreeNode]:
        """Visible children: empty while the node is collapsed."""
        return [self._nodes[i] for i in self.node(ref).visible_child_ids]

    def hidden_children(self, ref: NodeRef) -> list[TreeNode] | None:
        """Children saved by a collapse, or None while expanded."""
        hidden = self.node(ref).hidden_child_ids
        if hidden is None:
            return None
        return [self._nodes[i] for i in hidden]

    def path_of(self, ref: NodeRef) -> tuple[str, ...]:
        """Root-first names ending with the node itself."""
        node = self.node(ref)
        return (*reversed(node.ancestor_path), node.name)

    def find(self, path: str | Sequence[str]) -> TreeNode:
        """Look a node up by its root-first name path, e.g. 'Root/A/B'."""
        names = split_path(path)
        if not names or names[0] != self.root.name:
            raise UnknownNodeError(join_path(names))
        current = self.root
        for name in names[1:]:
            match = next(
                (self._nodes[i] for i in current.child_ids if self._nodes[i].name == name),
                None,
            )
            if match is None:
                raise UnknownNodeError(join_path(names))
            current = match
        return current

    def descendants(self, ref: NodeRef) -> list[TreeNode]:
        """Every structural descendant in pre-order, excluding the node."""
        node = self.node(ref)
        return list(self._walk(node, visible_only=False))[1:]

    def visible_nodes(self) -> list[TreeNode]:
        """Pre-order over nodes reachable through visible children."""
        return list(self._walk(self.root, visible_only=True))

    def is_descendant(self, candidate: NodeRef, ancestor: NodeRef) -> bool:
        """Ordered ancestor-path test: is candidate strictly under ancestor?"""
        c = self.node(candidate)
        a = self.node(ancestor)
        return path_descends_from(c.ancestor_path, a.name, a.ancestor_path)

    def _walk(self, start: TreeNode, *, visible_only: bool) -> Iterator[TreeNode]:
        stack = [start]
        while stack:
            node = stack.pop()
            yield node
            ids = node.visible_child_ids if visible_only else node.child_ids
            stack.extend(self._nodes[i] for i in reversed(ids))

    # -- mutation ------------------------------------------------------------

    def reparent(self, ref: NodeRef, new_parent_ref: NodeRef) -> ReparentResult:
        """Move a node (with its subtree) under a new parent.

        The node is appended as the last child of the new parent. Its
        ancestor path and every descendant's path are rewritten, and the
        informational parent field of its payload follows the move.

        Raises:
            RootReparentError: node is the root
            SelfOrAncestorTargetError: new parent is node or inside its subtree
            SiblingNameClashError: new parent already has a child of that name
        """
        node = self.node(ref)
        new_parent = self.node(new_parent_ref)

        if node.parent_id is None:
            raise RootReparentError(node.stable_id, new_parent.stable_id)
        if new_parent is node or self.is_descendant(new_parent, node):
            raise SelfOrAncestorTargetError(node.stable_id, new_parent.stable_id)
        old_parent = self._nodes[node.parent_id]
        if old_parent is not new_parent and any(
            self._nodes[i].name == node.name for i in new_parent.child_ids
        ):
            raise SiblingNameClashError(
                node.stable_id, new_parent.stable_id, new_parent.name, node.name
            )

        old_parent.child_ids.remove(node.stable_id)
        new_parent.child_ids.append(node.stable_id)
        node.parent_id = new_parent.stable_id
        if self._schema.parent_key is not None:
            node.payload[self._schema.parent_key] = new_parent.name

        updated = self._refresh_paths(node)
        self._nx_graph = None
        self.revision += 1
        logger.debug(
            "Moved '%s' from '%s' to '%s' (%d paths rewritten)",
            node.name,
            old_parent.name,
            new_parent.name,
            len(updated),
        )
        return ReparentResult(
            node_id=node.stable_id,
            old_parent_id=old_parent.stable_id,
            new_parent_id=new_parent.stable_id,
            updated_ids=updated,
        )

    def _refresh_paths(self, start: TreeNode) -> tuple[int, ...]:
        """Recompute ancestor paths top-down from start's parent."""
        updated: list[int] = []
        stack = [start]
        while stack:
            node = stack.pop()
            parent = self._nodes[node.parent_id]  # type: ignore[index]
            node.ancestor_path = (parent.name, *parent.ancestor_path)
            updated.append(node.stable_id)
            stack.extend(self._nodes[i] for i in reversed(node.child_ids))
        return tuple(updated)

    # -- export / inspection -----------------------------------------------------

    def to_plain_tree(self) -> dict[str, Any]:
        """Serialize the full model back to the nested input shape.

        Collapsed subtrees are included. Keys come out as name, payload
        fields in their original order, then children.
        """
        out: list[dict[str, Any]] = []
        stack: list[tuple[TreeNode, list[dict[str, Any]]]] = [(self.root, out)]
        while stack:
            node, siblings = stack.pop()
            entry: dict[str, Any] = {self._schema.name_key: node.name}
            entry.update(copy.deepcopy(node.payload))
            entry[self._schema.children_key] = []
            siblings.append(entry)
            # Reversed so children pop, and append, in their original order
            for i in reversed(node.child_ids):
                stack.append((self._nodes[i], entry[self._schema.children_key]))
        return out[0]

    @property
    def nx_graph(self) -> nx.DiGraph:
        """Parent -> child NetworkX view of the structure (rebuilt after moves)."""
        if self._nx_graph is None:
            self._nx_graph = build_nx_graph(self._nodes)
        return self._nx_graph

    def verify(self) -> None:
        """Raise InvariantViolation if paths and structure disagree."""
        verify_model(self)
