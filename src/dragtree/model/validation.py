"""Hierarchy validation logic.

Build-time checks on raw input plus the runtime invariant check that the
ancestor-path index agrees with the parent/children structure.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TYPE_CHECKING

import networkx as nx

from dragtree.exceptions import (
    DuplicateSiblingNameError,
    InvariantViolation,
    MalformedHierarchyError,
)
from dragtree.model._helpers import walk_parent_names

if TYPE_CHECKING:
    from dragtree.model.core import HierarchyModel
    from dragtree.model.node import ChildrenAccessor, HierarchySchema


def read_name(raw: Any, location: Sequence[str], schema: HierarchySchema) -> str:
    """Return the node name, raising MalformedHierarchyError if unusable."""
    if not isinstance(raw, Mapping):
        raise MalformedHierarchyError(
            location, f"expected an object, got {type(raw).__name__}"
        )
    if schema.name_key not in raw:
        raise MalformedHierarchyError(location, f"missing '{schema.name_key}'")
    name = raw[schema.name_key]
    if not isinstance(name, str) or not name:
        raise MalformedHierarchyError(
            location, f"'{schema.name_key}' must be a non-empty string, got {name!r}"
        )
    return name


def read_children(
    raw: Mapping[str, Any],
    location: Sequence[str],
    accessor: ChildrenAccessor,
) -> list[Mapping[str, Any]]:
    """Return the raw children via the accessor, validating the container."""
    try:
        children = accessor(raw)
    except KeyError as e:
        raise MalformedHierarchyError(location, f"missing children field {e}") from e
    if children is None:
        return []
    if isinstance(children, (str, bytes, Mapping)) or not isinstance(children, Sequence):
        raise MalformedHierarchyError(
            location, f"children must be a list, got {type(children).__name__}"
        )
    return list(children)


def validate_sibling_names(parent_name: str, names: Sequence[str]) -> None:
    """Siblings must have distinct names."""
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise DuplicateSiblingNameError(parent_name, name)
        seen.add(name)


def find_invariant_problems(model: HierarchyModel) -> list[str]:
    """Return one message per broken invariant (empty = consistent).

    Checks:
    1. parent_id and child_ids agree in both directions
    2. The structure is a single tree rooted at model.root
    3. Every ancestor_path equals the names found by walking parents
    4. Sibling names are unique
    """
    problems: list[str] = []
    nodes = {node.stable_id: node for node in model.all_nodes()}

    for node in nodes.values():
        for child_id in node.child_ids:
            child = nodes.get(child_id)
            if child is None:
                problems.append(f"{node!r} lists missing child {child_id}")
            elif child.parent_id != node.stable_id:
                problems.append(
                    f"{child!r} is listed under {node!r} but points at parent {child.parent_id}"
                )
        if node.parent_id is not None:
            parent = nodes.get(node.parent_id)
            if parent is None or node.stable_id not in parent.child_ids:
                problems.append(f"{node!r} is not among its parent's children")

    if problems:
        return problems

    G = model.nx_graph
    if len(G) and not nx.is_arborescence(G):
        problems.append("structure is not a single rooted tree")
        return problems

    for node in nodes.values():
        try:
            expected = walk_parent_names(G, node.stable_id)
        except ValueError as e:
            problems.append(str(e))
            continue
        if node.ancestor_path != expected:
            problems.append(
                f"{node!r} has ancestor_path {list(node.ancestor_path)}, "
                f"expected {list(expected)}"
            )

    for node in nodes.values():
        try:
            validate_sibling_names(node.name, [nodes[c].name for c in node.child_ids if c in nodes])
        except DuplicateSiblingNameError as e:
            problems.append(e.message.splitlines()[0])

    return problems


def verify_model(model: HierarchyModel) -> None:
    """Raise InvariantViolation if the model is inconsistent."""
    problems = find_invariant_problems(model)
    if problems:
        raise InvariantViolation(problems)
