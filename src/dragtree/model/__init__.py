"""Model package - the canonical tree, its ancestor-path index and validation."""

from dragtree.model.core import HierarchyModel, NodeRef, ReparentResult
from dragtree.model.node import DEFAULT_SCHEMA, ChildrenAccessor, HierarchySchema, TreeNode
from dragtree.model.validation import find_invariant_problems, verify_model

__all__ = [
    "DEFAULT_SCHEMA",
    "ChildrenAccessor",
    "HierarchyModel",
    "HierarchySchema",
    "NodeRef",
    "ReparentResult",
    "TreeNode",
    "find_invariant_problems",
    "verify_model",
]
