"""Reading and writing hierarchy files (JSON)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from dragtree.exceptions import MalformedHierarchyError


def load_hierarchy(path: str | Path) -> dict[str, Any]:
    """Load a nested hierarchy from a JSON file.

    Raises:
        MalformedHierarchyError: The file is not JSON or its top level is
            not an object
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedHierarchyError((), f"invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise MalformedHierarchyError((), f"top level of {path} must be an object")
    return data


def dump_hierarchy(tree: dict[str, Any], path: str | Path | None = None, *, indent: int = 2) -> str:
    """Serialize a plain tree to JSON, writing it to path when given."""
    text = json.dumps(tree, indent=indent, ensure_ascii=False)
    if path is not None:
        Path(path).write_text(text + "\n", encoding="utf-8")
    return text
