"""Utility functions for dragtree."""

from __future__ import annotations

from collections.abc import Sequence

PATH_SEPARATOR = "/"


def lineage(name: str, ancestor_path: Sequence[str]) -> tuple[str, ...]:
    """Return the nearest-first path that descendants of a node end with.

    Examples:
        >>> lineage("Dog", ("Mammals", "Animals"))
        ('Dog', 'Mammals', 'Animals')
    """
    return (name, *ancestor_path)


def path_descends_from(
    candidate_path: Sequence[str],
    name: str,
    ancestor_path: Sequence[str],
) -> bool:
    """Check whether a node with candidate_path lies under the given node.

    Compares the whole ordered lineage rather than testing membership of
    a single name, so two branches that reuse a name are never confused.

    Args:
        candidate_path: Ancestor path of the node being tested, nearest first
        name: Name of the would-be ancestor
        ancestor_path: Ancestor path of the would-be ancestor, nearest first

    Examples:
        >>> path_descends_from(("Dog", "Mammals", "Animals"), "Mammals", ("Animals",))
        True
        >>> path_descends_from(("Dog", "Pets", "Home"), "Dog", ("Mammals", "Animals"))
        False
    """
    expected = lineage(name, ancestor_path)
    if len(candidate_path) < len(expected):
        return False
    return tuple(candidate_path[len(candidate_path) - len(expected):]) == expected


def split_path(path: str | Sequence[str]) -> tuple[str, ...]:
    """Convert 'Animals/Mammals/Dog' into a root-first tuple of names.

    Sequences pass through unchanged (as a tuple).

    Examples:
        >>> split_path("Animals/Mammals")
        ('Animals', 'Mammals')
        >>> split_path(["Animals"])
        ('Animals',)
    """
    if isinstance(path, str):
        return tuple(part for part in path.split(PATH_SEPARATOR) if part)
    return tuple(path)


def join_path(names: Sequence[str]) -> str:
    """Inverse of split_path for display."""
    return PATH_SEPARATOR.join(names)
