"""Plain-text and JSON output for the tree commands."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

MAX_LINES = 200

# Columns right-aligned by print_table unless told otherwise
NUMERIC_COLUMNS = frozenset({"Id", "Depth", "X", "Y"})


def json_envelope(command: str, data: Any) -> dict[str, Any]:
    """Wrap command output so consumers can tell documents apart.

    No timestamp: the same input file always yields the same document.
    """
    return {"tool": "dragtree", "command": command, "data": data}


def print_json(command: str, data: Any, output: str | Path | None = None) -> None:
    """Print the envelope, or write it to a file and say where."""
    text = json.dumps(json_envelope(command, data), indent=2, ensure_ascii=False)
    if output is None:
        print(text)
        return
    Path(output).write_text(text + "\n", encoding="utf-8")
    print(f"Wrote {command} output to {output}")


def format_number(value: float | None) -> str:
    """One decimal place; a dash for a node that has no position yet."""
    if value is None:
        return "—"
    return f"{value:.1f}"


def print_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    indent: int = 2,
    numeric: frozenset[str] = NUMERIC_COLUMNS,
) -> list[str]:
    """Align rows under headers. Returns the lines without printing them."""
    if not rows:
        return []

    widths = [max(len(h), *(len(row[i]) for row in rows)) for i, h in enumerate(headers)]
    prefix = " " * indent

    def render(cells: Sequence[str]) -> str:
        return prefix + "  ".join(
            cell.rjust(w) if h in numeric else cell.ljust(w)
            for h, cell, w in zip(headers, cells, widths)
        )

    return [
        prefix + "  ".join(h.ljust(w) for h, w in zip(headers, widths)),
        prefix + "  ".join("─" * w for w in widths),
        *(render(row) for row in rows),
    ]


def print_lines(lines: Sequence[str], max_lines: int = MAX_LINES) -> None:
    """Print at most max_lines, then a count of what was left out."""
    for line in lines[:max_lines]:
        print(line)
    if len(lines) > max_lines:
        print(f"\n  # ... {len(lines) - max_lines} more lines")
