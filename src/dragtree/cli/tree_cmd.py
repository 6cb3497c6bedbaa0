"""Tree CLI commands: show, layout, move, check."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from dragtree._utils import join_path
from dragtree.cli._format import format_number, print_json, print_lines, print_table
from dragtree.collapse import CollapseController
from dragtree.config import load_config
from dragtree.exceptions import DragtreeError, HierarchyBuildError, ReparentError, UnknownNodeError
from dragtree.io import dump_hierarchy, load_hierarchy
from dragtree.layout import LayoutEngine
from dragtree.model import HierarchyModel, TreeNode


def _load_model(file: Path) -> HierarchyModel:
    """Read and build a hierarchy, turning build errors into exit code 1."""
    if not file.is_file():
        print(f"Error: File not found: {file}")
        raise typer.Exit(1)
    try:
        return HierarchyModel.build(load_hierarchy(file))
    except HierarchyBuildError as e:
        print(f"Error: {file} is not a valid hierarchy\n\n{e}")
        raise typer.Exit(1) from e


def _resolve(model: HierarchyModel, path: str) -> TreeNode:
    try:
        return model.find(path)
    except UnknownNodeError as e:
        print(f"Error: No node at path '{path}'")
        print(f"Hint: Paths start at the root, e.g. '{model.root.name}/...'")
        raise typer.Exit(1) from e


def _add_branch(branch, model: HierarchyModel, node: TreeNode) -> None:
    from rich.markup import escape

    stack = [(branch, child) for child in reversed(model.children(node))]
    while stack:
        parent, child = stack.pop()
        label = escape(child.name)
        if child.collapsed:
            label += f" [dim](+{len(child.child_ids)} hidden)[/dim]"
        added = parent.add(label)
        stack.extend((added, c) for c in reversed(model.children(child)))


def register_commands(app: typer.Typer) -> None:
    """Register tree commands on the main app."""

    @app.command("show")
    def show(
        file: Annotated[Path, typer.Argument(help="Hierarchy JSON file")],
        depth: Annotated[
            int | None,
            typer.Option("--depth", help="Collapse everything below this depth"),
        ] = None,
    ):
        """Render the hierarchy as a tree."""
        from rich.console import Console
        from rich.markup import escape
        from rich.tree import Tree

        model = _load_model(file)
        if depth is not None:
            CollapseController(model).collapse_to_depth(depth)

        tree = Tree(f"[bold]{escape(model.root.name)}[/bold]")
        _add_branch(tree, model, model.root)
        Console().print(tree)

    @app.command("layout")
    def layout(
        file: Annotated[Path, typer.Argument(help="Hierarchy JSON file")],
        algorithm: Annotated[
            str | None,
            typer.Option("--algorithm", help="'tree' (tidy tree) or 'cluster' (dendrogram)"),
        ] = None,
        node_width: Annotated[
            float | None, typer.Option("--node-width", help="Breadth between siblings")
        ] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[Path | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Compute node positions for the hierarchy."""
        try:
            config = load_config(algorithm=algorithm, node_width=node_width)
        except DragtreeError as e:
            print(f"Error: {e}")
            raise typer.Exit(1) from e

        model = _load_model(file)
        result = LayoutEngine(config).layout(model)

        if as_json:
            data = {
                "algorithm": config.algorithm,
                "depth_step": result.depth_step,
                "extent": {
                    "x": result.extent.x,
                    "y": result.extent.y,
                    "width": result.extent.width,
                    "height": result.extent.height,
                },
                "nodes": [
                    {
                        "id": n.stable_id,
                        "name": n.name,
                        "path": join_path(model.path_of(n.stable_id)),
                        "parent": n.parent_id,
                        "depth": n.depth,
                        "kind": n.kind.value,
                        "x": n.x,
                        "y": n.y,
                    }
                    for n in result.nodes
                ],
                "links": list(result.link_ids),
            }
            print_json("layout", data, output)
            return

        lines = [
            f"Layout: {model.root.name} ({config.algorithm}, {len(result.nodes)} nodes, "
            f"depth step {result.depth_step:.1f})",
            "",
        ]
        rows = [
            [
                str(n.stable_id),
                "  " * n.depth + n.name,
                str(n.depth),
                format_number(n.x),
                format_number(n.y),
            ]
            for n in result.nodes
        ]
        lines.extend(print_table(["Id", "Name", "Depth", "X", "Y"], rows))
        print_lines(lines)

    @app.command("move")
    def move(
        file: Annotated[Path, typer.Argument(help="Hierarchy JSON file")],
        node: Annotated[str, typer.Argument(help="Path of the node to move, e.g. 'Root/A/B'")],
        new_parent: Annotated[str, typer.Argument(help="Path of the new parent")],
        output: Annotated[
            Path | None,
            typer.Option("--output", help="Write the result here instead of FILE"),
        ] = None,
    ):
        """Move a node and its subtree under a new parent."""
        model = _load_model(file)
        target = _resolve(model, node)
        parent = _resolve(model, new_parent)

        try:
            result = model.reparent(target, parent)
        except ReparentError as e:
            print(f"Error: {e}")
            raise typer.Exit(1) from e

        destination = output or file
        dump_hierarchy(model.to_plain_tree(), destination)
        print(
            f"Moved '{target.name}' under '{join_path(model.path_of(parent))}' "
            f"({len(result.updated_ids)} nodes updated), wrote {destination}"
        )

    @app.command("check")
    def check(
        file: Annotated[Path, typer.Argument(help="Hierarchy JSON file")],
    ):
        """Validate a hierarchy file and its path invariants."""
        model = _load_model(file)
        try:
            model.verify()
        except DragtreeError as e:
            print(f"Error: {e}")
            raise typer.Exit(1) from e

        leaves = sum(1 for n in model if n.is_leaf)
        height = max(n.depth for n in model)
        print(f"OK: {model.root.name} ({len(model)} nodes, {leaves} leaves, height {height})")
