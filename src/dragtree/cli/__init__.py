"""dragtree CLI: inspect, lay out and edit hierarchy files.

Entry point for the `dragtree` command. Requires ``pip install dragtree[cli]``.

Commands:
    show     Render a hierarchy as a tree
    layout   Compute node positions (table or JSON)
    move     Reparent a node by path and write the result
    check    Validate a hierarchy file
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install dragtree[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from dragtree.cli.tree_cmd import register_commands

    app = typer.Typer(
        name="dragtree",
        help="Lay out and edit hierarchies of named nodes.",
        no_args_is_help=True,
    )
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
