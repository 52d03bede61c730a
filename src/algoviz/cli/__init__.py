"""algoviz CLI: inspect, lay out and render graph snapshots.

Installed as the ``algoviz`` command by ``pip install algoviz[cli]``. Every
command takes the path of a snapshot JSON file (``{"nodes": [...],
"edges": [...]}``) and exits with status 1 if the file cannot be read, is not
JSON or does not build a graph. Canvas size and force layout tuning come from
``[tool.algoviz]`` in the nearest pyproject.toml; ``--width`` and
``--height`` override the canvas size per run.

Commands:
    inspect     Validate a snapshot and list its nodes, domains and edges
    layout      Place the nodes with the force or tree layout and print the
                positions (``--json`` wraps them in the versioned envelope)
    render      Lay a snapshot out with the csp, search or bayes view and write
                the drawn graph as a standalone HTML page
"""

from __future__ import annotations


def _require_typer():
    """Exit with an install hint when the cli extra is missing."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install algoviz[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Build the ``algoviz`` Typer app with the snapshot commands registered.

    Running it without arguments prints the help text.
    """
    _require_typer()

    import typer

    from algoviz.cli.snapshot_cmd import register_commands

    app = typer.Typer(
        name="algoviz",
        help="Inspect, lay out and render algorithm-state graph snapshots.",
        no_args_is_help=True,
    )
    register_commands(app)

    return app


def main():
    """Run the ``algoviz`` command on ``sys.argv``.

    Exits with the status of the invoked command: 0 on success, 1 for an
    unreadable or malformed snapshot, an unknown layout algorithm or an
    unknown view.
    """
    app = create_app()
    app()
