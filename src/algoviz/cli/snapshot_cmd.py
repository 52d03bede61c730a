"""Snapshot CLI commands: inspect, layout, render."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer

from algoviz.cli._format import format_coord, print_json, print_lines, print_table
from algoviz.config import load_config
from algoviz.exceptions import MalformedSnapshotError
from algoviz.graph.core import Graph


def _load_snapshot(path: str) -> dict[str, Any]:
    """Read a snapshot file and check that it builds a Graph."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        print(f"Error: Could not read '{path}': {e}")
        raise typer.Exit(1) from e

    try:
        snapshot = json.loads(text)
        Graph.from_snapshot(snapshot)
    except json.JSONDecodeError as e:
        print(f"Error: '{path}' is not valid JSON: {e}")
        raise typer.Exit(1) from e
    except MalformedSnapshotError as e:
        print(f"Error: Malformed snapshot '{path}': {e}")
        raise typer.Exit(1) from e
    return snapshot


def register_commands(app: typer.Typer) -> None:
    """Register snapshot commands on the root app."""

    @app.command("inspect")
    def inspect_cmd(
        snapshot_path: Annotated[str, typer.Argument(help="Path to a snapshot JSON file")],
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Validate a snapshot and show its nodes and edges."""
        graph = Graph.from_snapshot(_load_snapshot(snapshot_path))

        if as_json:
            data = {
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges),
                "nodes": [{"id": n.id, "name": n.name, "type": n.type.value} for n in graph.nodes],
                "edges": [{"id": e.id, "source": e.source.id, "target": e.target.id} for e in graph.edges],
            }
            print_json("inspect", data, output)
            return

        print(f"\nSnapshot: {snapshot_path} | {len(graph.nodes)} nodes | {len(graph.edges)} edges\n")
        rows = [[str(n.id), n.name, n.type.value, ", ".join(map(str, n.domain or [])) or "—"] for n in graph.nodes]
        print_lines(print_table(["Id", "Name", "Type", "Domain"], rows))
        if graph.edges:
            print()
            rows = [[str(e.id), str(e.source.id), str(e.target.id)] for e in graph.edges]
            print_lines(print_table(["Edge", "Source", "Target"], rows))

    @app.command("layout")
    def layout_cmd(
        snapshot_path: Annotated[str, typer.Argument(help="Path to a snapshot JSON file")],
        algorithm: Annotated[str, typer.Option("--algorithm", "-a", help="force or tree")] = "force",
        root: Annotated[str | None, typer.Option("--root", help="Root node id (tree only)")] = None,
        width: Annotated[float | None, typer.Option("--width", help="Canvas width")] = None,
        height: Annotated[float | None, typer.Option("--height", help="Canvas height")] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Lay a snapshot out and show the node positions."""
        from algoviz.layout import GraphLayout, LayoutParams, force_layout, tree_layout

        config = load_config()
        if algorithm == "force":
            function = force_layout(config.layout)
        elif algorithm == "tree":
            function = tree_layout(root, config.layout)
        else:
            print(f"Error: Unknown algorithm '{algorithm}' (use 'force' or 'tree')")
            raise typer.Exit(1)

        graph = Graph.from_snapshot(_load_snapshot(snapshot_path))
        params = LayoutParams(width or config.width, height or config.height)
        result = asyncio.run(GraphLayout(function).setup(graph, params))

        if as_json:
            print_json("layout", graph.to_snapshot() | {"warnings": result.warnings}, output)
            return

        print(f"\nLayout: {algorithm} | {params.width:g}x{params.height:g}\n")
        rows = [
            [str(n.id), n.name, format_coord(n.x), format_coord(n.y), format_coord(n.styles.radius)]
            for n in graph.nodes
        ]
        print_lines(print_table(["Id", "Name", "X", "Y", "Radius"], rows))
        for warning in result.warnings:
            print(f"\n  ! {warning}")

    @app.command("render")
    def render_cmd(
        snapshot_path: Annotated[str, typer.Argument(help="Path to a snapshot JSON file")],
        view: Annotated[str, typer.Option("--view", help="csp, search or bayes")] = "csp",
        output: Annotated[str, typer.Option("--output", "-o", help="HTML file to write")] = "graph.html",
        width: Annotated[float | None, typer.Option("--width", help="Canvas width")] = None,
        height: Annotated[float | None, typer.Option("--height", help="Canvas height")] = None,
    ):
        """Lay a snapshot out with a view and write it as an HTML page."""
        from algoviz.events.channel import MemoryChannel
        from algoviz.views import VIEWS

        view_cls = VIEWS.get(view)
        if view_cls is None:
            print(f"Error: Unknown view '{view}' (use one of: {', '.join(sorted(VIEWS))})")
            raise typer.Exit(1)

        snapshot = _load_snapshot(snapshot_path)
        instance = view_cls(snapshot, MemoryChannel(), width=width, height=height, config=load_config())
        asyncio.run(instance.render())
        path = instance.widget().save(output)
        print(f"Wrote {view} view to {path}")
