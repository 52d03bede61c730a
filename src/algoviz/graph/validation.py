"""Snapshot validation.

This module contains all checks applied to a snapshot before a Graph is
built from it. Each check raises MalformedSnapshotError with a message that
names the offending item.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from algoviz.exceptions import MalformedSnapshotError


def validate_snapshot(snapshot: Any) -> None:
    """Run all snapshot checks.

    Args:
        snapshot: Decoded JSON object with "nodes" and "edges" lists

    Raises:
        MalformedSnapshotError: On the first problem found
    """
    _validate_shape(snapshot)
    node_ids = _validate_unique_ids(snapshot["nodes"], kind="node", seen=set())
    _validate_unique_ids(snapshot["edges"], kind="edge", seen=set(node_ids))
    _validate_edge_references(snapshot["edges"], node_ids)


def _validate_shape(snapshot: Any) -> None:
    """Snapshot must be a mapping holding two lists of objects."""
    if not isinstance(snapshot, Mapping):
        raise MalformedSnapshotError(
            f"Snapshot must be an object, got {type(snapshot).__name__}"
        )
    for key in ("nodes", "edges"):
        items = snapshot.get(key)
        if not isinstance(items, list):
            raise MalformedSnapshotError(f"Snapshot is missing a '{key}' list")
        for item in items:
            if not isinstance(item, Mapping):
                raise MalformedSnapshotError(
                    f"Every entry of '{key}' must be an object, got {type(item).__name__}"
                )
            if item.get("id") is None:
                raise MalformedSnapshotError(f"Entry of '{key}' has no id: {dict(item)!r}")


def _validate_unique_ids(items: list[Mapping[str, Any]], *, kind: str, seen: set[Any]) -> set[Any]:
    """Ids are unique across nodes and edges together."""
    ids: set[Any] = set()
    for item in items:
        item_id = item["id"]
        if item_id in seen or item_id in ids:
            raise MalformedSnapshotError(f"Duplicate id {item_id!r} on {kind}", item_id=item_id)
        ids.add(item_id)
    return ids


def _validate_edge_references(edges: list[Mapping[str, Any]], node_ids: set[Any]) -> None:
    """Every edge endpoint must name an existing node."""
    for edge in edges:
        for end in ("source", "target"):
            ref = edge.get(end)
            if ref not in node_ids:
                raise MalformedSnapshotError(
                    f"Edge {edge['id']!r} {end} {ref!r} does not name a node",
                    item_id=edge["id"],
                )
