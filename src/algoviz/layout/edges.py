"""Edge endpoint geometry for drawn edges.

Two edges joining the same pair of nodes in opposite directions would be
drawn on top of each other. Such a pair is "overlapped": each edge is shifted
perpendicular to the line between the nodes, one to each side, so the pair
renders as two parallel lines.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from algoviz.layout.base import EdgeView


def find_reciprocal_pairs(edges: Iterable[EdgeView]) -> list[tuple[EdgeView, EdgeView]]:
    """Find edges that have a matching edge in the opposite direction.

    Each edge belongs to at most one pair. Pairs are returned in the order
    their first edge appears, and the first element of a pair is always the
    earlier edge. Self loops never pair.

    Example:
        >>> ab = EdgeView("e1", "a", "b")
        >>> ba = EdgeView("e2", "b", "a")
        >>> [(p.id, q.id) for p, q in find_reciprocal_pairs([ab, ba])]
        [('e1', 'e2')]
    """
    waiting: dict[tuple[Any, Any], list[EdgeView]] = {}
    pairs = []
    for edge in edges:
        if edge.source == edge.target:
            continue
        partners = waiting.get((edge.target, edge.source))
        if partners:
            pairs.append((partners.pop(0), edge))
        else:
            waiting.setdefault((edge.source, edge.target), []).append(edge)
    return pairs


def edge_endpoint_styles(
    edges: Iterable[EdgeView],
    positions: Mapping[Any, tuple[float | None, float | None]],
    offset: float = 5.0,
) -> dict[Any, dict[str, Any]]:
    """Compute drawn endpoints for every edge whose nodes are positioned.

    Args:
        edges: Edges in display order
        positions: Node id -> (x, y)
        offset: Perpendicular shift applied to each edge of an overlapped pair

    Returns:
        Edge id -> style patch with ``x1``, ``y1``, ``x2``, ``y2`` and
        ``overlapped``.
    """
    edges = list(edges)
    patches: dict[Any, dict[str, Any]] = {}
    for edge in edges:
        (xa, ya), (xb, yb) = positions[edge.source], positions[edge.target]
        if None in (xa, ya, xb, yb):
            continue
        patches[edge.id] = {"x1": xa, "y1": ya, "x2": xb, "y2": yb, "overlapped": False}

    for first, second in find_reciprocal_pairs(edges):
        if first.id not in patches or second.id not in patches:
            continue
        (xa, ya), (xb, yb) = positions[first.source], positions[first.target]
        length = math.hypot(xb - xa, yb - ya)
        patches[first.id]["overlapped"] = True
        patches[second.id]["overlapped"] = True
        if length == 0:
            continue
        cos = (yb - ya) / length
        sin = (xb - xa) / length
        patches[first.id].update(
            x1=xa - cos * offset,
            y1=ya + sin * offset,
            x2=xb - cos * offset,
            y2=yb + sin * offset,
        )
        patches[second.id].update(
            x1=xb + cos * offset,
            y1=yb - sin * offset,
            x2=xa + cos * offset,
            y2=ya - sin * offset,
        )
    return patches
