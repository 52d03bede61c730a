"""Rescale layout: stretch existing positions to a new canvas size.

Meant as a relayout function, e.g. on window resize, where recomputing a
force layout would be wasteful. Nodes keep their relative arrangement but
are moved to fill the padded canvas, ignoring whatever empty margin the
previous layout left.
"""

from __future__ import annotations

from algoviz.config import LayoutConfig
from algoviz.layout.base import LayoutFunction, LayoutInput, LayoutParams, LayoutResult, MergeMode


def _remap(value: float, low: float, high: float, size: float, padding: float) -> float:
    if high == low:
        return value
    return (size - 2 * padding) * (value - low) / (high - low) + padding


def rescale_layout(config: LayoutConfig | None = None) -> LayoutFunction:
    """Create a layout function that maps positioned nodes into the canvas.

    Unpositioned nodes are ignored. If the canvas has not changed since the
    last applied layout, nothing moves. An axis on which every node has the
    same coordinate is left as is.

    Args:
        config: Layout constants (rescale padding 60)
    """
    cfg = config or LayoutConfig()

    def rescale(layout_input: LayoutInput, params: LayoutParams) -> LayoutResult:
        result = LayoutResult(mode=MergeMode.OVERWRITE)
        if layout_input.previous == params:
            return result

        placed = [n for n in layout_input.nodes if n.positioned]
        if not placed:
            return result

        min_x = min(n.x for n in placed)
        max_x = max(n.x for n in placed)
        min_y = min(n.y for n in placed)
        max_y = max(n.y for n in placed)
        pad = cfg.rescale_padding

        for node in placed:
            result.positions[node.id] = (
                _remap(node.x, min_x, max_x, params.width, pad),
                _remap(node.y, min_y, max_y, params.height, pad),
            )
        return result

    return rescale
