"""Search graph view.

Nodes may carry a heuristic value ``h`` and edges a ``cost``. The graph is
force-laid once; resizing only rescales existing positions.
"""

from __future__ import annotations

from algoviz.config import LayoutConfig
from algoviz.graph.core import GraphEdge, GraphNode, NodeType
from algoviz.layout.base import GraphLayout
from algoviz.layout.force import force_layout
from algoviz.layout.rescale import rescale_layout
from algoviz.views.base import GraphView


def _format_number(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SearchView(GraphView):
    """Search problem graph with heuristic and cost labels."""

    def make_layout(self, config: LayoutConfig) -> GraphLayout:
        return GraphLayout(force_layout(config), rescale_layout(config))

    def node_shape(self, node: GraphNode) -> str:
        return "rect" if node.type in (NodeType.START, NodeType.GOAL) else "ellipse"

    def node_label(self, node: GraphNode) -> tuple[str, ...]:
        h = node.attrs.get("h")
        if h is None:
            return (node.name,)
        return (node.name, f"h: {_format_number(h)}")

    def edge_label(self, edge: GraphEdge) -> str | None:
        return _format_number(edge.cost) if edge.cost is not None else None
