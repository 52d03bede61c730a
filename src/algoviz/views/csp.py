"""Constraint graph view.

Variables and constraints are nodes; each edge joins a variable to a
constraint it takes part in. Clicking an edge asks the controller to check
that arc, clicking a node selects the variable. The graph is force-laid
once and rescaled on resize.
"""

from __future__ import annotations

from typing import Any

from algoviz.config import LayoutConfig
from algoviz.events.types import (
    ArcClickEvent,
    ArcStyle,
    HighlightArcsEvent,
    InboundEvent,
    OutboundEvent,
    VarClickEvent,
)
from algoviz.graph.core import GraphNode, NodeType
from algoviz.layout.base import GraphLayout
from algoviz.layout.force import force_layout
from algoviz.layout.rescale import rescale_layout
from algoviz.views.base import GraphView, is_variable


class CSPView(GraphView):
    """Force-laid constraint graph with arc and variable selection.

    Resizing rescales the settled positions into the new canvas.
    """

    def make_layout(self, config: LayoutConfig) -> GraphLayout:
        return GraphLayout(force_layout(config), rescale_layout(config))

    def bootstrap_events(self) -> list[InboundEvent]:
        return [HighlightArcsEvent(arc_ids=None, colour="blue", style=ArcStyle.NORMAL)]

    def node_shape(self, node: GraphNode) -> str:
        return "rect" if node.type is NodeType.CONSTRAINT else "ellipse"

    def node_label(self, node: GraphNode) -> tuple[str, ...]:
        if node.domain is None:
            return (node.name,)
        return (node.name, "{" + ", ".join(str(v) for v in node.domain) + "}")

    def click_edge(self, edge_id: Any) -> OutboundEvent:
        edge = self.graph.edge(edge_id)
        variable, constraint = edge.source, edge.target
        if not is_variable(variable) and is_variable(constraint):
            variable, constraint = constraint, variable
        return self._send(
            ArcClickEvent(
                constraint_id=constraint.attrs.get("idx", constraint.id),
                var_name=variable.name,
            )
        )

    def click_node(self, node_id: Any) -> OutboundEvent:
        return self._send(VarClickEvent(var_name=self.graph.node(node_id).name))
