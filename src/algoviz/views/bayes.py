"""Bayesian network view, laid out as a tree from the first variable."""

from __future__ import annotations

from typing import Any

from algoviz.config import LayoutConfig
from algoviz.events.types import OutboundEvent, VarClickEvent
from algoviz.graph.core import GraphNode
from algoviz.layout.base import GraphLayout
from algoviz.layout.tree import tree_layout
from algoviz.views.base import GraphView


class BayesView(GraphView):
    """Layered Bayesian network; clicking a variable selects it for a query."""

    def make_layout(self, config: LayoutConfig) -> GraphLayout:
        return GraphLayout(tree_layout(config=config))

    def node_label(self, node: GraphNode) -> tuple[str, ...]:
        observed = node.attrs.get("observed")
        if observed is None:
            return (node.name,)
        return (node.name, f"= {observed}")

    def click_node(self, node_id: Any) -> OutboundEvent:
        return self._send(VarClickEvent(var_name=self.graph.node(node_id).name))
