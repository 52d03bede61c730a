"""Graph package - id-indexed node/edge model and snapshot validation."""

from algoviz.graph.core import Graph, GraphEdge, GraphItem, GraphNode, NodeType
from algoviz.graph.styles import EdgeStyles, NodeStyles
from algoviz.graph.validation import validate_snapshot

__all__ = [
    "EdgeStyles",
    "Graph",
    "GraphEdge",
    "GraphItem",
    "GraphNode",
    "NodeStyles",
    "NodeType",
    "validate_snapshot",
]
