"""Layout algorithms assigning 2D coordinates to graph nodes.

Usage:
    layout = GraphLayout(force_layout(), rescale_layout())
    await layout.setup(graph, LayoutParams(800, 600))
    await layout.relayout(graph, LayoutParams(1024, 768))
"""

from algoviz.layout.base import (
    EdgeView,
    GraphLayout,
    LayoutFunction,
    LayoutInput,
    LayoutParams,
    LayoutResult,
    MergeMode,
    NodeView,
)
from algoviz.layout.edges import edge_endpoint_styles, find_reciprocal_pairs
from algoviz.layout.force import ForceSimulation, force_layout
from algoviz.layout.rescale import rescale_layout
from algoviz.layout.tree import Hierarchy, SkippedEdge, build_hierarchy, tree_layout

__all__ = [
    "EdgeView",
    "ForceSimulation",
    "GraphLayout",
    "Hierarchy",
    "LayoutFunction",
    "LayoutInput",
    "LayoutParams",
    "LayoutResult",
    "MergeMode",
    "NodeView",
    "SkippedEdge",
    "build_hierarchy",
    "edge_endpoint_styles",
    "find_reciprocal_pairs",
    "force_layout",
    "rescale_layout",
    "tree_layout",
]
