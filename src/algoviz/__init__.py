"""algoviz - interactive node/edge views of algorithm state for notebooks."""

from algoviz.config import AlgovizConfig, LayoutConfig, load_config
from algoviz.events import (
    ArcClickEvent,
    ChooseDomainSplitEvent,
    DomainSplitReplyEvent,
    HighlightArcsEvent,
    HighlightNodesEvent,
    InitialRenderEvent,
    InteractionProtocol,
    MemoryChannel,
    OutputEvent,
    SetDomainsEvent,
    VarClickEvent,
    ViewState,
)
from algoviz.exceptions import (
    AlgovizError,
    DomainSplitPendingError,
    MalformedSnapshotError,
    ProtocolShapeError,
    StyleFieldError,
    UnknownIdError,
)
from algoviz.graph import EdgeStyles, Graph, GraphEdge, GraphNode, NodeStyles, NodeType
from algoviz.layout import GraphLayout, LayoutParams, force_layout, rescale_layout, tree_layout
from algoviz.views import BayesView, CSPView, GraphView, GraphWidget, SearchView

__all__ = [
    # Graph
    "Graph",
    "GraphNode",
    "GraphEdge",
    "NodeType",
    "NodeStyles",
    "EdgeStyles",
    # Layout
    "GraphLayout",
    "LayoutParams",
    "force_layout",
    "tree_layout",
    "rescale_layout",
    # Protocol
    "InteractionProtocol",
    "ViewState",
    "MemoryChannel",
    "HighlightArcsEvent",
    "HighlightNodesEvent",
    "SetDomainsEvent",
    "ChooseDomainSplitEvent",
    "OutputEvent",
    "ArcClickEvent",
    "VarClickEvent",
    "DomainSplitReplyEvent",
    "InitialRenderEvent",
    # Views
    "GraphView",
    "CSPView",
    "SearchView",
    "BayesView",
    "GraphWidget",
    # Config
    "AlgovizConfig",
    "LayoutConfig",
    "load_config",
    # Errors
    "AlgovizError",
    "MalformedSnapshotError",
    "UnknownIdError",
    "ProtocolShapeError",
    "DomainSplitPendingError",
    "StyleFieldError",
]
