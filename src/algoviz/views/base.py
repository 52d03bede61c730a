"""Base view: owns a Graph, its layout and its protocol.

A view translates model state into renderable props and user gestures into
outbound protocol events. Concrete views choose the layout, the bootstrap
defaults, the labels and which gestures reach the controller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from algoviz.config import AlgovizConfig, LayoutConfig
from algoviz.events.protocol import DomainSplitPrompt, InteractionProtocol, ViewState
from algoviz.events.types import (
    AutoStepClickEvent,
    FineStepClickEvent,
    InboundEvent,
    OutboundEvent,
    StepClickEvent,
)
from algoviz.exceptions import UnknownIdError
from algoviz.graph.core import Graph, GraphEdge, GraphNode, NodeType
from algoviz.layout.base import GraphLayout, LayoutParams
from algoviz.layout.force import force_layout

if TYPE_CHECKING:
    from algoviz.events.channel import Channel
    from algoviz.views.widget import GraphWidget

logger = logging.getLogger(__name__)

DEFAULT_STROKE = "black"
DEFAULT_NODE_STROKE_WIDTH = 1
DEFAULT_EDGE_STROKE_WIDTH = 4
DEFAULT_RADIUS = 30


@dataclass(frozen=True)
class RenderedNode:
    """Geometry and style of a node, ready for drawing."""

    id: Any
    x: float | None
    y: float | None
    radius: float
    stroke: str
    stroke_width: float
    shape: str
    type: str
    label: tuple[str, ...]


@dataclass(frozen=True)
class RenderedEdge:
    """Drawn endpoints and style of an edge."""

    id: Any
    source: Any
    target: Any
    x1: float | None
    y1: float | None
    x2: float | None
    y2: float | None
    stroke: str
    stroke_width: float
    overlapped: bool
    label: str | None = None


@dataclass(frozen=True)
class GraphProps:
    """Everything a renderer needs to draw one frame of a view."""

    width: float
    height: float
    nodes: tuple[RenderedNode, ...]
    edges: tuple[RenderedEdge, ...]
    output: str | None = None

    def node(self, node_id: Any) -> RenderedNode:
        """Rendered node with this id.

        Raises:
            UnknownIdError: If no rendered node has this id
        """
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise UnknownIdError(node_id, expected="node")

    def edge(self, edge_id: Any) -> RenderedEdge:
        """Rendered edge with this id.

        Raises:
            UnknownIdError: If no rendered edge has this id
        """
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        raise UnknownIdError(edge_id, expected="edge")


class GraphView:
    """A displayed graph kept in sync with an algorithm controller.

    Args:
        snapshot: Initial graph snapshot (``{"nodes": [...], "edges": [...]}``)
        channel: Outbound transport to the controller
        width: Canvas width; defaults to the configured width
        height: Canvas height; defaults to the configured height
        state: Persisted view state, shared by re-renders of the same view
        prompt: Domain split prompt passed to the protocol
        config: Canvas and layout configuration
        strict: Raise on bad inbound messages instead of dropping them

    Raises:
        MalformedSnapshotError: If the snapshot cannot be turned into a Graph
    """

    def __init__(
        self,
        snapshot: Mapping[str, Any],
        channel: Channel,
        *,
        width: float | None = None,
        height: float | None = None,
        state: ViewState | None = None,
        prompt: DomainSplitPrompt | None = None,
        config: AlgovizConfig | None = None,
        strict: bool = False,
    ) -> None:
        self.config = config or AlgovizConfig()
        self.snapshot = snapshot
        self.graph = Graph.from_snapshot(snapshot)
        self.params = LayoutParams(
            width if width is not None else self.config.width,
            height if height is not None else self.config.height,
        )
        self.layout = self.make_layout(self.config.layout)
        # Set only by a completed setup run; relayout never places new nodes.
        self._laid_out = False
        self.protocol = InteractionProtocol(self.graph, channel, state=state, prompt=prompt, strict=strict)

    @property
    def state(self) -> ViewState:
        return self.protocol.state

    # =========================================================================
    # Customization points
    # =========================================================================

    def make_layout(self, config: LayoutConfig) -> GraphLayout:
        return GraphLayout(force_layout(config))

    def bootstrap_events(self) -> list[InboundEvent]:
        """Events applied locally the first time the view is displayed."""
        return []

    def node_label(self, node: GraphNode) -> tuple[str, ...]:
        return (node.name,)

    def edge_label(self, edge: GraphEdge) -> str | None:
        return None

    def node_shape(self, node: GraphNode) -> str:
        return "circle"

    def click_node(self, node_id: Any) -> OutboundEvent | None:
        """Handle a click on a node. Returns the event sent, if any."""
        return None

    def click_edge(self, edge_id: Any) -> OutboundEvent | None:
        """Handle a click on an edge. Returns the event sent, if any."""
        return None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def render(self) -> GraphProps:
        """Display the view.

        Defers one scheduling tick so the host container exists, lays the
        graph out the first time only, and sends the bootstrap if this state
        has never been rendered.
        """
        await asyncio.sleep(0)
        if not self._laid_out:
            await self._setup()
        self.protocol.bootstrap(self.bootstrap_events())
        return self.props()

    async def resize(self, width: float, height: float) -> GraphProps:
        """Re-layout for a new canvas size.

        A view that has not been laid out yet gets its initial layout at the
        new size instead.
        """
        self.params = LayoutParams(width, height)
        if self._laid_out:
            await self.layout.relayout(self.graph, self.params)
        else:
            await self._setup()
        return self.props()

    async def _setup(self) -> None:
        await self.layout.setup(self.graph, self.params)
        self._laid_out = True

    def reset(self, snapshot: Mapping[str, Any] | None = None) -> None:
        """Replace the graph with a fresh one and forget the bootstrap.

        Positions of the old graph are discarded, and so are controller
        messages still buffered behind a pending domain split, since they
        target the old graph. The pending split itself stays open until it
        is answered.
        """
        if snapshot is not None:
            self.snapshot = snapshot
        self.graph = Graph.from_snapshot(self.snapshot)
        self.protocol.graph = self.graph
        self.protocol.output = None
        dropped = self.protocol.discard_backlog()
        self.layout.reset()
        self._laid_out = False
        self.state.reset()
        logger.debug("View reset with %r (%d buffered messages dropped)", self.graph, dropped)

    async def receive(self, message: Any) -> None:
        """Deliver a controller message to this view."""
        await self.protocol.dispatch(message)

    # =========================================================================
    # Gestures
    # =========================================================================

    def click_fine_step(self) -> OutboundEvent:
        return self._send(FineStepClickEvent())

    def click_step(self) -> OutboundEvent:
        return self._send(StepClickEvent())

    def click_auto_step(self) -> OutboundEvent:
        return self._send(AutoStepClickEvent())

    def _send(self, event: OutboundEvent) -> OutboundEvent:
        self.protocol.send(event)
        return event

    # =========================================================================
    # Props
    # =========================================================================

    def props(self) -> GraphProps:
        """Build renderable props from the current graph state."""
        nodes = tuple(self._render_node(node) for node in self.graph.nodes)
        edges = tuple(self._render_edge(edge) for edge in self.graph.edges)
        return GraphProps(
            width=self.params.width,
            height=self.params.height,
            nodes=nodes,
            edges=edges,
            output=self.protocol.output,
        )

    def _render_node(self, node: GraphNode) -> RenderedNode:
        styles = node.styles
        return RenderedNode(
            id=node.id,
            x=node.x,
            y=node.y,
            radius=styles.radius if styles.radius is not None else DEFAULT_RADIUS,
            stroke=styles.stroke or DEFAULT_STROKE,
            stroke_width=styles.stroke_width if styles.stroke_width is not None else DEFAULT_NODE_STROKE_WIDTH,
            shape=self.node_shape(node),
            type=node.type.value,
            label=self.node_label(node),
        )

    def _render_edge(self, edge: GraphEdge) -> RenderedEdge:
        styles = edge.styles
        if styles.overlapped and styles.x1 is not None:
            x1, y1, x2, y2 = styles.x1, styles.y1, styles.x2, styles.y2
        else:
            x1, y1 = edge.source.x, edge.source.y
            x2, y2 = edge.target.x, edge.target.y
        return RenderedEdge(
            id=edge.id,
            source=edge.source.id,
            target=edge.target.id,
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            stroke=styles.stroke or DEFAULT_STROKE,
            stroke_width=styles.stroke_width if styles.stroke_width is not None else DEFAULT_EDGE_STROKE_WIDTH,
            overlapped=bool(styles.overlapped),
            label=self.edge_label(edge),
        )

    def widget(self) -> GraphWidget:
        """Return a notebook widget drawing the current props."""
        from algoviz.views.widget import GraphWidget

        return GraphWidget(self.props())


def is_variable(node: GraphNode) -> bool:
    return node.type is NodeType.VARIABLE
