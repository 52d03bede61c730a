"""Layout contract shared by all layout algorithms.

A layout function never touches the live Graph. It receives a
``LayoutInput`` (an immutable view of ids, current positions and edge
endpoints) and returns a sparse ``LayoutResult``. ``GraphLayout`` merges the
result into the graph, which is the only place layout output reaches the
shared model.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from algoviz.graph.core import Graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutParams:
    """Canvas size every layout call must respect."""

    width: float
    height: float


@dataclass(frozen=True)
class NodeView:
    """Read-only position of a node as seen by a layout function."""

    id: Any
    x: float | None = None
    y: float | None = None

    @property
    def positioned(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass(frozen=True)
class EdgeView:
    """Read-only edge endpoints (node ids) as seen by a layout function."""

    id: Any
    source: Any
    target: Any


@dataclass(frozen=True)
class LayoutInput:
    """Immutable snapshot of everything a layout function may read.

    Attributes:
        nodes: Nodes in display order
        edges: Edges in display order
        previous: Params of the last layout applied to the graph, if any
    """

    nodes: tuple[NodeView, ...] = ()
    edges: tuple[EdgeView, ...] = ()
    previous: LayoutParams | None = None

    @classmethod
    def from_graph(cls, graph: Graph, previous: LayoutParams | None = None) -> LayoutInput:
        return cls(
            nodes=tuple(NodeView(n.id, n.x, n.y) for n in graph.nodes),
            edges=tuple(EdgeView(e.id, e.source.id, e.target.id) for e in graph.edges),
            previous=previous,
        )

    @property
    def positions(self) -> Mapping[Any, tuple[float | None, float | None]]:
        """Map of node id -> (x, y) as currently stored."""
        return MappingProxyType({n.id: (n.x, n.y) for n in self.nodes})


class MergeMode(Enum):
    """How ``LayoutResult.positions`` are written into the graph.

    Values:
        FILL_GAPS: Only coordinates that are still None are written.
        OVERWRITE: Every listed position replaces the current one.
    """

    FILL_GAPS = "fill_gaps"
    OVERWRITE = "overwrite"


@dataclass
class LayoutResult:
    """Sparse assignment produced by a layout function.

    Attributes:
        positions: Node id -> (x, y)
        node_styles: Node id -> style patch
        edge_styles: Edge id -> style patch
        mode: Merge rule for positions
        warnings: Degraded-layout notes (e.g. the graph is not a tree)
    """

    positions: dict[Any, tuple[float, float]] = field(default_factory=dict)
    node_styles: dict[Any, dict[str, Any]] = field(default_factory=dict)
    edge_styles: dict[Any, dict[str, Any]] = field(default_factory=dict)
    mode: MergeMode = MergeMode.OVERWRITE
    warnings: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not (self.positions or self.node_styles or self.edge_styles)

    def apply(self, graph: Graph) -> int:
        """Merge this result into ``graph``.

        Returns:
            Number of nodes whose position changed.
        """
        moved = 0
        for node_id, (x, y) in self.positions.items():
            node = graph.node(node_id)
            before = (node.x, node.y)
            if self.mode is MergeMode.FILL_GAPS:
                if node.x is None:
                    node.x = x
                if node.y is None:
                    node.y = y
            else:
                node.x, node.y = x, y
            if (node.x, node.y) != before:
                moved += 1

        for node_id, patch in self.node_styles.items():
            graph.set_style(node_id, patch)
        for edge_id, patch in self.edge_styles.items():
            graph.set_style(edge_id, patch)
        return moved


LayoutFunction = Callable[[LayoutInput, LayoutParams], LayoutResult]


class GraphLayout:
    """Pair of layout functions: one-time ``setup`` and subsequent ``relayout``.

    ``relayout`` defaults to ``setup``. Use a distinct relayout when the
    initial placement is expensive and resizing only needs to scale it.

    A run is never cancelled once started. Runs on the same GraphLayout are
    serialized, so a newer layout waits for the in-flight one to finish.

    Example:
        >>> layout = GraphLayout(force_layout())
        >>> layout = GraphLayout(force_layout(), rescale_layout())
    """

    def __init__(self, setup: LayoutFunction, relayout: LayoutFunction | None = None) -> None:
        self._setup = setup
        self._relayout = relayout or setup
        self._params: LayoutParams | None = None
        self._lock = asyncio.Lock()

    @property
    def params(self) -> LayoutParams | None:
        """Params of the last completed layout run."""
        return self._params

    def reset(self) -> None:
        """Forget the last applied params (used when the graph is replaced)."""
        self._params = None

    async def setup(self, graph: Graph, params: LayoutParams) -> LayoutResult:
        """Perform the initial layout, right before first display."""
        return await self._run(self._setup, graph, params)

    async def relayout(self, graph: Graph, params: LayoutParams) -> LayoutResult:
        """Lay the graph out again after a graph or canvas change."""
        return await self._run(self._relayout, graph, params)

    async def _run(self, fn: LayoutFunction, graph: Graph, params: LayoutParams) -> LayoutResult:
        async with self._lock:
            # Yield once so the caller's pending work (e.g. DOM creation) runs first.
            await asyncio.sleep(0)
            started = time.perf_counter()
            result = fn(LayoutInput.from_graph(graph, self._params), params)
            moved = result.apply(graph)
            self._params = params
            for warning in result.warnings:
                logger.warning("Degraded layout: %s", warning)
            logger.debug(
                "%s moved %d nodes in %.1fms",
                getattr(fn, "__name__", type(fn).__name__),
                moved,
                (time.perf_counter() - started) * 1000,
            )
            return result
