"""Graph class for algoviz."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

import networkx as nx

from algoviz.exceptions import MalformedSnapshotError, StyleFieldError, UnknownIdError
from algoviz.graph.styles import EdgeStyles, NodeStyles
from algoviz.graph.validation import validate_snapshot

logger = logging.getLogger(__name__)

# Snapshot keys that map onto GraphNode/GraphEdge fields. Everything else is
# algorithm-specific and lands in ``attrs``.
_NODE_KEYS = frozenset({"id", "name", "x", "y", "domain", "type", "styles"})
_EDGE_KEYS = frozenset({"id", "source", "target", "cost", "styles", "name"})


class NodeType(Enum):
    """Tag describing what a node stands for in the visualized algorithm."""

    START = "start"
    GOAL = "goal"
    VARIABLE = "variable"
    CONSTRAINT = "constraint"
    FACTOR = "factor"
    PLAIN = "plain"

    @classmethod
    def parse(cls, value: Any) -> NodeType:
        """Coerce a snapshot value; unknown or missing tags become PLAIN."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.PLAIN


@dataclass(eq=False)
class GraphNode:
    """A node of the visualized graph.

    Attributes:
        id: Stable id assigned by the snapshot source
        name: Display label
        x: Horizontal position, None until a layout places the node
        y: Vertical position, None until a layout places the node
        domain: Admissible values (variable nodes only)
        type: What the node stands for
        styles: Mutable visual attributes
        attrs: Algorithm-specific fields (idx, h, observed, ...)
    """

    id: Any
    name: str
    x: float | None = None
    y: float | None = None
    domain: list[Any] | None = None
    type: NodeType = NodeType.PLAIN
    styles: NodeStyles = field(default_factory=NodeStyles)
    attrs: dict[str, Any] = field(default_factory=dict)

    @property
    def positioned(self) -> bool:
        """True once both coordinates are assigned."""
        return self.x is not None and self.y is not None


@dataclass(eq=False)
class GraphEdge:
    """A directed edge between two nodes of the same graph."""

    id: Any
    source: GraphNode
    target: GraphNode
    cost: float | None = None
    name: str | None = None
    styles: EdgeStyles = field(default_factory=EdgeStyles)
    attrs: dict[str, Any] = field(default_factory=dict)


GraphItem = Union[GraphNode, GraphEdge]


class Graph:
    """Id-indexed store of nodes and edges shared by a view and its layouts.

    The node and edge lists keep snapshot order, which is also display order.
    ``id_map`` always holds exactly the current node ids and edge ids, pointing
    at the live objects. Nodes and edges are never removed; only their
    positions, domains and styles change.

    Example:
        >>> g = Graph.from_snapshot({
        ...     "nodes": [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}],
        ...     "edges": [{"id": "ab", "source": "a", "target": "b"}],
        ... })
        >>> g.lookup("ab").target.name
        'B'
    """

    def __init__(self, nodes: Iterable[GraphNode] = (), edges: Iterable[GraphEdge] = ()) -> None:
        self.nodes: list[GraphNode] = []
        self.edges: list[GraphEdge] = []
        self._id_map: dict[Any, GraphItem] = {}
        for node in nodes:
            self._add(node, self.nodes)
        for edge in edges:
            for end in (edge.source, edge.target):
                if self._id_map.get(end.id) is not end:
                    raise MalformedSnapshotError(
                        f"Edge {edge.id!r} references node {end.id!r} outside this graph",
                        item_id=edge.id,
                    )
            self._add(edge, self.edges)

    def _add(self, item: GraphItem, bucket: list) -> None:
        if item.id in self._id_map:
            raise MalformedSnapshotError(f"Duplicate id {item.id!r}", item_id=item.id)
        bucket.append(item)
        self._id_map[item.id] = item

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any]) -> Graph:
        """Build a graph from a decoded snapshot.

        Args:
            snapshot: ``{"nodes": [...], "edges": [...]}``; edge ``source`` and
                ``target`` are node ids.

        Raises:
            MalformedSnapshotError: On dangling references or duplicate ids
        """
        validate_snapshot(snapshot)

        nodes = [_node_from_json(item) for item in snapshot["nodes"]]
        by_id = {node.id: node for node in nodes}
        edges = [_edge_from_json(item, by_id) for item in snapshot["edges"]]
        graph = cls(nodes, edges)
        logger.debug("Built graph with %d nodes and %d edges", len(nodes), len(edges))
        return graph

    @classmethod
    def from_json(cls, text: str | bytes) -> Graph:
        """Parse a JSON snapshot and build a graph from it."""
        try:
            snapshot = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedSnapshotError(f"Snapshot is not valid JSON: {e}") from e
        return cls.from_snapshot(snapshot)

    # =========================================================================
    # Lookup
    # =========================================================================

    @property
    def id_map(self) -> Mapping[Any, GraphItem]:
        """Read-only view of id -> node or edge."""
        return self._id_map

    def __contains__(self, item_id: Any) -> bool:
        return item_id in self._id_map

    def __len__(self) -> int:
        return len(self.nodes)

    def lookup(self, item_id: Any) -> GraphItem:
        """Return the node or edge with this id.

        Raises:
            UnknownIdError: If no node or edge has this id
        """
        try:
            return self._id_map[item_id]
        except (KeyError, TypeError):
            raise UnknownIdError(item_id) from None

    def node(self, node_id: Any) -> GraphNode:
        """Return the node with this id, rejecting edge ids."""
        item = self._id_map.get(node_id) if _hashable(node_id) else None
        if not isinstance(item, GraphNode):
            raise UnknownIdError(node_id, expected="node")
        return item

    def edge(self, edge_id: Any) -> GraphEdge:
        """Return the edge with this id, rejecting node ids."""
        item = self._id_map.get(edge_id) if _hashable(edge_id) else None
        if not isinstance(item, GraphEdge):
            raise UnknownIdError(edge_id, expected="edge")
        return item

    # =========================================================================
    # Mutation
    # =========================================================================

    def set_domain(self, node_id: Any, values: Iterable[Any]) -> None:
        """Replace a node's domain with a copy of ``values``."""
        self.node(node_id).domain = list(values)

    def set_style(self, item_id: Any, patch: Mapping[str, Any]) -> bool:
        """Merge a partial style patch into a node's or edge's styles.

        Fields not named in the patch keep their current value.

        Returns:
            True if any style value changed.
        """
        return self.lookup(item_id).styles.merge(patch)

    def set_position(self, node_id: Any, x: float | None, y: float | None) -> None:
        """Assign a node position."""
        node = self.node(node_id)
        node.x = x
        node.y = y

    # =========================================================================
    # Export
    # =========================================================================

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize the current state back to the snapshot shape."""
        nodes = []
        for node in self.nodes:
            data: dict[str, Any] = {"id": node.id, "name": node.name, "type": node.type.value}
            if node.x is not None:
                data["x"] = node.x
            if node.y is not None:
                data["y"] = node.y
            if node.domain is not None:
                data["domain"] = list(node.domain)
            styles = node.styles.to_dict(camel=True)
            if styles:
                data["styles"] = styles
            data.update(node.attrs)
            nodes.append(data)

        edges = []
        for edge in self.edges:
            data = {"id": edge.id, "source": edge.source.id, "target": edge.target.id}
            if edge.cost is not None:
                data["cost"] = edge.cost
            if edge.name is not None:
                data["name"] = edge.name
            styles = edge.styles.to_dict(camel=True)
            if styles:
                data["styles"] = styles
            data.update(edge.attrs)
            edges.append(data)

        return {"nodes": nodes, "edges": edges}

    def to_nx(self) -> nx.MultiDiGraph:
        """Export the structure as a NetworkX multigraph keyed by ids.

        Node attributes: ``name``, ``type``, ``x``, ``y``. Edge keys are the
        edge ids.
        """
        g = nx.MultiDiGraph()
        for node in self.nodes:
            g.add_node(node.id, name=node.name, type=node.type.value, x=node.x, y=node.y)
        for edge in self.edges:
            g.add_edge(edge.source.id, edge.target.id, key=edge.id, cost=edge.cost)
        return g

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)})"


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _optional_float(value: Any, *, field_name: str, item_id: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedSnapshotError(
            f"Field '{field_name}' of {item_id!r} must be a number, got {value!r}",
            item_id=item_id,
        ) from None


def _styles_from_json(styles_cls: type, raw: Any, item_id: Any):
    styles = styles_cls()
    if raw:
        if not isinstance(raw, Mapping):
            raise MalformedSnapshotError(f"Styles of {item_id!r} must be an object", item_id=item_id)
        try:
            styles.merge(raw)
        except StyleFieldError as e:
            raise MalformedSnapshotError(str(e), item_id=item_id) from e
        styles.version = 0
    return styles


def _node_from_json(item: Mapping[str, Any]) -> GraphNode:
    node_id = item["id"]
    domain = item.get("domain")
    if domain is not None and not isinstance(domain, (list, tuple)):
        raise MalformedSnapshotError(f"Domain of {node_id!r} must be a list", item_id=node_id)
    return GraphNode(
        id=node_id,
        name=str(item.get("name", node_id)),
        x=_optional_float(item.get("x"), field_name="x", item_id=node_id),
        y=_optional_float(item.get("y"), field_name="y", item_id=node_id),
        domain=list(domain) if domain is not None else None,
        type=NodeType.parse(item.get("type")),
        styles=_styles_from_json(NodeStyles, item.get("styles"), node_id),
        attrs={k: v for k, v in item.items() if k not in _NODE_KEYS},
    )


def _edge_from_json(item: Mapping[str, Any], nodes: Mapping[Any, GraphNode]) -> GraphEdge:
    edge_id = item["id"]
    name = item.get("name")
    return GraphEdge(
        id=edge_id,
        source=nodes[item["source"]],
        target=nodes[item["target"]],
        cost=_optional_float(item.get("cost"), field_name="cost", item_id=edge_id),
        name=str(name) if name is not None else None,
        styles=_styles_from_json(EdgeStyles, item.get("styles"), edge_id),
        attrs={k: v for k, v in item.items() if k not in _EDGE_KEYS},
    )
