"""Tree layout: nodes of the same depth share a horizontal level.

The graph is first reduced to a tree rooted at a chosen node. Edges are
taken in display order and each one attaches its target under its source,
unless that would give the target a second parent, close a cycle, or repeat
a parent/child pair in reverse. Skipped edges are reported as warnings on the
result (the layout is degraded, not failed), except reverse duplicates of a
pair which are expected for bidirectional edges.

The tree is then placed in normalized coordinates and mapped onto the
canvas: depth levels on evenly spaced horizontal bands, and siblings of a
level spread left to right with a shared radius so they never overlap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from algoviz.config import LayoutConfig
from algoviz.layout.base import LayoutFunction, LayoutInput, LayoutParams, LayoutResult, MergeMode
from algoviz.layout.edges import edge_endpoint_styles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedEdge:
    """An edge that did not become a parent/child link.

    Attributes:
        edge_id: Id of the skipped edge
        source: Source node id
        target: Target node id
        reason: "reciprocal", "second-parent", "cycle" or "self-loop"
    """

    edge_id: Any
    source: Any
    target: Any
    reason: str

    @property
    def degrades(self) -> bool:
        """True if skipping this edge means the graph is not a tree."""
        return self.reason != "reciprocal"


@dataclass
class Hierarchy:
    """Rooted tree extracted from a graph.

    Attributes:
        root: Root node id
        tree: Parent -> child links; successor order follows edge order
        skipped: Edges that were not used as tree links
        unreached: Node ids not reachable from the root
    """

    root: Any
    tree: nx.DiGraph
    skipped: list[SkippedEdge] = field(default_factory=list)
    unreached: list[Any] = field(default_factory=list)

    def parent(self, node_id: Any) -> Any | None:
        preds = list(self.tree.predecessors(node_id)) if node_id in self.tree else []
        return preds[0] if preds else None

    def levels(self) -> list[list[Any]]:
        """Node ids grouped by depth, each level in breadth-first order."""
        return [list(level) for level in nx.bfs_layers(self.tree, [self.root])]

    def breadth(self) -> dict[Any, float]:
        """Normalized (0..1) horizontal coordinate of every reachable node.

        Leaves are spaced evenly in depth-first order; a parent sits midway
        between its first and last child.
        """
        leaves = [n for n in nx.dfs_preorder_nodes(self.tree, self.root) if self.tree.out_degree(n) == 0]
        slots = {leaf: (i + 0.5) / len(leaves) for i, leaf in enumerate(leaves)}
        result: dict[Any, float] = {}
        for node_id in nx.dfs_postorder_nodes(self.tree, self.root):
            children = list(self.tree.successors(node_id))
            if children:
                result[node_id] = (result[children[0]] + result[children[-1]]) / 2
            else:
                result[node_id] = slots[node_id]
        return result


def build_hierarchy(layout_input: LayoutInput, root_id: Any = None) -> Hierarchy:
    """Reduce a graph to a tree rooted at ``root_id`` (or the first node).

    Every node has at most one parent, and the root has none. An unknown
    ``root_id`` falls back to the first node.

    Raises:
        ValueError: If the graph has no nodes
    """
    if not layout_input.nodes:
        raise ValueError("Cannot build a hierarchy from an empty graph")

    node_ids = [n.id for n in layout_input.nodes]
    root = root_id if root_id in set(node_ids) else node_ids[0]

    tree = nx.DiGraph()
    tree.add_node(root)
    hierarchy = Hierarchy(root=root, tree=tree)
    attached = {root}

    for edge in layout_input.edges:
        source, target = edge.source, edge.target
        reason = None
        if source == target:
            reason = "self-loop"
        elif tree.has_edge(target, source):
            reason = "reciprocal"
        elif target in attached:
            reason = "second-parent"
        elif target in tree and source in tree and nx.has_path(tree, target, source):
            reason = "cycle"

        if reason is not None:
            hierarchy.skipped.append(SkippedEdge(edge.id, source, target, reason))
            logger.debug("Tree layout skipped edge %r (%s)", edge.id, reason)
            continue

        tree.add_edge(source, target)
        attached.add(target)

    reachable = nx.descendants(tree, root) | {root}
    hierarchy.unreached = [n for n in node_ids if n not in reachable]
    tree.remove_nodes_from([n for n in list(tree) if n not in reachable])
    return hierarchy


def tree_layout(root_id: Any = None, config: LayoutConfig | None = None) -> LayoutFunction:
    """Create a layout function that places the graph as a layered tree.

    Args:
        root_id: Id of the root node. Defaults to the first node; an id that
            is not in the graph also falls back to the first node.
        config: Layout constants (max radius 50, node gap 15, edge offset 5)

    Returns:
        A layout function that overwrites positions of every node reachable
        from the root, sets their radius, and computes edge endpoints.
    """
    cfg = config or LayoutConfig()

    def tree(layout_input: LayoutInput, params: LayoutParams) -> LayoutResult:
        result = LayoutResult(mode=MergeMode.OVERWRITE)
        if not layout_input.nodes:
            return result

        hierarchy = build_hierarchy(layout_input, root_id)
        if root_id is not None and hierarchy.root != root_id:
            result.warnings.append(f"root {root_id!r} not found, using {hierarchy.root!r}")
        _place(hierarchy, params, cfg, result)

        for skipped in hierarchy.skipped:
            if skipped.degrades:
                result.warnings.append(
                    f"graph is not a tree: edge {skipped.edge_id!r} "
                    f"({skipped.source!r} -> {skipped.target!r}) skipped as {skipped.reason}"
                )
        if hierarchy.unreached:
            result.warnings.append(
                f"{len(hierarchy.unreached)} node(s) unreachable from root {hierarchy.root!r} left unplaced"
            )

        positions = dict(layout_input.positions)
        positions.update(result.positions)
        result.edge_styles = edge_endpoint_styles(layout_input.edges, positions, cfg.edge_offset)
        return result

    return tree


def _place(hierarchy: Hierarchy, params: LayoutParams, cfg: LayoutConfig, result: LayoutResult) -> None:
    levels = hierarchy.levels()
    breadth = hierarchy.breadth()
    max_depth = len(levels) - 1

    # Shallow trees use bands instead of stretching to the full height.
    band = params.height / (max_depth + 2)

    for depth, level in enumerate(levels):
        depth_norm = depth / max_depth if max_depth else 0.0
        y = depth_norm * (params.height - 2 * band) + band

        radius = params.width / len(level) / 2 - cfg.node_gap
        for i, node_id in enumerate(level):
            if radius <= 0:
                # Too many siblings to fit: minimum radius, tree breadth for x.
                result.positions[node_id] = (breadth[node_id] * params.width, y)
                result.node_styles[node_id] = {"radius": 1}
            else:
                result.positions[node_id] = ((2 * i + 1) * (radius + cfg.node_gap), y)
                result.node_styles[node_id] = {"radius": min(cfg.max_radius, radius)}
