"""Layout calculation for the visible part of a dependency graph.

Positions are computed only for nodes reachable under the current
expansion state and visibility filter. The depth used for columns is a
local depth measured by the visibility walk itself, which can differ
from the resolver's first-discovery depth once expansion changes.

All walks are iterative DFS over dependency order, visit each node at
most once and are therefore bounded by O(V + E) even on cyclic graphs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple

from assetgraph.config.schema import LayoutConfig
from assetgraph.graph.core.graph import DependencyGraph
from assetgraph.graph.filters import FilterSettings
from assetgraph.graph.models.schema import AssetNode
from assetgraph.graph.view import Position, ViewState

logger = logging.getLogger("assetgraph.layout.engine")


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box of laid-out node rectangles."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Position:
        return Position((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)


class GraphLayout:
    """Hierarchical (column per depth) and radial layouts.

    The layout never touches graph structure; results are returned and,
    when a ViewState is supplied, stored in it.
    """

    def __init__(self, config: Optional[LayoutConfig] = None) -> None:
        self.config = config or LayoutConfig()

    # ------------------------------------------------------------------
    # Node collection
    # ------------------------------------------------------------------

    def collect_all_nodes(self, graph: Optional[DependencyGraph]) -> List[AssetNode]:
        """Every node reachable from the root, ignoring expansion and filters."""
        if graph is None or graph.root is None:
            return []

        root = graph.root
        visited: Set[str] = {root.uid}
        result: List[AssetNode] = [root]
        stack: List[Iterator[AssetNode]] = [iter(graph.dependency_nodes(root))]
        while stack:
            try:
                node = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue
            if node.uid in visited:
                continue
            visited.add(node.uid)
            result.append(node)
            stack.append(iter(graph.dependency_nodes(node)))
        return result

    def get_visible_nodes(
        self,
        graph: Optional[DependencyGraph],
        view: ViewState,
        filters: Optional[FilterSettings] = None,
    ) -> List[AssetNode]:
        """Nodes currently visible, in first-visit order.

        A node is listed if it passes ``filters``; its dependencies are
        walked only if it was listed and is expanded. The root counts as
        expanded regardless of its flag, but still has to pass the filter.
        """
        return [node for node, _depth in self._walk_visible(graph, view, filters)]

    def _walk_visible(
        self,
        graph: Optional[DependencyGraph],
        view: ViewState,
        filters: Optional[FilterSettings],
    ) -> List[Tuple[AssetNode, int]]:
        if graph is None or graph.root is None:
            return []

        root = graph.root
        if filters is not None and not filters.should_show(root):
            return []

        visited: Set[str] = {root.uid}
        result: List[Tuple[AssetNode, int]] = [(root, 0)]
        stack: List[Tuple[int, Iterator[AssetNode]]] = [(0, iter(graph.dependency_nodes(root)))]
        while stack:
            parent_depth, children = stack[-1]
            try:
                node = next(children)
            except StopIteration:
                stack.pop()
                continue

            if node.uid in visited:
                continue
            if filters is not None and not filters.should_show(node):
                continue

            visited.add(node.uid)
            depth = parent_depth + 1
            result.append((node, depth))
            if view.is_expanded(node):
                stack.append((depth, iter(graph.dependency_nodes(node))))
        return result

    def _columns(
        self,
        graph: Optional[DependencyGraph],
        view: ViewState,
        filters: Optional[FilterSettings],
    ) -> List[List[AssetNode]]:
        by_depth: Dict[int, List[AssetNode]] = {}
        for node, depth in self._walk_visible(graph, view, filters):
            by_depth.setdefault(depth, []).append(node)
        return [by_depth[depth] for depth in sorted(by_depth)]

    # ------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------

    def calculate_visible_layout(
        self,
        graph: Optional[DependencyGraph],
        view: ViewState,
        filters: Optional[FilterSettings] = None,
    ) -> Dict[str, Position]:
        """Tree layout: one column per local depth, each centred on y=0.

        Returns:
            Dict[str, Position]: uid -> position for every visible node.
        """
        cfg = self.config
        positions: Dict[str, Position] = {}

        for column, nodes in enumerate(self._columns(graph, view, filters)):
            x = column * cfg.column_step
            total_height = len(nodes) * cfg.row_step - cfg.vertical_spacing
            start_y = -total_height / 2.0
            for row, node in enumerate(nodes):
                positions[node.uid] = Position(x, start_y + row * cfg.row_step)

        view.set_positions(positions)
        logger.debug("Tree layout computed for %d nodes", len(positions))
        return positions

    def calculate_radial_layout(
        self,
        graph: Optional[DependencyGraph],
        view: ViewState,
        filters: Optional[FilterSettings] = None,
        radius: Optional[float] = None,
    ) -> Dict[str, Position]:
        """Radial layout: root at the origin, local depth d on ring d x radius.

        Nodes on a ring are evenly spaced by angle starting at angle 0.
        """
        base_radius = self.config.radial_radius if radius is None else radius
        positions: Dict[str, Position] = {}

        for depth, nodes in enumerate(self._columns(graph, view, filters)):
            if depth == 0:
                for node in nodes:
                    positions[node.uid] = Position(0.0, 0.0)
                continue

            ring = depth * base_radius
            step = 2.0 * math.pi / len(nodes)
            for i, node in enumerate(nodes):
                angle = i * step
                positions[node.uid] = Position(math.cos(angle) * ring, math.sin(angle) * ring)

        view.set_positions(positions)
        logger.debug("Radial layout computed for %d nodes", len(positions))
        return positions

    def calculate_bounds(self, positions: Dict[str, Position]) -> Optional[Bounds]:
        """Bounding box of all node rectangles, or None if nothing is laid out."""
        if not positions:
            return None
        cfg = self.config
        xs = [p.x for p in positions.values()]
        ys = [p.y for p in positions.values()]
        return Bounds(
            min_x=min(xs),
            min_y=min(ys),
            max_x=max(xs) + cfg.node_width,
            max_y=max(ys) + cfg.node_height,
        )


__all__ = ["Bounds", "GraphLayout"]
