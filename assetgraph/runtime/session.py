"""UI-free session facade over resolver, filter, layout and view state.

A GraphSession is the single owner of view-state writes for one graph
view: it loads a root, keeps the expansion/selection overlay, and
recomputes the layout whenever the visible set may have changed. A
renderer reads ``graph``, ``view.positions`` and ``visible_nodes()``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from assetgraph.config.schema import GraphSettings
from assetgraph.graph.core.graph import DependencyGraph
from assetgraph.graph.filters import FilterSettings
from assetgraph.graph.models.schema import AssetCategory, AssetNode
from assetgraph.graph.view import Position, ViewState
from assetgraph.layout.engine import GraphLayout
from assetgraph.providers.base import MetadataProvider
from assetgraph.utils.formatting import format_file_size

from .progress import ResolveMonitor
from .resolver import DependencyResolver

logger = logging.getLogger("assetgraph.runtime.session")

# Shown first in the category list, in this order.
PINNED_CATEGORIES = (AssetCategory.PREFAB, AssetCategory.SCENE)


class GraphSession:
    """Interactive graph view state for one provider."""

    def __init__(
        self,
        provider: MetadataProvider,
        settings: Optional[GraphSettings] = None,
    ) -> None:
        """Initialize session.

        Args:
            provider: Source of asset metadata.
            settings: Optional settings; defaults to GraphSettings().
        """
        self.settings = settings or GraphSettings()
        self.resolver = DependencyResolver(provider, self.settings.resolver)
        self.layout = GraphLayout(self.settings.layout)
        self.filters: FilterSettings = self.settings.filters.model_copy()
        self.view = ViewState()
        self.graph: Optional[DependencyGraph] = None
        self._available_categories: List[AssetCategory] = []

    @property
    def root(self) -> Optional[AssetNode]:
        return self.graph.root if self.graph is not None else None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_asset(
        self,
        path: str,
        max_depth: Optional[int] = None,
        monitor: Optional[ResolveMonitor] = None,
    ) -> Optional[DependencyGraph]:
        """Resolve ``path`` and make it the session root.

        The previous graph is discarded first. On success the root is
        expanded and selected and a fresh layout is computed.

        Returns:
            The new graph, or None if the asset does not exist.
        """
        self.clear()
        graph = self.resolver.resolve(path, max_depth=max_depth, monitor=monitor)
        if graph is None or graph.root is None:
            return None

        self.graph = graph
        self.view.expand(graph.root)
        self.view.select(graph.root)
        self._update_available_categories()
        self.relayout()
        logger.info("Loaded %s (%d nodes)", path, graph.node_count())
        return graph

    def set_as_root(self, uid: str) -> Optional[DependencyGraph]:
        """Reload the session rooted at an existing node."""
        node = self._require_node(uid)
        return self.load_asset(node.path)

    def clear(self) -> None:
        """Drop the graph, view state and cached resolver state."""
        self.graph = None
        self.view.reset()
        self.resolver.clear_cache()
        self._available_categories = []

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def relayout(self, radial: bool = False) -> Dict[str, Position]:
        """Recompute positions for the current visible set."""
        if radial:
            return self.layout.calculate_radial_layout(self.graph, self.view, self.filters)
        return self.layout.calculate_visible_layout(self.graph, self.view, self.filters)

    def visible_nodes(self) -> List[AssetNode]:
        return self.layout.get_visible_nodes(self.graph, self.view, self.filters)

    def toggle_expanded(self, uid: str) -> bool:
        """Flip a node's expansion flag, relayout, and return the new flag."""
        node = self._require_node(uid)
        expanded = self.view.toggle_expanded(node)
        self.relayout()
        return expanded

    def expand_recursive(self, uid: str) -> int:
        """Expand a node and everything below it. Returns nodes touched."""
        return self._set_expanded_recursive(uid, True)

    def collapse_recursive(self, uid: str) -> int:
        """Collapse a node and everything below it. Returns nodes touched."""
        return self._set_expanded_recursive(uid, False)

    def _set_expanded_recursive(self, uid: str, expanded: bool) -> int:
        graph = self.graph
        start = self._require_node(uid)
        assert graph is not None

        seen: Set[str] = set()
        stack = [start]
        while stack:
            node = stack.pop()
            if node.uid in seen:
                continue
            seen.add(node.uid)
            stack.extend(graph.dependency_nodes(node))

        self.view.set_many_expanded(seen, expanded)
        self.relayout()
        return len(seen)

    def select(self, uid: Optional[str]) -> Optional[AssetNode]:
        """Select a node by uid; None clears the selection."""
        if uid is None:
            self.view.clear_selection()
            return None
        node = self._require_node(uid)
        self.view.select(node)
        return node

    @property
    def selected_node(self) -> Optional[AssetNode]:
        uid = self.view.selected
        if uid is None or self.graph is None:
            return None
        return self.graph.get(uid)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def available_categories(self) -> List[AssetCategory]:
        """Categories present in the graph: pinned first, rest alphabetical."""
        return list(self._available_categories)

    def _update_available_categories(self) -> None:
        present = {
            node.category
            for node in self.layout.collect_all_nodes(self.graph)
            if node.category is not AssetCategory.UNKNOWN
        }
        ordered = sorted(present, key=lambda c: c.label)
        for category in reversed(PINNED_CATEGORIES):
            if category in ordered:
                ordered.remove(category)
                ordered.insert(0, category)
        self._available_categories = ordered

    def set_category_visible(self, category: AssetCategory, visible: bool) -> None:
        self.filters.set_filter(category, visible)
        self.relayout()

    def set_all_filters(self, value: bool) -> None:
        """Show or hide everything via the filter's symmetric bulk pair."""
        if value:
            self.filters.show_all()
        else:
            self.filters.hide_all()
        self.relayout()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_dependents(self, uid: str) -> List[AssetNode]:
        """Every catalog asset that directly references the node.

        Sweeps the full catalog; see DependencyResolver.resolve_reverse.
        """
        node = self._require_node(uid)
        return self.resolver.resolve_reverse(node.path)

    def describe(self, uid: str) -> Dict[str, Any]:
        """Info-panel style summary of a node."""
        node = self._require_node(uid)
        graph = self.graph
        assert graph is not None
        return {
            "name": node.name,
            "path": node.path,
            "category": node.category.label,
            "size": format_file_size(node.size_bytes),
            "dependencies": len(graph.dependencies(node)),
            "dependents": len(graph.dependents(node)),
            "missing": node.is_missing,
            "editor_only": node.is_editor_only,
            "in_resources": node.is_in_resources,
            "addressable": node.is_addressable,
        }

    def _require_node(self, uid: str) -> AssetNode:
        node = self.graph.get(uid) if self.graph is not None else None
        if node is None:
            raise KeyError(f"Node {uid} is not in the current graph")
        return node


__all__ = ["GraphSession"]
