"""Dependency resolver: builds a deduplicated graph rooted at one asset.

The resolver walks the provider's direct-dependency relation depth first.
Two builder-scoped sets drive the walk and are cleared at the start of
every resolve: a path -> node memo (deduplication, no re-querying of
metadata) and a visited-path set (cycle guard).

Depth is first-discovery depth, not shortest-path distance. All edges of
a node are registered before any of its targets is descended into, so
siblings get their depth from the parent that lists them, and a depth is
never revised when the node is reached again through another path.
"""

# Provider failures for a single asset are converted into missing-reference
# nodes; they never abort the build.


from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Optional, Set, Tuple

from assetgraph.config.schema import ResolverConfig
from assetgraph.graph.core.graph import DependencyGraph
from assetgraph.graph.models.classification import (
    classify_dependency,
    is_editor_only_path,
    is_resources_path,
)
from assetgraph.graph.models.schema import AssetCategory, AssetNode
from assetgraph.providers.base import MetadataError, MetadataProvider

from .progress import ResolveCancelled, ResolveMonitor

logger = logging.getLogger("assetgraph.runtime.resolver")


class DependencyResolver:
    """Resolves asset dependencies through a MetadataProvider.

    One instance supports a single in-flight ``resolve`` at a time; a
    re-entrant or concurrent call raises RuntimeError.
    """

    def __init__(
        self,
        provider: MetadataProvider,
        config: Optional[ResolverConfig] = None,
    ) -> None:
        """Initialize resolver.

        Args:
            provider: Source of asset metadata.
            config: Optional resolver configuration.
        """
        self.provider = provider
        self.config = config or ResolverConfig()
        self._reserved_prefixes: Tuple[str, ...] = tuple(self.config.reserved_prefixes)

        self._node_cache: Dict[str, AssetNode] = {}
        self._visited_paths: Set[str] = set()
        self._graph: Optional[DependencyGraph] = None
        self._monitor: Optional[ResolveMonitor] = None

        self._lock = threading.Lock()
        self._in_progress = False

    @property
    def graph(self) -> Optional[DependencyGraph]:
        """Graph produced by the last successful resolve, if any."""
        return self._graph

    def resolve(
        self,
        root_path: str,
        max_depth: Optional[int] = None,
        monitor: Optional[ResolveMonitor] = None,
    ) -> Optional[DependencyGraph]:
        """Resolve all dependencies for the given asset path.

        Args:
            root_path: Path of the root asset.
            max_depth: Maximum hops to traverse (0 = root only,
                -1 = unlimited). Defaults to the configured value.
            monitor: Optional progress/cancellation hook.

        Returns:
            DependencyGraph rooted at the asset, or None if the asset does
            not exist.

        Raises:
            ResolveCancelled: If ``monitor`` was cancelled mid-traversal.
            RuntimeError: If another resolve is running on this instance.
        """
        if max_depth is None:
            max_depth = self.config.max_depth

        with self._lock:
            if self._in_progress:
                raise RuntimeError("DependencyResolver.resolve is not re-entrant")
            self._in_progress = True

        try:
            self._reset()
            self._graph = None
            if not root_path or not self.provider.exists(root_path):
                logger.warning("Asset not found: %s", root_path)
                return None

            if monitor is not None:
                monitor.reset()
            self._monitor = monitor

            graph = DependencyGraph()
            self._graph = graph
            root = self._get_or_create_node(root_path, depth=0, root=True)

            logger.info("Resolving dependencies for %s (max_depth=%d)", root_path, max_depth)
            self._traverse(root, max_depth)

            logger.info(
                "Resolved %s: %d nodes, %d edges",
                root_path,
                graph.node_count(),
                graph.edge_count(),
            )
            return graph
        except ResolveCancelled:
            logger.warning("Resolve of %s cancelled", root_path)
            self._reset()
            self._graph = None
            raise
        finally:
            self._monitor = None
            with self._lock:
                self._in_progress = False

    def resolve_reverse(self, target_path: str) -> List[AssetNode]:
        """Find every asset whose direct dependencies contain ``target_path``.

        This sweeps the whole catalog: O(catalog size x average dependency
        count). Treat it as a heavyweight on-demand query, not part of the
        main traversal. Nodes already in the current graph are reused;
        others are returned as detached nodes.

        Args:
            target_path: Path of the asset whose referrers are wanted.

        Returns:
            List[AssetNode]: Referring assets in catalog order.
        """
        all_paths = self.provider.list_all_paths()
        logger.info(
            "Sweeping %d catalog entries for dependents of %s", len(all_paths), target_path
        )

        dependents: List[AssetNode] = []
        for path in all_paths:
            if path == target_path:
                continue
            try:
                deps = self.provider.get_direct_dependencies(path)
            except MetadataError as exc:
                logger.debug("Skipping %s during reverse sweep: %s", path, exc)
                continue
            if target_path not in deps:
                continue

            node = self._node_cache.get(path)
            if node is None and self._graph is not None:
                node = self._graph.get_by_path(path)
            if node is None:
                node = self._build_node(path, depth=0)
            dependents.append(node)

        logger.info("Found %d dependents of %s", len(dependents), target_path)
        return dependents

    def get_all_nodes(self) -> List[AssetNode]:
        """Nodes discovered by the current resolve, in discovery order."""
        seen: Set[str] = set()
        nodes: List[AssetNode] = []
        for node in self._node_cache.values():
            if node.uid not in seen:
                seen.add(node.uid)
                nodes.append(node)
        return nodes

    def clear_cache(self) -> None:
        """Discard the memo, the visited set and the last graph.

        Raises:
            RuntimeError: If called while a resolve is running.
        """
        if self._in_progress:
            raise RuntimeError("clear_cache() called during an active resolve")
        self._reset()
        self._graph = None
        logger.debug("Resolver cache cleared")

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._node_cache.clear()
        self._visited_paths.clear()

    def _within_budget(self, hops: int, max_depth: int) -> bool:
        return max_depth < 0 or hops < max_depth

    def _traverse(self, root: AssetNode, max_depth: int) -> None:
        if not self._within_budget(0, max_depth):
            return

        # Explicit stack of (hops, child iterator); mirrors recursive DFS
        # order without being bounded by the interpreter's recursion limit.
        # The budget counts hops along the path being walked, not the
        # node's first-discovery depth: a node cut off on a long path is
        # left unvisited and is expanded if a shorter path reaches it.
        stack: List[Tuple[int, Iterator[AssetNode]]] = [(0, iter(self._expand(root)))]
        while stack:
            hops, children = stack[-1]
            try:
                child = next(children)
            except StopIteration:
                stack.pop()
                continue

            if child.path in self._visited_paths:
                continue
            if not self._within_budget(hops + 1, max_depth):
                continue
            stack.append((hops + 1, iter(self._expand(child))))

    def _expand(self, node: AssetNode) -> List[AssetNode]:
        """Register all outgoing edges of ``node``; return targets to descend."""
        monitor = self._monitor
        if monitor is not None:
            if monitor.cancelled:
                raise ResolveCancelled(
                    self._graph.root.path if self._graph and self._graph.root else node.path,
                    monitor.visited,
                )
            monitor.node_visited(node.path)

        self._visited_paths.add(node.path)

        if node.is_missing:
            logger.debug("Not expanding missing reference: %s", node.path)
            return []

        try:
            dependency_paths = self.provider.get_direct_dependencies(node.path)
        except MetadataError as exc:
            logger.warning("Cannot read dependencies of %s: %s", node.path, exc)
            return []

        graph = self._graph
        assert graph is not None

        targets: List[AssetNode] = []
        for dep_path in dependency_paths:
            if dep_path == node.path:
                continue
            if dep_path.startswith(self._reserved_prefixes):
                logger.debug("Skipping reserved dependency %s of %s", dep_path, node.path)
                continue

            target = self._get_or_create_node(dep_path, depth=node.depth + 1)
            if target.uid == node.uid:
                continue

            kind = classify_dependency(node, target)
            if graph.add_edge(node, target, kind):
                targets.append(target)

        return targets

    # ------------------------------------------------------------------
    # Node construction
    # ------------------------------------------------------------------

    def _get_or_create_node(self, path: str, depth: int, root: bool = False) -> AssetNode:
        cached = self._node_cache.get(path)
        if cached is not None:
            return cached

        graph = self._graph
        assert graph is not None

        node = self._build_node(path, depth)
        # A second path for an already-known uid resolves to the same instance.
        node = graph.add_node(node, root=root)
        self._node_cache[path] = node
        return node

    def _build_node(self, path: str, depth: int) -> AssetNode:
        provider = self.provider
        try:
            uid = provider.get_unique_id(path) or path
            type_name = provider.get_type_name(path)
            category = provider.get_category(path)
            size = provider.get_size(path)
            addressable = provider.is_addressable(path)
        except MetadataError as exc:
            logger.warning("Metadata unavailable for %s: %s", path, exc)
            return AssetNode(
                uid=path,
                path=path,
                category=AssetCategory.UNKNOWN,
                depth=depth,
                is_missing=True,
                is_editor_only=is_editor_only_path(path),
                is_in_resources=is_resources_path(path),
            )

        if type_name is None:
            logger.warning("Missing reference: %s", path)

        return AssetNode(
            uid=uid,
            path=path,
            category=category,
            type_name=type_name,
            depth=depth,
            is_missing=type_name is None,
            is_editor_only=is_editor_only_path(path),
            is_in_resources=is_resources_path(path),
            is_addressable=addressable,
            size_bytes=max(0, size),
        )


__all__ = ["DependencyResolver"]
