"""Dependency graph container.

DependencyGraph is the unique graph instance produced by one resolve call.
Nodes live in a dense table addressed by index, with a separate
uid -> index identity map for deduplication; edges are kept by the
backend over those indices. Nothing in the graph references another
node object directly, so cyclic asset relations never become cyclic
object references.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from .backend import GraphBackend, NetworkXBackend
from ..models.schema import AssetNode, DependencyEdge, DependencyKind

logger = logging.getLogger("assetgraph.graph.core.graph")


class DependencyGraph:
    """Deduplicated asset dependency graph rooted at a single node.

    The graph is append-only: nodes and edges are added during
    construction and the whole instance is discarded when a new root is
    resolved.
    """

    def __init__(self, backend: Optional[GraphBackend] = None) -> None:
        """Initialize an empty graph.

        Args:
            backend: Optional edge backend. Defaults to NetworkXBackend.
        """
        self._backend: GraphBackend = backend or NetworkXBackend()
        self._nodes: List[AssetNode] = []
        self._index: Dict[str, int] = {}
        self._path_index: Dict[str, int] = {}
        self._root_index: Optional[int] = None

    @property
    def root(self) -> Optional[AssetNode]:
        """The root node, or None for an empty graph."""
        if self._root_index is None:
            return None
        return self._nodes[self._root_index]

    def add_node(self, node: AssetNode, *, root: bool = False) -> AssetNode:
        """Register a node, returning the canonical instance for its uid.

        If a node with the same uid already exists the existing instance is
        returned unchanged and ``node`` is discarded.

        Args:
            node: Node to register.
            root: Mark the node as the graph root.

        Returns:
            AssetNode: The instance stored in the graph.
        """
        existing = self._index.get(node.uid)
        if existing is not None:
            self._path_index.setdefault(node.path, existing)
            return self._nodes[existing]

        if root and node.depth != 0:
            raise ValueError(f"Root node {node.uid} must have depth 0, got {node.depth}")

        index = len(self._nodes)
        self._nodes.append(node)
        self._index[node.uid] = index
        self._path_index.setdefault(node.path, index)
        self._backend.add_node(index)
        if root:
            self._root_index = index
        logger.debug("Added node: %s (%s, depth=%d)", node.path, node.category.value, node.depth)
        return node

    def add_edge(
        self,
        source: AssetNode,
        target: AssetNode,
        kind: DependencyKind = DependencyKind.DIRECT,
        property_name: Optional[str] = None,
    ) -> bool:
        """Add ``source -> target``. Both nodes must already be registered.

        The dependent side is derived from the same stored edge, so the
        forward and inverse lists can never disagree.

        Returns:
            bool: False if the pair was already connected.
        """
        src = self._require_index(source.uid)
        dst = self._require_index(target.uid)
        added = self._backend.add_edge(src, dst, kind=kind, property_name=property_name)
        if added:
            logger.debug("Added edge: %s -> %s (kind=%s)", source.path, target.path, kind.value)
        return added

    def get(self, uid: str) -> Optional[AssetNode]:
        """Look up a node by unique id."""
        index = self._index.get(uid)
        return self._nodes[index] if index is not None else None

    def get_by_path(self, path: str) -> Optional[AssetNode]:
        """Look up a node by any path it was discovered under."""
        index = self._path_index.get(path)
        return self._nodes[index] if index is not None else None

    def __contains__(self, item: object) -> bool:
        if isinstance(item, AssetNode):
            return item.uid in self._index
        return item in self._index

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[AssetNode]:
        return iter(self._nodes)

    def nodes(self) -> List[AssetNode]:
        """All nodes in creation order."""
        return list(self._nodes)

    def dependencies(self, node: AssetNode) -> List[DependencyEdge]:
        """Outgoing edges of ``node`` in discovery order."""
        src = self._require_index(node.uid)
        return [
            self._make_edge(src, dst)
            for dst in self._backend.successors(src)
        ]

    def dependents(self, node: AssetNode) -> List[DependencyEdge]:
        """Inverse edges registered on ``node``: (node, referrer, kind)."""
        dst = self._require_index(node.uid)
        return [
            self._make_edge(src, dst).reversed()
            for src in self._backend.predecessors(dst)
        ]

    def dependency_nodes(self, node: AssetNode) -> List[AssetNode]:
        """Direct dependency targets of ``node`` in discovery order."""
        src = self._require_index(node.uid)
        return [self._nodes[dst] for dst in self._backend.successors(src)]

    def edges(self) -> List[DependencyEdge]:
        """All forward edges."""
        return [self._make_edge(src, dst) for src, dst in self._backend.edges()]

    def has_dependencies(self, node: AssetNode) -> bool:
        return self._backend.out_degree(self._require_index(node.uid)) > 0

    def has_dependents(self, node: AssetNode) -> bool:
        return self._backend.in_degree(self._require_index(node.uid)) > 0

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        return self._backend.edge_count()

    def get_summary(self) -> Dict[str, Any]:
        """Get graph summary.

        Returns:
            Dict[str, Any]: Root path, node/edge counts, missing count and max depth.
        """
        root = self.root
        return {
            "root": root.path if root else None,
            "node_count": self.node_count(),
            "edge_count": self.edge_count(),
            "missing_count": sum(1 for n in self._nodes if n.is_missing),
            "max_depth": max((n.depth for n in self._nodes), default=0),
        }

    def _require_index(self, uid: str) -> int:
        index = self._index.get(uid)
        if index is None:
            raise KeyError(f"Node {uid} is not part of this graph")
        return index

    def _make_edge(self, src: int, dst: int) -> DependencyEdge:
        data = self._backend.get_edge_data(src, dst) or {}
        return DependencyEdge(
            source=self._nodes[src].uid,
            target=self._nodes[dst].uid,
            kind=data.get("kind", DependencyKind.DIRECT),
            property_name=data.get("property_name"),
        )
