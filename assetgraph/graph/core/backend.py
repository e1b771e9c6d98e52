"""Graph backend abstraction layer.

Wraps NetworkX for the edge structure of a DependencyGraph. Nodes are
addressed by their dense integer index in the owning graph's node table,
so the backend never holds references to node objects.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

import networkx as nx

logger = logging.getLogger("assetgraph.graph.core.backend")


class GraphBackend(ABC):
    """Abstract edge-structure backend.

    Adjacency iteration must preserve insertion order: dependency and
    dependent lists are reported in the order edges were added.
    """

    @abstractmethod
    def add_node(self, index: int, **attributes: Any) -> None:
        """Add node to graph."""
        pass

    @abstractmethod
    def add_edge(self, source: int, target: int, **attributes: Any) -> bool:
        """Add edge to graph. Returns False if the edge already existed."""
        pass

    @abstractmethod
    def get_edge_data(self, source: int, target: int) -> Optional[Dict[str, Any]]:
        """Get edge attributes."""
        pass

    @abstractmethod
    def edges(self, data: bool = False) -> Iterable:
        """Iterate over edges."""
        pass

    @abstractmethod
    def edge_count(self) -> int:
        """Get number of edges."""
        pass

    @abstractmethod
    def successors(self, index: int) -> Iterable[int]:
        """Get successor nodes in insertion order."""
        pass

    @abstractmethod
    def predecessors(self, index: int) -> Iterable[int]:
        """Get predecessor nodes in insertion order."""
        pass

    @abstractmethod
    def in_degree(self, index: int) -> int:
        """Get in-degree of node."""
        pass

    @abstractmethod
    def out_degree(self, index: int) -> int:
        """Get out-degree of node."""
        pass


class NetworkXBackend(GraphBackend):
    """NetworkX-based in-memory backend.

    A plain DiGraph is enough: a given (source, target) pair carries
    exactly one classified edge.
    """

    def __init__(self) -> None:
        self._graph = nx.DiGraph()
        logger.debug("NetworkXBackend initialized")

    def add_node(self, index: int, **attributes: Any) -> None:
        self._graph.add_node(index, **attributes)

    def add_edge(self, source: int, target: int, **attributes: Any) -> bool:
        if self._graph.has_edge(source, target):
            return False
        self._graph.add_edge(source, target, **attributes)
        return True

    def get_edge_data(self, source: int, target: int) -> Optional[Dict[str, Any]]:
        return self._graph.get_edge_data(source, target)

    def edges(self, data: bool = False) -> Iterable:
        return self._graph.edges(data=data)

    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def successors(self, index: int) -> Iterable[int]:
        return self._graph.successors(index)

    def predecessors(self, index: int) -> Iterable[int]:
        return self._graph.predecessors(index)

    def in_degree(self, index: int) -> int:
        return self._graph.in_degree(index)

    def out_degree(self, index: int) -> int:
        return self._graph.out_degree(index)

