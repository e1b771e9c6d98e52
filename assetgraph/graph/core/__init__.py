"""Core graph storage APIs."""

from .backend import GraphBackend, NetworkXBackend
from .graph import DependencyGraph

__all__ = [
    "DependencyGraph",
    "GraphBackend",
    "NetworkXBackend",
]
