"""Graph construction and session runtime."""

from .progress import ResolveCancelled, ResolveMonitor
from .resolver import DependencyResolver
from .session import GraphSession

__all__ = [
    "DependencyResolver",
    "GraphSession",
    "ResolveCancelled",
    "ResolveMonitor",
]
