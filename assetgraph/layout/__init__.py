"""Layout engine for visible dependency subgraphs."""

from .engine import Bounds, GraphLayout

__all__ = ["Bounds", "GraphLayout"]
