"""Configuration schema and loading for assetgraph."""

from .loader import load_graph_settings
from .schema import GraphSettings, LayoutConfig, ResolverConfig

__all__ = [
    "GraphSettings",
    "LayoutConfig",
    "ResolverConfig",
    "load_graph_settings",
]
