"""Asset dependency graph engine.

Resolves the transitive dependencies of an asset into a deduplicated
graph, gates node visibility with a filter, and lays out the subset the
user has expanded.
"""

from assetgraph.config import GraphSettings, LayoutConfig, ResolverConfig, load_graph_settings
from assetgraph.graph import (
    AssetCategory,
    AssetNode,
    DependencyEdge,
    DependencyGraph,
    DependencyKind,
    FilterSettings,
    Position,
    ViewState,
)
from assetgraph.layout import Bounds, GraphLayout
from assetgraph.providers import (
    AssetRecord,
    InMemoryMetadataProvider,
    MetadataError,
    MetadataProvider,
    UnityProjectProvider,
)
from assetgraph.runtime import DependencyResolver, GraphSession, ResolveCancelled, ResolveMonitor

__version__ = "0.1.0"

__all__ = [
    "AssetCategory",
    "AssetNode",
    "AssetRecord",
    "Bounds",
    "DependencyEdge",
    "DependencyGraph",
    "DependencyKind",
    "DependencyResolver",
    "FilterSettings",
    "GraphLayout",
    "GraphSession",
    "GraphSettings",
    "InMemoryMetadataProvider",
    "LayoutConfig",
    "MetadataError",
    "MetadataProvider",
    "Position",
    "ResolveCancelled",
    "ResolveMonitor",
    "ResolverConfig",
    "UnityProjectProvider",
    "ViewState",
    "load_graph_settings",
]
