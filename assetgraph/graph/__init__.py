"""Public graph API surface."""

from assetgraph.graph.core import DependencyGraph, GraphBackend, NetworkXBackend
from assetgraph.graph.filters import FilterSettings
from assetgraph.graph.models import (
    AssetCategory,
    AssetNode,
    DependencyEdge,
    DependencyKind,
    categorize_path,
    classify_categories,
    classify_dependency,
)
from assetgraph.graph.view import Position, ViewState

__all__ = [
    "AssetCategory",
    "AssetNode",
    "DependencyEdge",
    "DependencyGraph",
    "DependencyKind",
    "FilterSettings",
    "GraphBackend",
    "NetworkXBackend",
    "Position",
    "ViewState",
    "categorize_path",
    "classify_categories",
    "classify_dependency",
]
