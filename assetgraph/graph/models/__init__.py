"""Data models and classification tables used by the graph package."""

from .classification import (
    EDGE_KIND_RULES,
    EXTENSION_CATEGORIES,
    RESERVED_PREFIXES,
    categorize_path,
    classify_categories,
    classify_dependency,
    is_editor_only_path,
    is_reserved_path,
    is_resources_path,
)
from .schema import AssetCategory, AssetNode, DependencyEdge, DependencyKind

__all__ = [
    "AssetCategory",
    "AssetNode",
    "DependencyEdge",
    "DependencyKind",
    "EDGE_KIND_RULES",
    "EXTENSION_CATEGORIES",
    "RESERVED_PREFIXES",
    "categorize_path",
    "classify_categories",
    "classify_dependency",
    "is_editor_only_path",
    "is_reserved_path",
    "is_resources_path",
]
