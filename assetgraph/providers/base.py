"""Metadata provider interface consumed by the dependency resolver.

A provider answers per-asset metadata queries (direct dependencies,
unique id, category, type, size, existence) and enumerates the asset
catalog for reverse-dependency sweeps.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from assetgraph.graph.models.classification import categorize_path
from assetgraph.graph.models.schema import AssetCategory

logger = logging.getLogger("assetgraph.providers.base")


# =============================================================================
# Custom Exception Hierarchy
# =============================================================================

class RecoverableError(Exception):
    """Base class for recoverable errors.

    These errors indicate expected failure conditions that can be handled
    gracefully by skipping the current item and continuing processing.
    """
    pass


class MetadataError(RecoverableError):
    """Metadata for a single asset could not be read.

    The resolver flags the affected node as a missing reference and keeps
    building the rest of the graph.
    """
    pass


class MetadataProvider(ABC):
    """Abstract source of asset metadata.

    ``get_direct_dependencies`` must return a stable order for a given
    asset: depth assignment and edge order depend on it.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if the asset exists."""
        pass

    @abstractmethod
    def get_direct_dependencies(self, path: str) -> List[str]:
        """Get direct dependency paths in a stable order."""
        pass

    @abstractmethod
    def get_unique_id(self, path: str) -> str:
        """Get the asset's stable unique id, or "" if it has none."""
        pass

    @abstractmethod
    def get_type_name(self, path: str) -> Optional[str]:
        """Get the asset's type, or None if it cannot be determined."""
        pass

    @abstractmethod
    def get_size(self, path: str) -> int:
        """Get the asset's size in bytes (0 if unknown)."""
        pass

    @abstractmethod
    def list_all_paths(self) -> List[str]:
        """Enumerate every known asset path."""
        pass

    def get_category(self, path: str) -> AssetCategory:
        """Get the asset's category; defaults to the extension table."""
        return categorize_path(path)

    def is_addressable(self, path: str) -> bool:
        """Whether the asset is marked addressable."""
        return False


__all__ = ["MetadataError", "MetadataProvider", "RecoverableError"]
