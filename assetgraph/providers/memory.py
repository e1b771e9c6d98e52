"""Dictionary-backed metadata provider.

Useful for embedding the engine behind a host that already knows its
asset catalog, and for tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from assetgraph.graph.models.schema import AssetCategory

from .base import MetadataProvider

logger = logging.getLogger("assetgraph.providers.memory")


@dataclass
class AssetRecord:
    """Catalog entry for one asset.

    Attributes:
        path: Asset path (catalog key).
        uid: Stable unique id; defaults to the path.
        dependencies: Direct dependency paths, in order.
        type_name: Asset type; None marks the asset as unresolvable.
        size: Size in bytes.
        category: Explicit category; None falls back to the extension table.
        addressable: Whether the asset is marked addressable.
    """

    path: str
    uid: str = ""
    dependencies: List[str] = field(default_factory=list)
    type_name: Optional[str] = "Object"
    size: int = 0
    category: Optional[AssetCategory] = None
    addressable: bool = False

    def __post_init__(self) -> None:
        if not self.uid:
            self.uid = self.path


class InMemoryMetadataProvider(MetadataProvider):
    """Metadata provider over an in-memory catalog."""

    def __init__(self, records: Optional[Iterable[AssetRecord]] = None) -> None:
        self._records: Dict[str, AssetRecord] = {}
        for record in records or ():
            self._records[record.path] = record

    def add_asset(self, path: str, **kwargs) -> AssetRecord:
        """Add or replace a catalog entry.

        Args:
            path: Asset path.
            **kwargs: AssetRecord fields.

        Returns:
            AssetRecord: The stored record.
        """
        record = AssetRecord(path=path, **kwargs)
        self._records[path] = record
        return record

    def add_dependency(self, source: str, target: str) -> None:
        """Append ``target`` to ``source``'s dependency list.

        Either end is created with default metadata if unknown.
        """
        if source not in self._records:
            self.add_asset(source)
        if target not in self._records:
            self.add_asset(target)
        deps = self._records[source].dependencies
        if target not in deps:
            deps.append(target)

    def exists(self, path: str) -> bool:
        return path in self._records

    def get_direct_dependencies(self, path: str) -> List[str]:
        record = self._records.get(path)
        return list(record.dependencies) if record else []

    def get_unique_id(self, path: str) -> str:
        record = self._records.get(path)
        return record.uid if record else ""

    def get_type_name(self, path: str) -> Optional[str]:
        record = self._records.get(path)
        return record.type_name if record else None

    def get_size(self, path: str) -> int:
        record = self._records.get(path)
        return record.size if record else 0

    def get_category(self, path: str) -> AssetCategory:
        record = self._records.get(path)
        if record is not None and record.category is not None:
            return record.category
        return super().get_category(path)

    def is_addressable(self, path: str) -> bool:
        record = self._records.get(path)
        return bool(record and record.addressable)

    def list_all_paths(self) -> List[str]:
        return list(self._records)
