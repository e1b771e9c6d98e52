"""Metadata provider reading a Unity project directly from disk.

Asset identity comes from the ``guid`` recorded in each ``.meta`` file.
Dependencies are the GUID references found in text-serialized assets
(YAML scenes/prefabs/materials/..., JSON shader graphs) plus ``#include``
directives in shader sources. Paths are project-relative POSIX strings
such as ``Assets/Materials/Stone.mat``.

A GUID that no ``.meta`` file declares is reported as a dependency on a
``missing://<guid>`` locator, which the resolver turns into a
missing-reference node.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence, Set, Union

from assetgraph.graph.models.classification import categorize_path
from assetgraph.graph.models.schema import AssetCategory

from .base import MetadataError, MetadataProvider

logger = logging.getLogger("assetgraph.providers.unity")

MISSING_PREFIX = "missing://"

_META_GUID_RE = re.compile(r"^guid:\s*([0-9a-fA-F]{32})\s*$", re.MULTILINE)
_FOLDER_META_RE = re.compile(r"^folderAsset:\s*yes\s*$", re.MULTILINE)
_REFERENCE_GUID_RE = re.compile(r"""guid["']?\s*:\s*["']?([0-9a-fA-F]{32})""")
_ADDRESSABLE_GUID_RE = re.compile(r"m_GUID:\s*([0-9a-fA-F]{32})")
_SHADER_INCLUDE_RE = re.compile(r"""^\s*#\s*include\s+["<]([^">]+)[">]""", re.MULTILINE)

# Built-in resource GUIDs map onto reserved locators so the resolver skips them.
BUILTIN_GUIDS: Dict[str, str] = {
    "0000000000000000e000000000000000": "Resources/unity_builtin_extra",
    "0000000000000000f000000000000000": "Library/unity default resources",
}

SERIALIZED_EXTENSIONS = frozenset(
    {
        ".prefab",
        ".unity",
        ".mat",
        ".asset",
        ".controller",
        ".overridecontroller",
        ".anim",
        ".mask",
        ".playable",
        ".spriteatlas",
        ".physicmaterial",
        ".lighting",
        ".fontsettings",
        ".shadergraph",
        ".shadersubgraph",
    }
)
SHADER_SOURCE_EXTENSIONS = frozenset({".shader", ".cginc", ".hlsl", ".glslinc", ".compute"})

ADDRESSABLE_GROUPS_DIR = "Assets/AddressableAssetsData/AssetGroups"


class UnityProjectProvider(MetadataProvider):
    """MetadataProvider over a Unity project checkout.

    The GUID index is built lazily on first use and cached; call
    :meth:`refresh` after the project changes on disk.
    """

    def __init__(
        self,
        project_root: Union[str, Path],
        scan_roots: Sequence[str] = ("Assets", "Packages"),
    ) -> None:
        """Initialize provider.

        Args:
            project_root: Unity project directory (contains ``Assets/``).
            scan_roots: Project-relative directories to index.
        """
        self.project_root = Path(project_root).resolve()
        self.scan_roots = tuple(scan_roots)

        self._guid_to_path: Dict[str, str] = {}
        self._path_to_guid: Dict[str, str] = {}
        self._folders: Set[str] = set()
        self._addressable_guids: Set[str] = set()
        self._dependency_cache: Dict[str, List[str]] = {}
        self._indexed = False
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """Drop every cached lookup and rebuild the GUID index."""
        with self._lock:
            self._indexed = False
            self._dependency_cache.clear()
        self._ensure_index()

    def _ensure_index(self) -> None:
        with self._lock:
            if self._indexed:
                return
            self._guid_to_path.clear()
            self._path_to_guid.clear()
            self._folders.clear()
            self._addressable_guids.clear()

            for scan_root in self.scan_roots:
                base = self.project_root / scan_root
                if not base.is_dir():
                    continue
                self._index_tree(base)

            self._index_addressables()
            self._indexed = True

        logger.info(
            "Indexed %d assets (%d folders, %d addressable) under %s",
            len(self._path_to_guid),
            len(self._folders),
            len(self._addressable_guids),
            self.project_root,
        )

    def _index_tree(self, base: Path) -> None:
        for dirpath, dirnames, filenames in os.walk(base):
            # Hidden and "~" suffixed folders are ignored by the editor.
            dirnames[:] = sorted(
                d for d in dirnames if not d.startswith(".") and not d.endswith("~")
            )
            for filename in sorted(filenames):
                if not filename.endswith(".meta"):
                    continue
                meta_path = Path(dirpath) / filename
                try:
                    text = meta_path.read_text(encoding="utf-8", errors="replace")
                except OSError as exc:
                    logger.warning("Cannot read meta file %s: %s", meta_path, exc)
                    continue

                match = _META_GUID_RE.search(text)
                if not match:
                    logger.debug("Meta file without guid: %s", meta_path)
                    continue

                asset_path = self._relative(meta_path.with_suffix(""))
                guid = match.group(1).lower()
                self._guid_to_path[guid] = asset_path
                self._path_to_guid[asset_path] = guid
                if _FOLDER_META_RE.search(text) or meta_path.with_suffix("").is_dir():
                    self._folders.add(asset_path)

    def _index_addressables(self) -> None:
        groups_dir = self.project_root / ADDRESSABLE_GROUPS_DIR
        if not groups_dir.is_dir():
            return
        for group_file in sorted(groups_dir.glob("*.asset")):
            try:
                text = group_file.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.warning("Cannot read addressable group %s: %s", group_file, exc)
                continue
            self._addressable_guids.update(
                guid.lower() for guid in _ADDRESSABLE_GUID_RE.findall(text)
            )

    def _relative(self, path: Path) -> str:
        return path.relative_to(self.project_root).as_posix()

    # ------------------------------------------------------------------
    # MetadataProvider
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        if not path or path.startswith(MISSING_PREFIX):
            return False
        return (self.project_root / path).exists()

    def get_unique_id(self, path: str) -> str:
        if path.startswith(MISSING_PREFIX):
            return path[len(MISSING_PREFIX):]
        self._ensure_index()
        return self._path_to_guid.get(path, "")

    def get_type_name(self, path: str) -> Optional[str]:
        if not self.exists(path):
            return None
        self._ensure_index()
        if path not in self._path_to_guid:
            # Files without a .meta are not imported by the editor.
            return None
        if path in self._folders:
            return "Folder"
        category = categorize_path(path)
        if category is AssetCategory.UNKNOWN:
            return "DefaultAsset"
        return category.label.replace(" ", "")

    def get_category(self, path: str) -> AssetCategory:
        self._ensure_index()
        if path in self._folders:
            return AssetCategory.FOLDER
        return categorize_path(path)

    def get_size(self, path: str) -> int:
        if not self.exists(path):
            return 0
        target = self.project_root / path
        if target.is_dir():
            return 0
        try:
            return target.stat().st_size
        except OSError as exc:
            raise MetadataError(f"Cannot stat {path}: {exc}") from exc

    def is_addressable(self, path: str) -> bool:
        self._ensure_index()
        guid = self._path_to_guid.get(path)
        return guid is not None and guid in self._addressable_guids

    def list_all_paths(self) -> List[str]:
        self._ensure_index()
        return sorted(self._path_to_guid)

    def get_direct_dependencies(self, path: str) -> List[str]:
        cached = self._dependency_cache.get(path)
        if cached is not None:
            return list(cached)

        self._ensure_index()
        suffix = PurePosixPath(path).suffix.lower()
        if not self.exists(path) or path in self._folders:
            deps: List[str] = []
        elif suffix in SERIALIZED_EXTENSIONS:
            deps = self._guid_references(path)
        elif suffix in SHADER_SOURCE_EXTENSIONS:
            deps = self._shader_includes(path)
        else:
            deps = []

        self._dependency_cache[path] = deps
        return list(deps)

    # ------------------------------------------------------------------
    # Reference extraction
    # ------------------------------------------------------------------

    def _read_text(self, path: str) -> Optional[str]:
        target = self.project_root / path
        try:
            raw = target.read_bytes()
        except OSError as exc:
            raise MetadataError(f"Cannot read {path}: {exc}") from exc

        if b"\x00" in raw[:1024]:
            logger.debug("Skipping binary-serialized asset: %s", path)
            return None
        return raw.decode("utf-8", errors="replace")

    def _guid_references(self, path: str) -> List[str]:
        text = self._read_text(path)
        if text is None:
            return []

        own_guid = self._path_to_guid.get(path)
        seen: Set[str] = set()
        deps: List[str] = []
        for match in _REFERENCE_GUID_RE.finditer(text):
            guid = match.group(1).lower()
            if guid == own_guid or guid in seen:
                continue
            seen.add(guid)
            if guid in BUILTIN_GUIDS:
                deps.append(BUILTIN_GUIDS[guid])
            elif guid in self._guid_to_path:
                deps.append(self._guid_to_path[guid])
            elif guid.strip("0"):
                logger.debug("Unresolved guid %s referenced by %s", guid, path)
                deps.append(MISSING_PREFIX + guid)
        return deps

    def _shader_includes(self, path: str) -> List[str]:
        text = self._read_text(path)
        if text is None:
            return []

        parent = PurePosixPath(path).parent
        deps: List[str] = []
        for include in _SHADER_INCLUDE_RE.findall(text):
            for candidate in (parent / include, PurePosixPath(include)):
                normalized = os.path.normpath(str(candidate)).replace(os.sep, "/")
                if normalized.startswith("..") or normalized == path:
                    continue
                if (self.project_root / normalized).is_file():
                    if normalized not in deps:
                        deps.append(normalized)
                    break
            else:
                logger.debug("Shader include %s in %s not found in project", include, path)
        return deps


__all__ = ["BUILTIN_GUIDS", "MISSING_PREFIX", "UnityProjectProvider"]
