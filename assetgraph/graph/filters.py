"""Visibility filter for graph nodes.

FilterSettings is both the user-facing configuration and the pure
predicate that gates which nodes a layout pass may show.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from .models.schema import AssetCategory, AssetNode

# Categories with an individual toggle; everything else is "other".
CATEGORY_FIELDS: Dict[AssetCategory, str] = {
    AssetCategory.PREFAB: "show_prefabs",
    AssetCategory.SCENE: "show_scenes",
    AssetCategory.SCRIPT: "show_scripts",
    AssetCategory.MATERIAL: "show_materials",
    AssetCategory.TEXTURE: "show_textures",
    AssetCategory.SHADER: "show_shaders",
    AssetCategory.ANIMATION: "show_animations",
    AssetCategory.AUDIO: "show_audio",
    AssetCategory.MODEL: "show_models",
    AssetCategory.SCRIPTABLE_OBJECT: "show_scriptable_objects",
}
OTHER_FIELD = "show_other"
SPECIAL_FIELDS = ("show_editor_only", "show_resources_assets", "show_missing_references")


class FilterSettings(BaseModel):
    """Settings for filtering which nodes are displayed.

    Attributes:
        show_prefabs .. show_scriptable_objects: Per-category gates.
        show_other: Gate for any category without its own toggle.
        show_editor_only: If False, hides editor-only nodes.
        show_resources_assets: If False, hides nodes in a Resources folder.
        show_missing_references: If False, hides missing-reference nodes.
        max_depth: Hides nodes deeper than this (-1 = unlimited).
        min_file_size_bytes: Hides nodes smaller than this (0 = no filter).
    """

    show_prefabs: bool = True
    show_scenes: bool = True
    show_scripts: bool = True
    show_materials: bool = True
    show_textures: bool = True
    show_shaders: bool = True
    show_animations: bool = True
    show_audio: bool = True
    show_models: bool = True
    show_scriptable_objects: bool = True
    show_other: bool = True

    show_editor_only: bool = True
    show_resources_assets: bool = True
    show_missing_references: bool = True

    max_depth: int = Field(default=-1, ge=-1)
    min_file_size_bytes: int = Field(default=0, ge=0)

    model_config = {"validate_assignment": True}

    def should_show(self, node: Optional[AssetNode]) -> bool:
        """Check if a node passes every gate. Pure; None is never shown."""
        if node is None:
            return False

        if not self.get_filter(node.category):
            return False

        if not self.show_editor_only and node.is_editor_only:
            return False
        if not self.show_resources_assets and node.is_in_resources:
            return False
        if not self.show_missing_references and node.is_missing:
            return False

        if self.max_depth >= 0 and node.depth > self.max_depth:
            return False

        if self.min_file_size_bytes > 0 and node.size_bytes < self.min_file_size_bytes:
            return False

        return True

    def filter_nodes(self, nodes: Iterable[AssetNode]) -> List[AssetNode]:
        """Return the nodes that pass, preserving order."""
        return [node for node in nodes if self.should_show(node)]

    def get_filter(self, category: AssetCategory) -> bool:
        return getattr(self, CATEGORY_FIELDS.get(category, OTHER_FIELD))

    def set_filter(self, category: AssetCategory, value: bool) -> None:
        """Set the toggle gating ``category`` (the "other" toggle if it has none)."""
        setattr(self, CATEGORY_FIELDS.get(category, OTHER_FIELD), value)

    def show_all(self) -> None:
        """Show everything: all toggles on, thresholds cleared."""
        self._set_toggles(True)
        self.max_depth = -1
        self.min_file_size_bytes = 0

    def hide_all(self) -> None:
        """Hide everything: all toggles off, thresholds left as they are."""
        self._set_toggles(False)

    def _set_toggles(self, value: bool) -> None:
        for field_name in (*CATEGORY_FIELDS.values(), OTHER_FIELD, *SPECIAL_FIELDS):
            setattr(self, field_name, value)


__all__ = ["CATEGORY_FIELDS", "FilterSettings"]
