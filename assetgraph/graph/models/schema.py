"""Canonical graph schema models.

This module defines the closed sets of asset categories and dependency
kinds, and the immutable node/edge records stored by DependencyGraph.
View state (expansion, selection, position) is deliberately absent here;
it lives in :mod:`assetgraph.graph.view`.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import PurePosixPath
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger("assetgraph.graph.models.schema")


class AssetCategory(str, Enum):
    """Classification of an asset's kind.

    Used both for visual grouping and for filter gating. Categories that
    do not have an individual filter toggle fall under the "other" gate.
    """

    UNKNOWN = "unknown"
    PREFAB = "prefab"
    SCENE = "scene"
    SCRIPT = "script"
    MATERIAL = "material"
    TEXTURE = "texture"
    SHADER = "shader"
    ANIMATION = "animation"
    AUDIO = "audio"
    MODEL = "model"
    SCRIPTABLE_OBJECT = "scriptable_object"
    FONT = "font"
    VIDEO_CLIP = "video_clip"
    ADDRESSABLE = "addressable"
    SUB_ASSET = "sub_asset"
    FOLDER = "folder"

    @property
    def label(self) -> str:
        """Human-readable category name (e.g. ``Scriptable Object``)."""
        return self.value.replace("_", " ").title()


class DependencyKind(str, Enum):
    """Why one asset references another."""

    DIRECT = "direct"  # standard serialized reference
    SERIALIZED_FIELD = "serialized_field"
    MATERIAL_PROPERTY = "material_property"  # texture/shader used by a material
    SHADER_INCLUDE = "shader_include"
    ANIMATOR_STATE = "animator_state"
    SCENE_HIERARCHY = "scene_hierarchy"  # prefab placed in a scene
    RESOURCES = "resources"  # loaded at runtime from a Resources folder
    ADDRESSABLE = "addressable"


class AssetNode(BaseModel):
    """One asset in the dependency graph.

    Nodes are immutable once created: the depth is fixed at first
    discovery and the health flags are computed from provider metadata.
    Equality and hashing follow the stable unique id, never the name.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    uid: Annotated[str, Field(..., description="Stable unique asset id (e.g. GUID)")]
    path: Annotated[str, Field(..., description="Originating path / locator")]
    name: Annotated[
        str,
        Field(default="", description="Display name; defaults to file stem of path"),
    ]
    category: Annotated[AssetCategory, Field(default=AssetCategory.UNKNOWN)]
    type_name: Annotated[
        Optional[str],
        Field(default=None, description="Provider type information, if known"),
    ]
    depth: Annotated[
        int,
        Field(default=0, ge=0, description="Hops from root along first discovery"),
    ]

    # Health indicators
    is_missing: bool = False
    is_editor_only: bool = False
    is_in_resources: bool = False
    is_addressable: bool = False
    size_bytes: Annotated[int, Field(default=0, ge=0)]

    @field_validator("uid", "path")
    @classmethod
    def _check_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Node uid and path must be non-empty strings")
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("path"):
            data = {**data, "name": PurePosixPath(str(data["path"])).stem}
        return data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AssetNode):
            return self.uid == other.uid
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.uid)


class DependencyEdge(BaseModel):
    """Directed relationship between two nodes, addressed by uid."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: Annotated[str, Field(..., description="Source node uid")]
    target: Annotated[str, Field(..., description="Target node uid")]
    kind: Annotated[DependencyKind, Field(default=DependencyKind.DIRECT)]
    property_name: Annotated[
        Optional[str],
        Field(default=None, description="Property / slot that produced the reference"),
    ]

    def reversed(self) -> "DependencyEdge":
        """Return the mirrored edge as registered on the target's dependents."""
        return DependencyEdge(
            source=self.target,
            target=self.source,
            kind=self.kind,
            property_name=self.property_name,
        )


__all__ = ["AssetCategory", "AssetNode", "DependencyEdge", "DependencyKind"]
