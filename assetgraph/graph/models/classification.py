"""Constant lookup tables for asset and edge classification.

Categories are derived from the file extension; dependency kinds are
derived from the (source category, target category) pair plus the
target's reserved-folder flag. Rules are evaluated top to bottom and the
first match wins.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Callable, Dict, Tuple

from .schema import AssetCategory, AssetNode, DependencyKind

# Candidates under these namespaces are engine built-ins or generated data
# and are never traversed.
RESERVED_PREFIXES: Tuple[str, ...] = ("Resources/", "Library/")

EDITOR_FOLDER = "Editor/"
RESOURCES_FOLDER_MARKER = "/Resources/"

EXTENSION_CATEGORIES: Dict[str, AssetCategory] = {
    ".prefab": AssetCategory.PREFAB,
    ".unity": AssetCategory.SCENE,
    ".cs": AssetCategory.SCRIPT,
    ".mat": AssetCategory.MATERIAL,
    ".png": AssetCategory.TEXTURE,
    ".jpg": AssetCategory.TEXTURE,
    ".jpeg": AssetCategory.TEXTURE,
    ".tga": AssetCategory.TEXTURE,
    ".psd": AssetCategory.TEXTURE,
    ".exr": AssetCategory.TEXTURE,
    ".hdr": AssetCategory.TEXTURE,
    ".shader": AssetCategory.SHADER,
    ".shadergraph": AssetCategory.SHADER,
    ".shadersubgraph": AssetCategory.SHADER,
    ".anim": AssetCategory.ANIMATION,
    ".controller": AssetCategory.ANIMATION,
    ".overridecontroller": AssetCategory.ANIMATION,
    ".wav": AssetCategory.AUDIO,
    ".mp3": AssetCategory.AUDIO,
    ".ogg": AssetCategory.AUDIO,
    ".aiff": AssetCategory.AUDIO,
    ".fbx": AssetCategory.MODEL,
    ".obj": AssetCategory.MODEL,
    ".blend": AssetCategory.MODEL,
    ".3ds": AssetCategory.MODEL,
    ".dae": AssetCategory.MODEL,
    ".asset": AssetCategory.SCRIPTABLE_OBJECT,
    ".ttf": AssetCategory.FONT,
    ".otf": AssetCategory.FONT,
    ".fontsettings": AssetCategory.FONT,
    ".mp4": AssetCategory.VIDEO_CLIP,
    ".mov": AssetCategory.VIDEO_CLIP,
    ".webm": AssetCategory.VIDEO_CLIP,
    ".avi": AssetCategory.VIDEO_CLIP,
}

# (source category, target category, target in reserved folder) -> match
EdgeRule = Tuple[Callable[[AssetCategory, AssetCategory, bool], bool], DependencyKind]

EDGE_KIND_RULES: Tuple[EdgeRule, ...] = (
    (
        lambda src, dst, _res: src is AssetCategory.MATERIAL
        and dst in (AssetCategory.TEXTURE, AssetCategory.SHADER),
        DependencyKind.MATERIAL_PROPERTY,
    ),
    (lambda src, _dst, _res: src is AssetCategory.SHADER, DependencyKind.SHADER_INCLUDE),
    (lambda src, _dst, _res: src is AssetCategory.ANIMATION, DependencyKind.ANIMATOR_STATE),
    (
        lambda src, dst, _res: src is AssetCategory.SCENE and dst is AssetCategory.PREFAB,
        DependencyKind.SCENE_HIERARCHY,
    ),
    (lambda _src, _dst, res: res, DependencyKind.RESOURCES),
)


def categorize_path(path: str) -> AssetCategory:
    """Map a path to its category by extension (case-insensitive)."""
    suffix = PurePosixPath(path).suffix.lower()
    return EXTENSION_CATEGORIES.get(suffix, AssetCategory.UNKNOWN)


def is_reserved_path(path: str) -> bool:
    """Return True for candidates that must never be traversed."""
    return path.startswith(RESERVED_PREFIXES)


def is_editor_only_path(path: str) -> bool:
    """Editor-only assets live in an ``Editor`` folder at any level."""
    return f"/{EDITOR_FOLDER}" in path or path.startswith(EDITOR_FOLDER)


def is_resources_path(path: str) -> bool:
    """Assets under a ``Resources`` folder are loaded dynamically at runtime."""
    return RESOURCES_FOLDER_MARKER in path


def classify_dependency(source: AssetNode, target: AssetNode) -> DependencyKind:
    """Classify the edge ``source -> target``; defaults to DIRECT."""
    return classify_categories(source.category, target.category, target.is_in_resources)


def classify_categories(
    source: AssetCategory,
    target: AssetCategory,
    target_in_resources: bool = False,
) -> DependencyKind:
    for matches, kind in EDGE_KIND_RULES:
        if matches(source, target, target_in_resources):
            return kind
    return DependencyKind.DIRECT


__all__ = [
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
