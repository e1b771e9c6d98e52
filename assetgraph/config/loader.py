"""Load GraphSettings from a file, a mapping, or an inline TOML/JSON string."""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .schema import GraphSettings

logger = logging.getLogger("assetgraph.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]

_SUFFIX_FORMATS = {".toml": "toml", ".json": "json"}
_TOML_TABLE_RE = re.compile(r"^\[{1,2}\s*[A-Za-z_][\w.\-\s\"']*\]{1,2}\s*(#.*)?$")


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    if stripped.startswith("{"):
        return "json"
    if stripped.startswith("["):
        # "[layout]" opens a TOML table; "[1, 2]" is a JSON array.
        first_line = stripped.splitlines()[0].strip()
        return "toml" if _TOML_TABLE_RE.match(first_line) else "json"
    return "toml"


def _is_config_file(source: Union[str, Path]) -> bool:
    if isinstance(source, str) and "\n" in source:
        return False
    try:
        return Path(source).is_file()
    except OSError:
        # e.g. an inline string longer than the platform's name limit
        return False


def _read_source(source: Union[str, Path]) -> Tuple[str, str]:
    """Return (text, format) for a settings file or an inline string."""
    if not _is_config_file(source):
        text = str(source)
        fmt = _detect_format(text)
        logger.info("Loading inline %s settings", fmt)
        return text, fmt

    path = Path(source)
    text = path.read_text(encoding="utf-8")
    fmt = _SUFFIX_FORMATS.get(path.suffix.lower()) or _detect_format(text)
    logger.info("Loading settings from %s (%s)", path, fmt)
    return text, fmt


def load_graph_settings(source: ConfigSource) -> GraphSettings:
    """Build GraphSettings from ``source``.

    Args:
        source: None for defaults, an already-parsed mapping, a path to a
            ``.toml``/``.json`` file, or inline TOML/JSON text.

    Returns:
        GraphSettings instance.

    Raises:
        TypeError: If ``source`` has an unsupported type.
        ValueError: If the parsed document is not a mapping.
        ValidationError: If a setting is out of range.
    """
    if source is None:
        return GraphSettings()
    if isinstance(source, dict):
        return GraphSettings.from_dict(source)
    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported settings source: {type(source)!r}")

    text, fmt = _read_source(source)
    data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Settings document must be a mapping at the top level")
    return GraphSettings.from_dict(data)


__all__ = ["load_graph_settings"]
