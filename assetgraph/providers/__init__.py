"""Metadata providers feeding the dependency resolver."""

from .base import MetadataError, MetadataProvider, RecoverableError
from .memory import AssetRecord, InMemoryMetadataProvider
from .unity import MISSING_PREFIX, UnityProjectProvider

__all__ = [
    "AssetRecord",
    "InMemoryMetadataProvider",
    "MISSING_PREFIX",
    "MetadataError",
    "MetadataProvider",
    "RecoverableError",
    "UnityProjectProvider",
]
