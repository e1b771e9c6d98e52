"""Shared fixtures for assetgraph tests."""

from __future__ import annotations

from typing import Callable, Dict, List

import pytest

from assetgraph.providers.memory import InMemoryMetadataProvider

ProviderFactory = Callable[..., InMemoryMetadataProvider]


def _build_provider(edges: Dict[str, List[str]], **sizes: int) -> InMemoryMetadataProvider:
    """Create a provider whose uids are ``uid-<file stem>``."""
    provider = InMemoryMetadataProvider()
    paths = set(edges)
    for targets in edges.values():
        paths.update(targets)
    for path in sorted(paths):
        stem = path.rsplit("/", 1)[-1].split(".", 1)[0]
        provider.add_asset(path, uid=f"uid-{stem}", size=sizes.get(stem, 100))
    for source, targets in edges.items():
        for target in targets:
            provider.add_dependency(source, target)
    return provider


@pytest.fixture
def make_provider() -> ProviderFactory:
    """Factory building an in-memory provider from an adjacency dict."""
    return _build_provider


@pytest.fixture
def scenario_provider() -> InMemoryMetadataProvider:
    """R -> {P, T}; P -> {T, M}; M -> {T, S}."""
    return _build_provider(
        {
            "Assets/R.prefab": ["Assets/P.prefab", "Assets/T.png"],
            "Assets/P.prefab": ["Assets/T.png", "Assets/M.mat"],
            "Assets/M.mat": ["Assets/T.png", "Assets/S.shader"],
        }
    )
