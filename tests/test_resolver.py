"""Tests for dependency resolution."""

from __future__ import annotations

import logging
from typing import List, Optional

import pytest

from assetgraph.config.schema import ResolverConfig
from assetgraph.graph.models.schema import DependencyKind
from assetgraph.providers.base import MetadataError
from assetgraph.providers.memory import InMemoryMetadataProvider
from assetgraph.runtime.progress import ResolveCancelled, ResolveMonitor
from assetgraph.runtime.resolver import DependencyResolver


def _edge_pairs(graph) -> set[tuple[str, str]]:
    return {(edge.source, edge.target) for edge in graph.edges()}


def test_resolve_scenario_deduplicates_and_fixes_first_discovery_depth(scenario_provider) -> None:
    """Shared texture is one node; its depth comes from the root's listing."""
    graph = DependencyResolver(scenario_provider).resolve("Assets/R.prefab")

    assert graph is not None
    assert {node.uid for node in graph.nodes()} == {
        "uid-R", "uid-P", "uid-T", "uid-M", "uid-S",
    }
    assert _edge_pairs(graph) == {
        ("uid-R", "uid-P"),
        ("uid-R", "uid-T"),
        ("uid-P", "uid-T"),
        ("uid-P", "uid-M"),
        ("uid-M", "uid-T"),
        ("uid-M", "uid-S"),
    }
    depths = {node.uid: node.depth for node in graph.nodes()}
    assert depths == {"uid-R": 0, "uid-P": 1, "uid-T": 1, "uid-M": 2, "uid-S": 3}


def test_shared_target_is_single_instance(scenario_provider) -> None:
    """Every parent's edge points at the very same node object."""
    graph = DependencyResolver(scenario_provider).resolve("Assets/R.prefab")
    assert graph is not None

    texture = graph.get("uid-T")
    referrers = [graph.get("uid-R"), graph.get("uid-P"), graph.get("uid-M")]
    for referrer in referrers:
        targets = graph.dependency_nodes(referrer)
        assert any(target is texture for target in targets)
    assert len(graph) == 5


def test_dependency_order_follows_provider(scenario_provider) -> None:
    graph = DependencyResolver(scenario_provider).resolve("Assets/R.prefab")
    assert graph is not None
    root = graph.root

    assert [edge.target for edge in graph.dependencies(root)] == ["uid-P", "uid-T"]
    # Dependents are reported from the texture's side: (texture, referrer).
    assert [edge.target for edge in graph.dependents(graph.get("uid-T"))] == [
        "uid-R", "uid-P", "uid-M",
    ]


def test_cycle_terminates_with_mutual_edges(make_provider) -> None:
    """A -> B -> A resolves to exactly two nodes and both edges."""
    provider = make_provider({"Assets/A.asset": ["Assets/B.asset"], "Assets/B.asset": ["Assets/A.asset"]})

    graph = DependencyResolver(provider).resolve("Assets/A.asset")

    assert graph is not None
    assert graph.node_count() == 2
    assert _edge_pairs(graph) == {("uid-A", "uid-B"), ("uid-B", "uid-A")}
    assert graph.get("uid-A").depth == 0
    assert graph.get("uid-B").depth == 1


def test_root_depth_is_zero(scenario_provider) -> None:
    graph = DependencyResolver(scenario_provider).resolve("Assets/P.prefab")
    assert graph is not None
    assert graph.root.depth == 0
    assert graph.root.uid == "uid-P"


def test_max_depth_zero_yields_root_without_dependencies(scenario_provider) -> None:
    graph = DependencyResolver(scenario_provider).resolve("Assets/R.prefab", max_depth=0)

    assert graph is not None
    assert graph.dependencies(graph.root) == []
    assert graph.node_count() == 1


def test_max_depth_limits_expansion(scenario_provider) -> None:
    """Nodes at the budget depth are created but not expanded."""
    graph = DependencyResolver(scenario_provider).resolve("Assets/R.prefab", max_depth=1)

    assert graph is not None
    assert {node.uid for node in graph.nodes()} == {"uid-R", "uid-P", "uid-T"}
    assert graph.dependencies(graph.get("uid-P")) == []


def test_max_depth_counts_hops_of_the_walked_path(make_provider) -> None:
    """E is cut off on A-B-D-E but still expanded through the shorter A-C-E."""
    provider = make_provider(
        {
            "Assets/A.asset": ["Assets/B.asset", "Assets/C.asset"],
            "Assets/B.asset": ["Assets/D.asset"],
            "Assets/D.asset": ["Assets/E.asset"],
            "Assets/C.asset": ["Assets/E.asset"],
            "Assets/E.asset": ["Assets/F.asset"],
            "Assets/F.asset": ["Assets/G.asset"],
        }
    )

    graph = DependencyResolver(provider).resolve("Assets/A.asset", max_depth=3)

    assert graph is not None
    uids = [node.uid for node in graph.nodes()]
    assert "uid-F" in uids
    assert "uid-G" not in uids
    assert ("uid-E", "uid-F") in _edge_pairs(graph)
    # Stored depths stay first-discovery depths.
    assert graph.get("uid-E").depth == 3
    assert graph.get("uid-F").depth == 4


def test_max_depth_defaults_to_config(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider, ResolverConfig(max_depth=0))
    graph = resolver.resolve("Assets/R.prefab")
    assert graph is not None
    assert graph.node_count() == 1


def test_every_forward_edge_has_inverse(scenario_provider) -> None:
    graph = DependencyResolver(scenario_provider).resolve("Assets/R.prefab")
    assert graph is not None

    for node in graph.nodes():
        for edge in graph.dependencies(node):
            inverse = graph.dependents(graph.get(edge.target))
            assert any(
                inv.source == edge.target and inv.target == edge.source and inv.kind == edge.kind
                for inv in inverse
            )


def test_depth_is_not_revised_by_shorter_later_path(make_provider) -> None:
    """E is first found at depth 3 via B/D and stays there when C reaches it at 2."""
    provider = make_provider(
        {
            "Assets/A.asset": ["Assets/B.asset", "Assets/C.asset"],
            "Assets/B.asset": ["Assets/D.asset"],
            "Assets/D.asset": ["Assets/E.asset"],
            "Assets/C.asset": ["Assets/E.asset"],
        }
    )

    graph = DependencyResolver(provider).resolve("Assets/A.asset")

    assert graph is not None
    assert graph.get("uid-E").depth == 3
    assert ("uid-C", "uid-E") in _edge_pairs(graph)


def test_self_reference_is_skipped(make_provider) -> None:
    provider = make_provider({"Assets/A.asset": ["Assets/A.asset", "Assets/B.asset"]})

    graph = DependencyResolver(provider).resolve("Assets/A.asset")

    assert graph is not None
    assert _edge_pairs(graph) == {("uid-A", "uid-B")}


def test_reserved_prefixes_are_never_traversed(make_provider) -> None:
    provider = make_provider(
        {
            "Assets/A.prefab": [
                "Resources/unity_builtin_extra",
                "Library/unity default resources",
                "Assets/B.mat",
            ]
        }
    )

    graph = DependencyResolver(provider).resolve("Assets/A.prefab")

    assert graph is not None
    assert [node.path for node in graph.nodes()] == ["Assets/A.prefab", "Assets/B.mat"]


def test_missing_root_returns_none_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    resolver = DependencyResolver(InMemoryMetadataProvider())

    with caplog.at_level(logging.WARNING, logger="assetgraph.runtime.resolver"):
        assert resolver.resolve("Assets/Nope.prefab") is None
        assert resolver.resolve("") is None

    assert "Asset not found: Assets/Nope.prefab" in caplog.text
    assert resolver.graph is None


def test_untyped_dependency_is_flagged_missing_and_not_expanded() -> None:
    provider = InMemoryMetadataProvider()
    provider.add_asset("Assets/A.prefab")
    provider.add_asset("Assets/Broken.mat", type_name=None, dependencies=["Assets/C.png"])
    provider.add_asset("Assets/C.png")
    provider.add_dependency("Assets/A.prefab", "Assets/Broken.mat")

    graph = DependencyResolver(provider).resolve("Assets/A.prefab")

    assert graph is not None
    broken = graph.get_by_path("Assets/Broken.mat")
    assert broken.is_missing
    assert graph.dependencies(broken) == []
    assert graph.get_by_path("Assets/C.png") is None


class _FlakyProvider(InMemoryMetadataProvider):
    """Raises MetadataError for selected paths."""

    def __init__(self, broken_sizes: List[str], broken_deps: List[str]) -> None:
        super().__init__()
        self.broken_sizes = broken_sizes
        self.broken_deps = broken_deps

    def get_size(self, path: str) -> int:
        if path in self.broken_sizes:
            raise MetadataError(f"cannot stat {path}")
        return super().get_size(path)

    def get_direct_dependencies(self, path: str) -> List[str]:
        if path in self.broken_deps:
            raise MetadataError(f"cannot read {path}")
        return super().get_direct_dependencies(path)


def test_metadata_errors_become_missing_nodes() -> None:
    provider = _FlakyProvider(broken_sizes=["Assets/B.mat"], broken_deps=["Assets/C.prefab"])
    provider.add_dependency("Assets/A.prefab", "Assets/B.mat")
    provider.add_dependency("Assets/A.prefab", "Assets/C.prefab")
    provider.add_dependency("Assets/C.prefab", "Assets/D.png")

    graph = DependencyResolver(provider).resolve("Assets/A.prefab")

    assert graph is not None
    assert graph.get_by_path("Assets/B.mat").is_missing
    # Unreadable dependency list: node kept, nothing below it.
    assert not graph.get_by_path("Assets/C.prefab").is_missing
    assert graph.get_by_path("Assets/D.png") is None


def test_paths_sharing_a_uid_resolve_to_one_node() -> None:
    provider = InMemoryMetadataProvider()
    provider.add_asset("Assets/A.prefab", dependencies=["Assets/tex.png", "Assets/alias.png"])
    provider.add_asset("Assets/tex.png", uid="guid-tex")
    provider.add_asset("Assets/alias.png", uid="guid-tex")

    graph = DependencyResolver(provider).resolve("Assets/A.prefab")

    assert graph is not None
    assert graph.node_count() == 2
    assert graph.get_by_path("Assets/alias.png") is graph.get("guid-tex")
    assert graph.edge_count() == 1


def test_edge_kind_classification(make_provider) -> None:
    provider = make_provider(
        {
            "Assets/Level.unity": [
                "Assets/Hero.prefab",
                "Assets/Resources/Loot.asset",
                "Assets/Walk.controller",
            ],
            "Assets/Hero.prefab": ["Assets/HeroSkin.mat"],
            "Assets/HeroSkin.mat": ["Assets/HeroAlbedo.png", "Assets/Toon.shader"],
            "Assets/Toon.shader": ["Assets/Lighting.shader"],
            "Assets/Walk.controller": ["Assets/WalkCycle.anim"],
        }
    )

    graph = DependencyResolver(provider).resolve("Assets/Level.unity")
    assert graph is not None
    kinds = {(e.source, e.target): e.kind for e in graph.edges()}

    assert kinds[("uid-Level", "uid-Hero")] is DependencyKind.SCENE_HIERARCHY
    assert kinds[("uid-Level", "uid-Loot")] is DependencyKind.RESOURCES
    assert kinds[("uid-Level", "uid-Walk")] is DependencyKind.DIRECT
    assert kinds[("uid-Hero", "uid-HeroSkin")] is DependencyKind.DIRECT
    assert kinds[("uid-HeroSkin", "uid-HeroAlbedo")] is DependencyKind.MATERIAL_PROPERTY
    assert kinds[("uid-HeroSkin", "uid-Toon")] is DependencyKind.MATERIAL_PROPERTY
    assert kinds[("uid-Toon", "uid-Lighting")] is DependencyKind.SHADER_INCLUDE
    assert kinds[("uid-Walk", "uid-WalkCycle")] is DependencyKind.ANIMATOR_STATE
    assert graph.get("uid-Loot").is_in_resources


def test_resolve_reverse_sweeps_catalog(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider)
    graph = resolver.resolve("Assets/R.prefab")
    assert graph is not None

    dependents = resolver.resolve_reverse("Assets/T.png")

    assert sorted(node.uid for node in dependents) == ["uid-M", "uid-P", "uid-R"]
    # Nodes of the current graph are reused, not rebuilt.
    assert all(node is graph.get(node.uid) for node in dependents)


def test_resolve_reverse_without_graph_returns_detached_nodes(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider)

    dependents = resolver.resolve_reverse("Assets/M.mat")

    assert [node.path for node in dependents] == ["Assets/P.prefab"]
    assert resolver.get_all_nodes() == []


def test_clear_cache_discards_previous_graph(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider)
    resolver.resolve("Assets/R.prefab")
    assert len(resolver.get_all_nodes()) == 5

    resolver.clear_cache()

    assert resolver.get_all_nodes() == []
    assert resolver.graph is None


def test_new_resolve_does_not_leak_previous_root(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider)
    resolver.resolve("Assets/R.prefab")

    graph = resolver.resolve("Assets/M.mat")

    assert graph is not None
    assert {node.uid for node in graph.nodes()} == {"uid-M", "uid-T", "uid-S"}
    assert graph.get("uid-M").depth == 0
    assert {node.uid for node in resolver.get_all_nodes()} == {"uid-M", "uid-T", "uid-S"}


def test_deep_chain_does_not_hit_recursion_limit(make_provider) -> None:
    chain = {f"Assets/N{i}.asset": [f"Assets/N{i + 1}.asset"] for i in range(3000)}
    provider = make_provider(chain)

    graph = DependencyResolver(provider).resolve("Assets/N0.asset")

    assert graph is not None
    assert graph.node_count() == 3001
    assert graph.get("uid-N3000").depth == 3000


def test_progress_monitor_reports_each_expanded_node(scenario_provider) -> None:
    seen: List[tuple[str, int]] = []
    monitor = ResolveMonitor(on_node=lambda path, count: seen.append((path, count)))

    DependencyResolver(scenario_provider).resolve("Assets/R.prefab", monitor=monitor)

    assert [path for path, _ in seen] == [
        "Assets/R.prefab",
        "Assets/P.prefab",
        "Assets/T.png",
        "Assets/M.mat",
        "Assets/S.shader",
    ]
    assert seen[-1][1] == 5
    assert monitor.visited == 5
    assert monitor.elapsed >= 0.0


def test_cancel_aborts_resolve_and_discards_partial_graph(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider)
    monitor: Optional[ResolveMonitor] = None

    def _cancel_after_two(path: str, count: int) -> None:
        if count == 2:
            monitor.cancel()

    monitor = ResolveMonitor(on_node=_cancel_after_two)

    with pytest.raises(ResolveCancelled) as excinfo:
        resolver.resolve("Assets/R.prefab", monitor=monitor)

    assert excinfo.value.root_path == "Assets/R.prefab"
    assert excinfo.value.visited == 2
    assert resolver.graph is None
    assert resolver.get_all_nodes() == []


def test_resolve_is_not_reentrant(scenario_provider) -> None:
    resolver = DependencyResolver(scenario_provider)

    class _Reentrant(InMemoryMetadataProvider):
        def get_direct_dependencies(self, path: str) -> List[str]:
            resolver.resolve("Assets/R.prefab")
            return []

    reentrant = _Reentrant()
    reentrant.add_asset("Assets/X.asset")
    resolver.provider = reentrant

    with pytest.raises(RuntimeError, match="not re-entrant"):
        resolver.resolve("Assets/X.asset")

    # The guard is released afterwards.
    resolver.provider = scenario_provider
    assert resolver.resolve("Assets/R.prefab") is not None


def test_pending_cancel_aborts_at_first_node(scenario_provider) -> None:
    monitor = ResolveMonitor()
    monitor.cancel()

    with pytest.raises(ResolveCancelled) as excinfo:
        DependencyResolver(scenario_provider).resolve("Assets/R.prefab", monitor=monitor)

    assert excinfo.value.visited == 0
