"""Tests for the expansion/selection/position overlay."""

from assetgraph.graph.models.schema import AssetNode
from assetgraph.graph.view import ORIGIN, Position, ViewState


def test_nodes_start_collapsed_and_unselected() -> None:
    view = ViewState()
    node = AssetNode(uid="a", path="Assets/a.prefab")

    assert not view.is_expanded(node)
    assert view.selected is None
    assert view.position(node) == ORIGIN


def test_expansion_accepts_nodes_or_uids() -> None:
    view = ViewState()
    node = AssetNode(uid="a", path="Assets/a.prefab")

    view.expand(node)
    assert view.is_expanded("a")
    assert view.toggle_expanded("a") is False
    assert not view.is_expanded(node)
    assert view.toggle_expanded(node) is True

    view.set_many_expanded(["b", "c"], True)
    assert view.expanded == {"a", "b", "c"}
    view.set_many_expanded(["a", "b"], False)
    assert view.expanded == {"c"}


def test_single_selection() -> None:
    view = ViewState()
    view.select("a")
    view.select("b")

    assert view.selected == "b"
    assert view.is_selected("b") and not view.is_selected("a")
    view.clear_selection()
    assert not view.is_selected("b")


def test_positions_and_reset() -> None:
    view = ViewState()
    view.set_position("a", (10, 20))
    assert view.position("a") == Position(10, 20)

    view.set_positions({"b": Position(1.0, 2.0)})
    assert view.positions == {"b": Position(1.0, 2.0)}
    assert view.position("a") == ORIGIN

    view.expand("b")
    view.select("b")
    view.reset()
    assert view.expanded == set()
    assert view.selected is None
    assert view.positions == {}


def test_snapshots_are_copies() -> None:
    view = ViewState()
    view.expand("a")
    snapshot = view.expanded
    snapshot.add("z")
    assert not view.is_expanded("z")
