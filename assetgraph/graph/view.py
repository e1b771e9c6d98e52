"""Per-session view state overlay.

The graph model is immutable after construction. Everything a UI toggles
(expansion, selection, layout position) is kept here, keyed by node uid,
so the model can be read concurrently while the overlay changes.
"""

import logging
import threading
from typing import Dict, Iterable, NamedTuple, Optional, Set

from .models.schema import AssetNode

logger = logging.getLogger("assetgraph.graph.view")


class Position(NamedTuple):
    """2-D layout position (top-left corner of the node rectangle)."""

    x: float
    y: float


ORIGIN = Position(0.0, 0.0)


def _uid(node: "AssetNode | str") -> str:
    return node.uid if isinstance(node, AssetNode) else node


class ViewState:
    """Mutable expansion / selection / position overlay.

    Nodes are collapsed and unselected by default. Writes are serialized
    with a lock; callers should still route them through a single owner.
    """

    def __init__(self) -> None:
        self._expanded: Set[str] = set()
        self._selected: Optional[str] = None
        self._positions: Dict[str, Position] = {}
        self._lock = threading.RLock()

    def is_expanded(self, node: "AssetNode | str") -> bool:
        return _uid(node) in self._expanded

    def set_expanded(self, node: "AssetNode | str", expanded: bool) -> None:
        uid = _uid(node)
        with self._lock:
            if expanded:
                self._expanded.add(uid)
            else:
                self._expanded.discard(uid)

    def expand(self, node: "AssetNode | str") -> None:
        self.set_expanded(node, True)

    def collapse(self, node: "AssetNode | str") -> None:
        self.set_expanded(node, False)

    def toggle_expanded(self, node: "AssetNode | str") -> bool:
        """Flip the expansion flag and return the new value."""
        uid = _uid(node)
        with self._lock:
            expanded = uid not in self._expanded
            self.set_expanded(uid, expanded)
        return expanded

    def set_many_expanded(self, nodes: Iterable["AssetNode | str"], expanded: bool) -> None:
        with self._lock:
            for node in nodes:
                self.set_expanded(node, expanded)

    @property
    def expanded(self) -> Set[str]:
        """Snapshot of expanded uids."""
        return set(self._expanded)

    @property
    def selected(self) -> Optional[str]:
        """Uid of the selected node, if any."""
        return self._selected

    def is_selected(self, node: "AssetNode | str") -> bool:
        return self._selected is not None and self._selected == _uid(node)

    def select(self, node: "AssetNode | str") -> None:
        """Select a single node; any previous selection is dropped."""
        with self._lock:
            self._selected = _uid(node)

    def clear_selection(self) -> None:
        with self._lock:
            self._selected = None

    def position(self, node: "AssetNode | str") -> Position:
        """Last computed position, or the origin if never laid out."""
        return self._positions.get(_uid(node), ORIGIN)

    def set_position(self, node: "AssetNode | str", position: Position) -> None:
        with self._lock:
            self._positions[_uid(node)] = Position(*position)

    def set_positions(self, positions: Dict[str, Position]) -> None:
        """Replace all positions at once."""
        with self._lock:
            self._positions = dict(positions)

    @property
    def positions(self) -> Dict[str, Position]:
        return dict(self._positions)

    def reset(self) -> None:
        """Drop all view state, e.g. when a new root is loaded."""
        with self._lock:
            self._expanded.clear()
            self._selected = None
            self._positions.clear()
        logger.debug("View state reset")
