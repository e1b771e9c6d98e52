"""Cooperative progress and cancellation hook for long resolves.

An interactive caller hands a ResolveMonitor to the resolver, then either
watches the progress callback or sets the cancel event from another
thread. The resolver polls the monitor once per expanded node.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger("assetgraph.runtime.progress")

ProgressCallback = Callable[[str, int], None]


class ResolveCancelled(Exception):
    """Raised out of ``resolve`` when the caller cancelled the traversal."""

    def __init__(self, root_path: str, visited: int) -> None:
        super().__init__(f"Resolve of {root_path} cancelled after {visited} nodes")
        self.root_path = root_path
        self.visited = visited


@dataclass
class ResolveMonitor:
    """Progress/cancellation channel for a single resolve call.

    Attributes:
        on_node: Called with (path, visited_count) each time a node is expanded.
        cancel_event: Set it to abort the traversal.
        visited: Number of nodes expanded so far.
    """

    on_node: Optional[ProgressCallback] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)
    visited: int = 0
    start_time: float = field(default_factory=time.monotonic)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def reset(self) -> None:
        """Restart counters for a new resolve. A pending cancel is kept."""
        self.visited = 0
        self.start_time = time.monotonic()

    def node_visited(self, path: str) -> None:
        """Record one expanded node and notify the callback."""
        self.visited += 1
        if self.on_node is not None:
            self.on_node(path, self.visited)


__all__ = ["ProgressCallback", "ResolveCancelled", "ResolveMonitor"]
