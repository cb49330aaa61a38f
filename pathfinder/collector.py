from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pathfinder.graph import Cost, NodeID
from pathfinder.state import SearchState

#: A complete path: node ids from source to destination.
PathTuple = Tuple[NodeID, ...]

#: Bound used before any complete path is known. Greater than every finite weight.
UNBOUNDED: float = math.inf


class PathRecordError(RuntimeError):
    """Raised when a newly found minimal path cannot be stored.

    The collector is left exactly as it was before the failed call.
    """


@dataclass(frozen=True)
class PathResult:
    """
    Immutable outcome of one (source, destination) query.

    Attributes:
        min_len: Minimum total weight, or None if the destination is unreachable.
        paths: Every simple path with total weight ``min_len``, in discovery order.
    """

    min_len: Optional[Cost]
    paths: Tuple[PathTuple, ...]

    @property
    def reachable(self) -> bool:
        return self.min_len is not None

    def __len__(self) -> int:
        return len(self.paths)


class PathCollector:
    """
    Accumulates all minimum-weight paths for one (source, destination) query.

    ``min_len`` starts unbounded and only ever decreases. Every stored path has
    total weight exactly ``min_len``; finding a strictly lighter path discards
    all previously stored ones.
    """

    def __init__(self, source: NodeID, destination: NodeID) -> None:
        self.source: NodeID = source
        self.destination: NodeID = destination
        self.min_len: Cost = UNBOUNDED
        self.paths: List[PathTuple] = []

    def admits(self, weight: Cost) -> bool:
        """
        Return True if a partial path of this weight may still yield a minimal path.

        The bound is inclusive so that paths tying the current minimum are
        still explored.
        """
        return weight <= self.min_len

    def consider(self, state: SearchState) -> None:
        """
        Offer the current path of ``state``, which must end at the destination.

        Args:
            state: Search state positioned on the destination node.

        Raises:
            PathRecordError: If the path could not be copied. Previously
                recorded paths and ``min_len`` are unchanged.
        """
        weight = state.weight
        if weight > self.min_len:
            return

        # Copy before touching stored results so a failure leaves them intact
        try:
            path = state.snapshot()
        except MemoryError as exc:
            raise PathRecordError(
                f"Could not record path {self.source} -> {self.destination} "
                f"of weight {weight}."
            ) from exc

        if weight < self.min_len:
            self.paths = []
            self.min_len = weight
        self.paths.append(path)

    def result(self) -> PathResult:
        """Return an immutable snapshot of the collected paths."""
        if not self.paths:
            return PathResult(min_len=None, paths=())
        return PathResult(min_len=self.min_len, paths=tuple(self.paths))

    def __repr__(self) -> str:
        return (
            f"PathCollector({self.source} -> {self.destination}, "
            f"min_len={self.min_len}, paths={len(self.paths)})"
        )
