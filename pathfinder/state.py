"""Per-query mutable search state with scoped backtracking."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Tuple

from pathfinder.graph import Cost, NodeID


class SearchState:
    """
    Current partial path of one depth-first search.

    Attributes:
        visited: One flag per node; ``visited[n]`` is True iff ``n`` is on ``path``.
        path: Node ids from the source to the current node.
        weight: Sum of edge weights along ``path``.

    Every ``push`` must be matched by exactly one ``pop`` in LIFO order. The
    ``enter`` context manager does the pairing, so when a recursive subtree
    returns (normally or by exception) the state is identical to the state
    before entering it.

    A state belongs to one (source, destination) query and is discarded with
    it.
    """

    def __init__(self, size: int) -> None:
        self.visited: List[bool] = [False] * size
        self.path: List[NodeID] = []
        self.weight: Cost = 0
        # Weight before each push, so pop restores it exactly even for floats
        self._prior_weights: List[Cost] = []

    @property
    def path_index(self) -> int:
        return len(self.path)

    @property
    def current(self) -> NodeID:
        """Return the last node on the path.

        Raises:
            IndexError: If the path is empty.
        """
        return self.path[-1]

    def push(self, node: NodeID, edge_weight: Cost = 0) -> None:
        """
        Append ``node`` to the path.

        Args:
            node: Node to visit. Must not already be on the path.
            edge_weight: Weight of the edge leading into ``node``.

        Raises:
            ValueError: If ``node`` is already visited.
        """
        if self.visited[node]:
            raise ValueError(f"Node {node} is already on the current path.")
        self.visited[node] = True
        self.path.append(node)
        self._prior_weights.append(self.weight)
        self.weight += edge_weight

    def pop(self) -> NodeID:
        """
        Remove the last node from the path; the inverse of ``push``.

        The weight is restored to its value before the matching ``push``.

        Returns:
            The removed node.

        Raises:
            IndexError: If the path is empty.
        """
        if not self.path:
            raise IndexError("pop from empty search state")
        node = self.path.pop()
        self.visited[node] = False
        self.weight = self._prior_weights.pop()
        return node

    @contextmanager
    def enter(self, node: NodeID, edge_weight: Cost = 0) -> Iterator[SearchState]:
        """
        Visit ``node`` for the duration of a ``with`` block.

        The node is pushed on entry and popped on every exit path.
        """
        self.push(node, edge_weight)
        try:
            yield self
        finally:
            self.pop()

    def snapshot(self) -> Tuple[NodeID, ...]:
        """Return a copy of the current path."""
        return tuple(self.path)

    def __repr__(self) -> str:
        return f"SearchState(path={self.path}, weight={self.weight})"
