"""Exhaustive depth-first search for all minimum-weight simple paths.

Branches are pruned once their partial weight exceeds the best complete path
found so far. The bound is inclusive, so paths that tie the minimum are still
enumerated. Correctness of the pruning relies on non-negative edge weights.
"""

from __future__ import annotations

import inspect
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from pathfinder.collector import PathCollector, PathResult
from pathfinder.config import SEARCH_CONFIG, SearchConfig
from pathfinder.graph import Cost, NodeID, WeightMatrix
from pathfinder.logging import get_logger
from pathfinder.state import SearchState

logger = get_logger(__name__)


def explore(
    graph: WeightMatrix,
    node: NodeID,
    destination: NodeID,
    state: SearchState,
    collector: PathCollector,
    edge_weight: Cost = 0,
) -> None:
    """
    Visit ``node`` and recursively extend the current path towards ``destination``.

    On return ``state`` is exactly as it was before the call.

    Args:
        graph: Read-only graph accessor.
        node: Node to visit. Must not be on the current path.
        destination: Target node of the query.
        state: Current partial path.
        collector: Receives complete paths and supplies the pruning bound.
        edge_weight: Weight of the edge leading into ``node``.
    """
    with state.enter(node, edge_weight):
        if node == destination:
            collector.consider(state)
            return

        visited = state.visited
        for neighbor, weight in graph.neighbors(node):
            if visited[neighbor]:
                continue
            if not collector.admits(state.weight + weight):
                continue
            explore(graph, neighbor, destination, state, collector, weight)


@contextmanager
def _recursion_limit(required: int, ceiling: int) -> Iterator[None]:
    """Temporarily raise the interpreter recursion limit to ``required``."""
    previous = sys.getrecursionlimit()
    if required <= previous:
        yield
        return
    if required > ceiling:
        raise ValueError(
            f"Graph needs a recursion limit of {required}, above the configured "
            f"maximum of {ceiling}."
        )
    logger.debug(f"Raising recursion limit from {previous} to {required}")
    sys.setrecursionlimit(required)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def _stack_depth() -> int:
    depth = 0
    frame = inspect.currentframe()
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


def _check_node(graph: WeightMatrix, node: NodeID, role: str) -> None:
    if not 0 <= node < graph.size():
        raise ValueError(
            f"{role.capitalize()} node {node} is out of range for a graph of "
            f"{graph.size()} nodes."
        )


def run_search(
    graph: WeightMatrix,
    state: SearchState,
    collector: PathCollector,
    config: Optional[SearchConfig] = None,
) -> None:
    """
    Run the explorer for ``collector``'s query using a caller-supplied state.

    Args:
        graph: Read-only graph accessor.
        state: Empty search state sized for ``graph``.
        collector: Fresh collector for the (source, destination) pair.
        config: Search configuration; defaults to SEARCH_CONFIG.

    Raises:
        ValueError: If the source or destination is out of range, or the
            graph is too large for the configured recursion ceiling.
        PathRecordError: If a minimal path could not be stored.
    """
    config = config or SEARCH_CONFIG
    _check_node(graph, collector.source, "source")
    _check_node(graph, collector.destination, "destination")

    required = _stack_depth() + config.required_recursion_limit(graph.size())
    with _recursion_limit(required, config.max_recursion_limit):
        explore(graph, collector.source, collector.destination, state, collector)


def find_min_paths(
    graph: WeightMatrix,
    source: NodeID,
    destination: NodeID,
    config: Optional[SearchConfig] = None,
) -> PathResult:
    """
    Find every simple path of minimum total weight from ``source`` to ``destination``.

    Args:
        graph: Read-only graph accessor with non-negative weights.
        source: Start node.
        destination: End node. If equal to ``source`` the result is the
            single one-node path with weight 0.
        config: Search configuration; defaults to SEARCH_CONFIG.

    Returns:
        PathResult with ``min_len`` None and no paths if ``destination`` is
        unreachable.

    Raises:
        ValueError: If ``source`` or ``destination`` is out of range.
        PathRecordError: If a minimal path could not be stored.
    """
    state = SearchState(graph.size())
    collector = PathCollector(source, destination)
    run_search(graph, state, collector, config)
    result = collector.result()
    logger.debug(
        f"Query {graph.label(source)} -> {graph.label(destination)}: "
        f"min_len={result.min_len}, {len(result.paths)} path(s)"
    )
    return result
