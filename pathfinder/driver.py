"""Query driver: run the explorer for every ordered pair of an ordered node list."""

from __future__ import annotations

import os
import pickle
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from pathfinder.collector import PathCollector, PathRecordError, PathResult
from pathfinder.config import SEARCH_CONFIG, SearchConfig
from pathfinder.explorer import run_search
from pathfinder.graph import NodeID, WeightMatrix
from pathfinder.logging import get_logger, level_name, set_level_from_name
from pathfinder.state import SearchState

logger = get_logger(__name__)

_LOG_LEVEL_ENV = "PATHFINDER_LOG_LEVEL"


@dataclass(frozen=True)
class QueryResult:
    """Result of one (source, destination) query as handed to reporters."""

    source: NodeID
    destination: NodeID
    result: PathResult


#: Callable receiving each QueryResult once, in pair order.
Reporter = Callable[[QueryResult], None]


def iter_pairs(nodes: Sequence[NodeID]) -> Iterator[Tuple[NodeID, NodeID]]:
    """
    Yield (source, destination) for every destination listed after its source.

    Order follows ``nodes``: all pairs of ``nodes[0]`` first, then ``nodes[1]``
    and so on.
    """
    for i, source in enumerate(nodes):
        for destination in nodes[i + 1 :]:
            yield source, destination


def _execute_query(
    graph: WeightMatrix,
    source: NodeID,
    destination: NodeID,
    config: SearchConfig,
) -> Tuple[QueryResult, Optional[PathRecordError]]:
    """Run one query with its own state and collector.

    On PathRecordError the collector's consistent partial result is returned
    alongside the error.
    """
    state = SearchState(graph.size())
    collector = PathCollector(source, destination)
    error: Optional[PathRecordError] = None
    try:
        run_search(graph, state, collector, config)
    except PathRecordError as exc:
        error = exc
    return QueryResult(source, destination, collector.result()), error


# Graph shared by worker processes, set by _worker_init
_shared_graph: Optional[WeightMatrix] = None
_shared_config: Optional[SearchConfig] = None


def _worker_init(graph_pickle: bytes, config: SearchConfig) -> None:
    """Deserialize the shared graph once per worker process."""
    global _shared_graph, _shared_config

    _shared_graph = pickle.loads(graph_pickle)
    _shared_config = config

    set_level_from_name(os.getenv(_LOG_LEVEL_ENV))

    get_logger(f"{__name__}.worker").debug(f"Worker {os.getpid()} initialized")


def _worker(pair: Tuple[NodeID, NodeID]) -> Tuple[QueryResult, Optional[PathRecordError]]:
    assert _shared_graph is not None and _shared_config is not None
    source, destination = pair
    return _execute_query(_shared_graph, source, destination, _shared_config)


def _iter_serial(
    graph: WeightMatrix,
    pairs: List[Tuple[NodeID, NodeID]],
    config: SearchConfig,
) -> Iterator[Tuple[QueryResult, Optional[PathRecordError]]]:
    for source, destination in pairs:
        yield _execute_query(graph, source, destination, config)


def _iter_parallel(
    graph: WeightMatrix,
    pairs: List[Tuple[NodeID, NodeID]],
    config: SearchConfig,
    workers: int,
) -> Iterator[Tuple[QueryResult, Optional[PathRecordError]]]:
    graph_pickle = pickle.dumps(graph)
    chunksize = max(1, len(pairs) // (workers * 4))
    logger.debug(
        f"Serialized graph once: {len(graph_pickle)} bytes; chunksize={chunksize}"
    )

    os.environ[_LOG_LEVEL_ENV] = level_name()

    with ProcessPoolExecutor(
        max_workers=workers,
        initializer=_worker_init,
        initargs=(graph_pickle, config),
    ) as pool:
        # map() preserves submission order, so reporters still see pair order
        yield from pool.map(_worker, pairs, chunksize=chunksize)


def run_queries(
    graph: WeightMatrix,
    nodes: Sequence[NodeID],
    reporter: Optional[Reporter] = None,
    config: Optional[SearchConfig] = None,
) -> List[QueryResult]:
    """
    Find all minimal paths for every ordered pair drawn from ``nodes``.

    Each pair gets a fresh SearchState and PathCollector. The graph is shared
    read-only.

    Args:
        graph: Read-only graph accessor.
        nodes: Ordered node list. Each node is paired with every node after it.
        reporter: Optional callable receiving each QueryResult once, in pair order.
        config: Search configuration; defaults to SEARCH_CONFIG.

    Returns:
        All QueryResults in pair order.

    Raises:
        ValueError: If a node in ``nodes`` is out of range.
        PathRecordError: If a path could not be stored and
            ``config.abort_on_record_error`` is set.
    """
    config = config or SEARCH_CONFIG
    pairs = list(iter_pairs(nodes))
    workers = min(max(1, config.parallelism), len(pairs)) if pairs else 1

    logger.info(
        f"Running {len(pairs)} queries over {graph.size()} nodes"
        + (f" with {workers} workers" if workers > 1 else "")
    )
    start_time = time.time()

    if workers > 1:
        outcomes = _iter_parallel(graph, pairs, config, workers)
    else:
        outcomes = _iter_serial(graph, pairs, config)

    results: List[QueryResult] = []
    for query, error in outcomes:
        if error is not None:
            logger.error(
                f"Failed to record a path for {graph.label(query.source)} -> "
                f"{graph.label(query.destination)}: {error}"
            )
            if config.abort_on_record_error:
                raise error
        results.append(query)
        if reporter is not None:
            reporter(query)

    elapsed_time = time.time() - start_time
    unreachable = sum(1 for q in results if not q.result.reachable)
    logger.info(
        f"Completed {len(results)} queries in {elapsed_time:.2f} seconds "
        f"({unreachable} unreachable)"
    )
    return results
