"""pathfinder: exhaustive search for all minimum-weight paths.

For every ordered pair drawn from an ordered node list, pathfinder enumerates
every simple path whose total weight equals the minimum between the pair,
using depth-first search with branch-and-bound pruning.

Primary API:
    WeightMatrix - Read-only weighted adjacency matrix
    find_min_paths() - All minimal paths for one (source, destination) pair
    run_queries() - All minimal paths for every pair of an ordered node list
    load_file(), load_edgelist(), load_yaml(), from_networkx() - Graph input

Example:
    from pathfinder import WeightMatrix, find_min_paths

    graph = WeightMatrix.from_edges(3, [(0, 1, 1), (1, 2, 1), (0, 2, 3)])
    result = find_min_paths(graph, 0, 2)
    # result.min_len == 2, result.paths == ((0, 1, 2),)
"""

from __future__ import annotations

from pathfinder import cli, logging
from pathfinder._version import __version__
from pathfinder.collector import PathCollector, PathRecordError, PathResult
from pathfinder.config import SEARCH_CONFIG, SearchConfig
from pathfinder.driver import QueryResult, iter_pairs, run_queries
from pathfinder.explorer import explore, find_min_paths
from pathfinder.graph import NO_EDGE, WeightMatrix
from pathfinder.io import from_networkx, load_edgelist, load_file, load_yaml
from pathfinder.report import TextReporter, format_result, results_to_dict
from pathfinder.state import SearchState

__all__ = [
    # Version
    "__version__",
    # Graph
    "WeightMatrix",
    "NO_EDGE",
    # Search
    "SearchState",
    "PathCollector",
    "PathResult",
    "PathRecordError",
    "explore",
    "find_min_paths",
    # Driver
    "QueryResult",
    "iter_pairs",
    "run_queries",
    # Configuration
    "SearchConfig",
    "SEARCH_CONFIG",
    # Input / output
    "load_file",
    "load_edgelist",
    "load_yaml",
    "from_networkx",
    "TextReporter",
    "format_result",
    "results_to_dict",
    # Utilities
    "cli",
    "logging",
]
