"""Reporters that turn query results into text or JSON-ready data."""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, List, Optional, TextIO

from pathfinder.collector import PathTuple
from pathfinder.driver import QueryResult
from pathfinder.graph import Cost, WeightMatrix

SEPARATOR = "=" * 40


def _format_weight(value: Cost) -> str:
    """Return a weight without a trailing ``.0`` for whole numbers.

    Examples:
        3 -> "3"; 3.0 -> "3"; 0.25 -> "0.25".
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_path(path: PathTuple, graph: WeightMatrix) -> str:
    """
    Format one path as a block of Path / Route / Distance lines.

    Returns:
        The block, framed by separator lines, without a trailing newline.
    """
    labels = [graph.label(node) for node in path]
    weights = [graph.weight(u, v) for u, v in zip(path, path[1:])]
    total = sum(weights)

    if len(weights) > 1:
        distance = " + ".join(_format_weight(w) for w in weights)
        distance = f"{distance} = {_format_weight(total)}"
    else:
        distance = _format_weight(total)

    return "\n".join(
        [
            SEPARATOR,
            f"Path: {labels[0]} -> {labels[-1]}",
            f"Route: {' -> '.join(labels)}",
            f"Distance: {distance}",
            SEPARATOR,
        ]
    )


def format_result(query: QueryResult, graph: WeightMatrix) -> str:
    """
    Format every minimal path of a query, in discovery order.

    Returns an empty string when the destination is unreachable.
    """
    return "\n".join(format_path(path, graph) for path in query.result.paths)


class TextReporter:
    """Reporter writing formatted blocks to a stream as results arrive."""

    def __init__(self, graph: WeightMatrix, stream: Optional[TextIO] = None) -> None:
        self.graph = graph
        self.stream = stream if stream is not None else sys.stdout
        self.reported = 0

    def __call__(self, query: QueryResult) -> None:
        self.reported += 1
        text = format_result(query, self.graph)
        if text:
            self.stream.write(text + "\n")


class CollectingReporter:
    """Reporter that keeps every result it receives."""

    def __init__(self) -> None:
        self.results: List[QueryResult] = []

    def __call__(self, query: QueryResult) -> None:
        self.results.append(query)


def query_to_dict(query: QueryResult, graph: WeightMatrix) -> Dict[str, Any]:
    return {
        "source": graph.label(query.source),
        "destination": graph.label(query.destination),
        "min_len": query.result.min_len,
        "paths": [[graph.label(node) for node in path] for path in query.result.paths],
    }


def results_to_dict(
    results: Iterable[QueryResult], graph: WeightMatrix
) -> Dict[str, Any]:
    """
    Build a JSON-ready document for a set of query results.

    Layout::

        {
            "nodes": [label, ...],
            "queries": [
                {"source": .., "destination": .., "min_len": .., "paths": [[..]]},
                ...
            ]
        }

    ``min_len`` is None for unreachable pairs.
    """
    return {
        "nodes": list(graph.labels),
        "queries": [query_to_dict(query, graph) for query in results],
    }


def results_to_json(
    results: Iterable[QueryResult], graph: WeightMatrix, indent: Optional[int] = 2
) -> str:
    return json.dumps(results_to_dict(results, graph), indent=indent)
