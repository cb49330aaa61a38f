"""Command-line interface for pathfinder."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from pathfinder.config import SearchConfig
from pathfinder.driver import iter_pairs, run_queries
from pathfinder.graph import WeightMatrix
from pathfinder.io import load_file
from pathfinder.logging import get_logger, set_global_log_level
from pathfinder.report import TextReporter, results_to_json

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 6,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[Any]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Return grammatically correct unit for count n."""
    if n == 1:
        return singular
    return plural or (singular + "s")


def _inspect_graph(graph: WeightMatrix, nodes: List[int]) -> None:
    """Print a node table and query count for a loaded graph."""
    edge_count = sum(1 for _ in graph.edges())
    pair_count = sum(1 for _ in iter_pairs(nodes))
    print(
        f"Graph: {graph.size()} {_plural(graph.size(), 'node')}, "
        f"{edge_count} {_plural(edge_count, 'edge')}, "
        f"{pair_count} {_plural(pair_count, 'query', 'queries')}"
    )

    rows = []
    for node in nodes:
        out_degree = sum(1 for _ in graph.neighbors(node))
        in_degree = sum(1 for u in range(graph.size()) if graph.has_edge(u, node))
        rows.append([str(node), graph.label(node), str(out_degree), str(in_degree)])
    table = _format_table(["Index", "Label", "Out", "In"], rows)
    if table:
        print(table)


def _run(
    path: Path,
    output_format: str,
    output: Optional[Path],
    bidirectional: bool,
    parallelism: int,
) -> None:
    """Load a graph file, run all queries and emit the results."""
    graph, nodes = load_file(path, bidirectional=bidirectional)
    config = SearchConfig(parallelism=parallelism)

    start = perf_counter()
    if output_format == "text":
        if output is not None:
            with output.open("w", encoding="utf-8") as fh:
                run_queries(graph, nodes, reporter=TextReporter(graph, fh), config=config)
        else:
            run_queries(graph, nodes, reporter=TextReporter(graph), config=config)
    else:
        results = run_queries(graph, nodes, config=config)
        payload = results_to_json(results, graph)
        if output is not None:
            output.write_text(payload + "\n", encoding="utf-8")
        else:
            print(payload)

    logger.info(f"Finished {path} in {_format_duration(perf_counter() - start)}")
    if output is not None:
        logger.info(f"Results written to {output}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``pathfinder`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="pathfinder",
        description="Find all minimum-weight paths between every pair of nodes.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Find minimal paths for all pairs")
    run_parser.add_argument("graph", type=Path, help="Path to graph file")
    run_parser.add_argument(
        "--format",
        "-f",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write results to this file instead of stdout",
    )
    run_parser.add_argument(
        "--parallelism",
        "-p",
        type=int,
        default=1,
        help="Worker processes for independent queries (default: 1)",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Load a graph file and summarize it"
    )
    inspect_parser.add_argument("graph", type=Path, help="Path to graph file")

    for p in (run_parser, inspect_parser):
        p.add_argument(
            "--bidirectional",
            "-b",
            action="store_true",
            help="Treat each edge-list line as an edge in both directions",
        )

    effective_args = sys.argv[1:] if argv is None else argv

    # If no arguments are provided, show help and exit cleanly
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    try:
        if args.command == "run":
            _run(
                path=args.graph,
                output_format=args.format,
                output=args.output,
                bidirectional=args.bidirectional,
                parallelism=args.parallelism,
            )
        elif args.command == "inspect":
            graph, nodes = load_file(args.graph, bidirectional=args.bidirectional)
            _inspect_graph(graph, nodes)
    except (OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
