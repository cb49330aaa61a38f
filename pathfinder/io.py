"""Build a WeightMatrix and ordered node list from text, YAML or NetworkX input."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import networkx as nx
import yaml

from pathfinder.graph import Cost, EdgeTriple, NodeID, WeightMatrix
from pathfinder.logging import get_logger

logger = get_logger(__name__)

#: A loaded graph together with its ordered node list.
GraphInput = Tuple[WeightMatrix, List[NodeID]]

_EDGE_LINE = re.compile(r"^(?P<src>[^\s,-]+)-(?P<dst>[^\s,-]+),(?P<weight>\d+)$")


class _LabelIndex:
    """Assigns node indices to labels in order of first appearance."""

    def __init__(self) -> None:
        self.labels: List[str] = []
        self._index: Dict[str, NodeID] = {}

    def get(self, label: str) -> NodeID:
        if label not in self._index:
            self._index[label] = len(self.labels)
            self.labels.append(label)
        return self._index[label]

    def __contains__(self, label: str) -> bool:
        return label in self._index

    def __len__(self) -> int:
        return len(self.labels)


def load_edgelist(lines: Iterable[str], bidirectional: bool = False) -> GraphInput:
    """
    Parse a graph from lines of the form ``A-B,weight``.

    The first non-blank line may hold the declared number of nodes; when
    present, the number of distinct labels must match it. Blank lines are
    ignored. Nodes are numbered in order of first appearance, which is also
    the order of the returned node list.

    Example:
        3
        Greenland-Bananal,8
        Fraser-Greenland,10

    Args:
        lines: Input lines (trailing newlines are stripped).
        bidirectional: If True, every line adds edges in both directions.

    Returns:
        Tuple of (WeightMatrix, ordered node list).

    Raises:
        ValueError: On a malformed line, a self-loop, a duplicate edge, or a
            node count that does not match the declaration.
    """
    index = _LabelIndex()
    edges: List[EdgeTriple] = []
    seen: Dict[Tuple[str, str], int] = {}
    declared: Optional[int] = None
    first = True

    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n").strip()
        if not line:
            continue

        if first:
            first = False
            if line.isdigit():
                declared = int(line)
                continue

        match = _EDGE_LINE.match(line)
        if match is None:
            raise ValueError(f"Line {line_no} is not valid: '{line}'")

        src, dst = match.group("src"), match.group("dst")
        weight = int(match.group("weight"))
        if src == dst:
            raise ValueError(f"Line {line_no} is not valid: self-loop on '{src}'")

        key = tuple(sorted((src, dst))) if bidirectional else (src, dst)
        if key in seen:
            raise ValueError(
                f"Line {line_no} duplicates the edge from line {seen[key]}: '{line}'"
            )
        seen[key] = line_no

        edges.append((index.get(src), index.get(dst), weight))

    if declared is not None and declared != len(index):
        raise ValueError(
            f"Declared {declared} nodes but found {len(index)} distinct nodes."
        )

    graph = WeightMatrix.from_edges(
        len(index), edges, labels=index.labels, bidirectional=bidirectional
    )
    logger.debug(f"Loaded edge list: {graph.size()} nodes, {len(edges)} lines")
    return graph, list(range(len(index)))


def _yaml_label(value: Any) -> str:
    # YAML 1.1 turns bare yes/no/on/off into booleans
    if isinstance(value, bool):
        return str(value)
    if value is None:
        raise ValueError("Node label must not be empty.")
    return str(value)


def load_yaml(text: str) -> GraphInput:
    """
    Parse a graph from a YAML document.

    Expected format::

        bidirectional: false      # optional, default for all links
        nodes: [A, B, C]          # optional explicit order
        links:
          - {source: A, target: B, weight: 1}
          - {source: B, target: C, weight: 2, bidirectional: true}

    When ``nodes`` is given it fixes the node order (and thus the query
    order) and every link endpoint must appear in it. Otherwise nodes are
    numbered in order of first appearance among the links.

    Returns:
        Tuple of (WeightMatrix, ordered node list).

    Raises:
        ValueError: If the document structure is invalid.
    """
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Graph document must be a mapping.")

    unknown = set(data) - {"nodes", "links", "bidirectional"}
    if unknown:
        raise ValueError(f"Unrecognized top-level keys: {sorted(map(str, unknown))}")

    default_bidirectional = bool(data.get("bidirectional", False))
    explicit_nodes = data.get("nodes")
    links = data.get("links") or []
    if not isinstance(links, list):
        raise ValueError("'links' must be a list.")

    index = _LabelIndex()
    if explicit_nodes is not None:
        if not isinstance(explicit_nodes, list):
            raise ValueError("'nodes' must be a list.")
        for value in explicit_nodes:
            label = _yaml_label(value)
            if label in index:
                raise ValueError(f"Node '{label}' is listed more than once.")
            index.get(label)

    directed: List[EdgeTriple] = []
    for pos, link in enumerate(links):
        if not isinstance(link, dict):
            raise ValueError(f"Link #{pos} must be a mapping.")
        missing = {"source", "target", "weight"} - set(link)
        if missing:
            raise ValueError(f"Link #{pos} is missing {sorted(missing)}.")

        src = _yaml_label(link["source"])
        dst = _yaml_label(link["target"])
        for label in (src, dst):
            if explicit_nodes is not None and label not in index:
                raise ValueError(f"Link #{pos} references unknown node '{label}'.")

        weight = link["weight"]
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise ValueError(f"Link #{pos} has a non-numeric weight: {weight!r}")
        if weight < 0:
            raise ValueError(f"Link #{pos} has a negative weight: {weight}")

        u, v = index.get(src), index.get(dst)
        directed.append((u, v, weight))
        if link.get("bidirectional", default_bidirectional):
            directed.append((v, u, weight))

    graph = WeightMatrix.from_edges(len(index), directed, labels=index.labels)
    return graph, list(range(len(index)))


def from_networkx(
    graph: nx.Graph,
    weight_attr: str = "cost",
    nodes: Optional[Sequence[Any]] = None,
    default_weight: Cost = 1,
) -> GraphInput:
    """
    Convert a NetworkX graph into a WeightMatrix.

    Parallel edges of multigraphs collapse to their minimum weight. Undirected
    graphs produce edges in both directions.

    Args:
        graph: Any NetworkX Graph, DiGraph, MultiGraph or MultiDiGraph.
        weight_attr: Edge attribute holding the weight.
        nodes: Optional node order. Defaults to ``graph.nodes`` order. Must
            contain every node of the graph exactly once.
        default_weight: Weight for edges lacking ``weight_attr``.

    Returns:
        Tuple of (WeightMatrix, ordered node list). Labels are the string
        form of the NetworkX node keys.

    Raises:
        ValueError: If ``nodes`` does not match the graph's nodes, or an
            edge weight is negative.
    """
    order = list(graph.nodes) if nodes is None else list(nodes)
    if len(order) != graph.number_of_nodes() or set(order) != set(graph.nodes):
        raise ValueError("'nodes' must list every graph node exactly once.")

    position = {node: i for i, node in enumerate(order)}
    edges: List[EdgeTriple] = []
    for u, v, data in graph.edges(data=True):
        weight = data.get(weight_attr, default_weight)
        if weight < 0:
            raise ValueError(f"Edge {u} -> {v} has a negative weight: {weight}")
        edges.append((position[u], position[v], weight))
    matrix = WeightMatrix.from_edges(
        len(order),
        edges,
        labels=[str(node) for node in order],
        bidirectional=not graph.is_directed(),
    )
    return matrix, list(range(len(order)))


def to_networkx(graph: WeightMatrix) -> nx.DiGraph:
    """Convert a WeightMatrix into a NetworkX DiGraph keyed by node label.

    Weights are stored in the ``cost`` edge attribute.
    """
    nx_graph = nx.DiGraph()
    nx_graph.add_nodes_from(graph.labels)
    for u, v, w in graph.edges():
        nx_graph.add_edge(graph.label(u), graph.label(v), cost=w)
    return nx_graph


def load_file(path: Union[str, Path], bidirectional: bool = False) -> GraphInput:
    """
    Load a graph file, choosing the parser by suffix.

    ``.yaml`` and ``.yml`` files are parsed with ``load_yaml``; anything else
    with ``load_edgelist``. ``bidirectional`` applies to edge lists only; YAML
    documents carry their own setting.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return load_yaml(text)
    return load_edgelist(text.splitlines(), bidirectional=bidirectional)
