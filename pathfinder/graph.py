from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

#: Node identifier: an index in ``range(size)``.
NodeID = int

#: Non-negative numeric edge weight.
Cost = Union[int, float]

#: Adjacency entry: an edge weight, or NO_EDGE when the edge is absent.
WeightOrSentinel = Optional[Cost]

#: Sentinel marking "no edge" in the weight matrix. Never a valid weight.
NO_EDGE: WeightOrSentinel = None

EdgeTriple = Tuple[NodeID, NodeID, Cost]


class WeightMatrix:
    """
    Read-only adjacency-matrix view of a weighted directed graph.

    Nodes are indexed ``0..size-1``. ``weight(u, v)`` returns the weight of the
    edge u -> v or ``NO_EDGE`` when there is none. The matrix is stored as a
    tuple of tuples and is never mutated after construction, so one instance
    can be shared by any number of independent queries.

    Weights are expected to be non-negative. The search relies on path weight
    never decreasing as nodes are appended; ``validate_non_negative()`` can be
    used to check the precondition, the search itself does not.
    """

    def __init__(
        self,
        matrix: Sequence[Sequence[WeightOrSentinel]],
        labels: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Initialize a WeightMatrix.

        Args:
            matrix: Square matrix of weights; ``matrix[u][v]`` is the weight of
                u -> v or NO_EDGE.
            labels: Optional display name per node. Defaults to the string form
                of each index.

        Raises:
            ValueError: If the matrix is not square, or labels do not match
                the node count or contain duplicates.
        """
        size = len(matrix)
        rows = tuple(tuple(row) for row in matrix)
        for u, row in enumerate(rows):
            if len(row) != size:
                raise ValueError(
                    f"Row {u} has {len(row)} entries; expected {size} (matrix must be square)."
                )

        if labels is None:
            labels = [str(i) for i in range(size)]
        labels = tuple(str(label) for label in labels)
        if len(labels) != size:
            raise ValueError(f"Expected {size} labels, got {len(labels)}.")
        if len(set(labels)) != size:
            raise ValueError("Node labels must be unique.")

        self._matrix: Tuple[Tuple[WeightOrSentinel, ...], ...] = rows
        self._labels: Tuple[str, ...] = labels
        self._index: Dict[str, NodeID] = {label: i for i, label in enumerate(labels)}

    @classmethod
    def from_edges(
        cls,
        size: int,
        edges: Iterable[EdgeTriple],
        labels: Optional[Sequence[str]] = None,
        bidirectional: bool = False,
    ) -> WeightMatrix:
        """
        Build a WeightMatrix from (source, target, weight) triples.

        Parallel edges collapse to their minimum weight.

        Args:
            size: Number of nodes.
            edges: Iterable of (u, v, weight) triples.
            labels: Optional display name per node.
            bidirectional: If True, every edge is also added in reverse.

        Returns:
            A new WeightMatrix.

        Raises:
            ValueError: If an endpoint is outside ``range(size)``.
        """
        rows: List[List[WeightOrSentinel]] = [[NO_EDGE] * size for _ in range(size)]

        def _put(u: NodeID, v: NodeID, w: Cost) -> None:
            current = rows[u][v]
            if current is NO_EDGE or w < current:
                rows[u][v] = w

        for u, v, w in edges:
            for node in (u, v):
                if not 0 <= node < size:
                    raise ValueError(f"Node {node} is out of range for size {size}.")
            _put(u, v, w)
            if bidirectional:
                _put(v, u, w)

        return cls(rows, labels=labels)

    def size(self) -> int:
        """Return the number of nodes."""
        return len(self._matrix)

    def __len__(self) -> int:
        return len(self._matrix)

    def weight(self, u: NodeID, v: NodeID) -> WeightOrSentinel:
        """
        Return the weight of edge u -> v, or NO_EDGE if there is none.

        Raises:
            IndexError: If u or v is out of range.
        """
        return self._matrix[u][v]

    def has_edge(self, u: NodeID, v: NodeID) -> bool:
        return self._matrix[u][v] is not NO_EDGE

    def neighbors(self, u: NodeID) -> Iterator[Tuple[NodeID, Cost]]:
        """
        Yield (v, weight) for every existing edge u -> v, in ascending v order.
        """
        for v, w in enumerate(self._matrix[u]):
            if w is not NO_EDGE:
                yield v, w

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    def label(self, node: NodeID) -> str:
        return self._labels[node]

    def index_of(self, label: str) -> NodeID:
        """
        Return the node index for a display label.

        Raises:
            KeyError: If no node has this label.
        """
        try:
            return self._index[label]
        except KeyError:
            raise KeyError(f"Node '{label}' does not exist.") from None

    def edges(self) -> Iterator[EdgeTriple]:
        """Yield (u, v, weight) for every edge in row-major order."""
        for u in range(len(self._matrix)):
            for v, w in self.neighbors(u):
                yield u, v, w

    def validate_non_negative(self) -> None:
        """
        Check that all weights are non-negative.

        Raises:
            ValueError: On the first negative weight found.
        """
        for u, v, w in self.edges():
            if w < 0:
                raise ValueError(
                    f"Edge {self._labels[u]} -> {self._labels[v]} has negative weight {w}."
                )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightMatrix):
            return NotImplemented
        return self._matrix == other._matrix and self._labels == other._labels

    def __hash__(self) -> int:
        return hash((self._matrix, self._labels))

    def __repr__(self) -> str:
        return f"WeightMatrix(size={self.size()}, edges={sum(1 for _ in self.edges())})"
