"""
Undirected graph storage for the coloring reduction.

Edges are stored once, under their smaller-or-equal endpoint: an edge (a, b)
with a <= b appears only in the adjacency list of a. Iterating nodes in order
and, for each, its forward neighbors therefore visits every undirected edge
exactly once. Duplicate edges are kept.

A Graph is not safe for concurrent mutation; share it only with external
synchronization.
"""

import logging
from collections.abc import Iterable, Iterator

import numpy as np

from .utils.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class Graph:
    """
    An undirected graph over nodes 0..num_nodes-1 with half-adjacency storage.
    """

    def __init__(self, num_nodes: int):
        """
        Create ``num_nodes`` isolated nodes.

        Args:
            num_nodes: Number of nodes, fixed for the graph's lifetime

        Raises:
            InvalidArgumentError: If num_nodes is negative
        """
        if isinstance(num_nodes, bool) or not isinstance(num_nodes, (int, np.integer)):
            raise InvalidArgumentError("Node count must be an integer", num_nodes)
        if num_nodes < 0:
            raise InvalidArgumentError("Node count must be non-negative", num_nodes)

        self._num_nodes = int(num_nodes)
        self._adjacency: list[list[int]] = [[] for _ in range(self._num_nodes)]
        self._num_edges = 0

    @classmethod
    def from_edges(cls, num_nodes: int, edges: Iterable[tuple[int, int]]) -> "Graph":
        """
        Build a graph from unordered node pairs.

        Each pair is reordered so that its smaller endpoint comes first.

        Args:
            num_nodes: Number of nodes
            edges: Node pairs in any order

        Returns:
            Graph instance
        """
        graph = cls(num_nodes)
        for u, v in edges:
            graph.add_edge(min(u, v), max(u, v))
        return graph

    @property
    def num_nodes(self) -> int:
        return self._num_nodes

    @property
    def num_edges(self) -> int:
        """Number of stored edges, duplicates included."""
        return self._num_edges

    def _check_node(self, node: int) -> None:
        if isinstance(node, bool) or not isinstance(node, (int, np.integer)):
            raise InvalidArgumentError("Node index must be an integer", node)
        if not 0 <= node < self._num_nodes:
            raise InvalidArgumentError(
                f"Node index out of range [0, {self._num_nodes})", node
            )

    def add_edge(self, a: int, b: int) -> None:
        """
        Add the undirected edge (a, b).

        Args:
            a: Smaller-or-equal endpoint
            b: Larger-or-equal endpoint

        Raises:
            InvalidArgumentError: If a > b or either index is out of range
        """
        self._check_node(a)
        self._check_node(b)
        if a > b:
            raise InvalidArgumentError("Edge endpoints must satisfy a <= b", (a, b))

        self._adjacency[a].append(int(b))
        self._num_edges += 1

    def neighbors_of(self, node: int) -> tuple[int, ...]:
        """
        Forward neighbors of ``node``: the larger-or-equal endpoints of the
        edges stored under it, in insertion order.
        """
        self._check_node(node)
        return tuple(self._adjacency[node])

    def edges(self) -> Iterator[tuple[int, int]]:
        """Iterate over stored edges as (a, b) pairs with a <= b."""
        for a, neighbors in enumerate(self._adjacency):
            for b in neighbors:
                yield a, b

    def __repr__(self) -> str:
        return f"Graph(num_nodes={self._num_nodes}, num_edges={self._num_edges})"


def random_graph(num_nodes: int, num_edges: int, seed: int | None = None) -> Graph:
    """
    Generate a random multigraph.

    Endpoints are drawn uniformly, so self-loops and duplicate edges may occur.

    Args:
        num_nodes: Number of nodes (must be positive when num_edges > 0)
        num_edges: Number of edges to draw
        seed: Seed for the random generator

    Returns:
        Graph instance
    """
    if num_edges < 0:
        raise InvalidArgumentError("Edge count must be non-negative", num_edges)
    if num_edges and num_nodes <= 0:
        raise InvalidArgumentError("Cannot draw edges on an empty graph", num_nodes)

    rng = np.random.default_rng(seed)
    endpoints = rng.integers(0, max(num_nodes, 1), size=(num_edges, 2))
    graph = Graph.from_edges(num_nodes, (tuple(pair) for pair in endpoints.tolist()))
    logger.debug(f"Generated random graph: {graph!r} (seed={seed})")
    return graph


def is_valid_coloring(graph: Graph, colors: list[int], num_colors: int) -> bool:
    """
    Check that ``colors`` assigns every node a color in [0, num_colors) and
    that no edge joins two nodes of the same color.
    """
    if len(colors) != graph.num_nodes:
        return False
    if any(c is None or not 0 <= c < num_colors for c in colors):
        return False
    return all(colors[a] != colors[b] for a, b in graph.edges())
