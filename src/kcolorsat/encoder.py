"""
Reduction of graph k-coloring to SAT and enumeration of all colorings.

Variable layout: the Boolean variable for "node n has color c" is
``c * num_nodes + n``. The encoder asserts, per node, that exactly one color
is chosen (one at-least-one clause plus pairwise at-most-one clauses) and,
per stored edge, that both endpoints never share a color.

All colorings are enumerated by repeated solving: every model found is
recorded and then excluded with a blocking clause holding the negation of
each node's chosen color, until the clause set becomes unsatisfiable.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from .config import get_config
from .graph import Graph
from .solvers import Literal, LiteralValue, SolverBase, SolverRegistry
from .utils.cnf import write_dimacs
from .utils.exceptions import InvalidArgumentError, InvariantViolationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coloring:
    """
    One satisfying assignment of the variable universe.

    ``values`` is indexed like the variables, i.e. ``values[c * num_nodes + n]``
    is the truth value of "node n has color c". Only TRUE entries carry meaning.
    """

    num_nodes: int
    num_colors: int
    values: tuple[LiteralValue, ...]

    def __post_init__(self):
        if len(self.values) != self.num_nodes * self.num_colors:
            raise InvariantViolationError(
                "Coloring size does not match the variable universe",
                expected=self.num_nodes * self.num_colors,
                actual=len(self.values),
            )

    def color_of(self, node: int) -> int | None:
        """Color assigned to ``node``, or None if none of its variables is TRUE."""
        if not 0 <= node < self.num_nodes:
            raise InvalidArgumentError(
                f"Node index out of range [0, {self.num_nodes})", node
            )
        for color in range(self.num_colors):
            if self.values[color * self.num_nodes + node] is LiteralValue.TRUE:
                return color
        return None

    def as_list(self) -> list[int | None]:
        """Decode to a node -> color list."""
        return [self.color_of(node) for node in range(self.num_nodes)]

    def __len__(self) -> int:
        return len(self.values)


def colorings_to_array(colorings: list[Coloring]) -> np.ndarray:
    """
    Stack decoded colorings into an array of shape (len(colorings), num_nodes).
    Nodes without a color are marked with -1.
    """
    if not colorings:
        return np.empty((0, 0), dtype=np.int64)
    rows = [
        [-1 if c is None else c for c in coloring.as_list()] for coloring in colorings
    ]
    array = np.array(rows, dtype=np.int64)
    return array.reshape(len(colorings), colorings[0].num_nodes)


class ColoringEncoder:
    """
    Encodes the k-coloring problem of a graph into an exclusively owned SAT
    backend and answers colorability and enumeration queries.

    The graph is borrowed and must not be modified while the encoder is in
    use. Base constraints are asserted once, on the first query. Clauses are
    never retracted, so the colorings found by enumeration are cached and a
    repeated enumeration resumes from (or returns) the cached result.

    Not safe for concurrent use.
    """

    def __init__(self, graph: Graph, num_colors: int, solver: SolverBase | None = None):
        """
        Allocate the variable universe.

        Args:
            graph: The graph to color
            num_colors: Number of available colors (k >= 0)
            solver: A fresh backend to take ownership of; built from the
                configuration when omitted

        Raises:
            InvalidArgumentError: If num_colors is negative or the solver
                already has variables
        """
        if isinstance(num_colors, bool) or not isinstance(
            num_colors, (int, np.integer)
        ):
            raise InvalidArgumentError("Color count must be an integer", num_colors)
        if num_colors < 0:
            raise InvalidArgumentError("Color count must be non-negative", num_colors)

        self._graph = graph
        self._num_nodes = graph.num_nodes
        self._num_colors = int(num_colors)
        self._solver = solver if solver is not None else self._create_solver()

        if self._solver.num_vars != 0:
            raise InvalidArgumentError(
                "Solver must be fresh (no variables allocated)", self._solver.num_vars
            )

        for _ in range(self._num_nodes * self._num_colors):
            self._solver.new_variable()

        # Snapshot of the universe size, checked before every enumeration step
        self._num_vars = self._solver.num_vars
        if self._num_vars != self._num_nodes * self._num_colors:
            raise InvariantViolationError(
                "Backend allocated an unexpected number of variables",
                expected=self._num_nodes * self._num_colors,
                actual=self._num_vars,
            )

        self._constraints_generated = False
        self._found: list[Coloring] = []
        self._exhausted = False

    @staticmethod
    def _create_solver() -> SolverBase:
        config = get_config()
        return SolverRegistry.create(
            config.get("solver.name", "pysat"),
            backend=config.get("solver.backend"),
            timeout=config.get("solver.timeout"),
        )

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def num_colors(self) -> int:
        return self._num_colors

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def solver(self) -> SolverBase:
        return self._solver

    def variable(self, node: int, color: int) -> int:
        """Variable id of "``node`` has ``color``"."""
        if not 0 <= node < self._num_nodes:
            raise InvalidArgumentError(
                f"Node index out of range [0, {self._num_nodes})", node
            )
        if not 0 <= color < self._num_colors:
            raise InvalidArgumentError(
                f"Color out of range [0, {self._num_colors})", color
            )
        return color * self._num_nodes + node

    def _one_color_clauses(self, node: int) -> Iterator[list[Literal]]:
        # At least one color
        yield [Literal(self.variable(node, color)) for color in range(self._num_colors)]

        # At most one color, pairwise
        for c1 in range(self._num_colors):
            for c2 in range(c1):
                yield [
                    Literal(self.variable(node, c1), negated=True),
                    Literal(self.variable(node, c2), negated=True),
                ]

    def _edge_clauses(self, a: int, b: int) -> Iterator[list[Literal]]:
        # Endpoints never share a color
        for color in range(self._num_colors):
            yield [
                Literal(self.variable(a, color), negated=True),
                Literal(self.variable(b, color), negated=True),
            ]

    def clauses(self) -> Iterator[list[Literal]]:
        """
        Generate the base constraints: exactly one color per node and
        different colors across every stored edge.
        """
        for node in range(self._num_nodes):
            yield from self._one_color_clauses(node)
            for neighbor in self._graph.neighbors_of(node):
                yield from self._edge_clauses(node, neighbor)

    def _ensure_constraints(self) -> None:
        if self._constraints_generated:
            return

        clauses = list(self.clauses())
        self._solver.add_clauses(clauses)
        self._constraints_generated = True

        logger.debug(
            f"Asserted {len(clauses)} base clauses over {self._num_vars} variables "
            f"({self._num_nodes} nodes, {self._graph.num_edges} edges, "
            f"k={self._num_colors})"
        )

    def is_colorable(self) -> bool:
        """
        Decide whether the graph has a valid coloring with ``num_colors`` colors.
        """
        if self._found:
            return True
        if self._exhausted:
            return False

        self._ensure_constraints()
        result = self._solver.solve()
        logger.info(
            f"Graph with {self._num_nodes} nodes is "
            f"{'' if result else 'not '}{self._num_colors}-colorable"
        )
        return result

    def _read_model(self) -> Coloring:
        values = tuple(self._solver.model_value(v) for v in range(self._num_vars))
        return Coloring(self._num_nodes, self._num_colors, values)

    def _blocking_clause(self, coloring: Coloring) -> list[Literal]:
        clause = []
        for node in range(self._num_nodes):
            color = coloring.color_of(node)
            if color is None:
                raise InvariantViolationError(f"Model assigns no color to node {node}")
            clause.append(Literal(self.variable(node, color), negated=True))
        return clause

    def enumerate_all_colorings(
        self, max_colorings: int | None = None
    ) -> list[Coloring]:
        """
        Enumerate every valid coloring.

        The order of the result follows the backend's search and is not
        stable; the set of colorings is. No coloring appears twice.

        Args:
            max_colorings: Stop once this many colorings have been found.
                Defaults to ``enumeration.max_colorings`` from the configuration
                (unbounded when unset). A later call resumes where a capped
                call stopped.

        Returns:
            List of Coloring objects
        """
        if max_colorings is None:
            max_colorings = get_config().get("enumeration.max_colorings")
        if max_colorings is not None and max_colorings < 0:
            raise InvalidArgumentError(
                "max_colorings must be non-negative", max_colorings
            )

        self._ensure_constraints()

        while not self._exhausted and (
            max_colorings is None or len(self._found) < max_colorings
        ):
            if self._solver.num_vars != self._num_vars:
                raise InvariantViolationError(
                    "Variable universe changed during enumeration",
                    expected=self._num_vars,
                    actual=self._solver.num_vars,
                )

            if not self._solver.solve():
                self._exhausted = True
                break

            coloring = self._read_model()
            self._found.append(coloring)
            self._solver.add_clause(self._blocking_clause(coloring))
            logger.debug(f"Coloring #{len(self._found)}: {coloring.as_list()}")

        logger.info(
            f"Enumerated {len(self._found)} {self._num_colors}-colorings"
            f"{'' if self._exhausted else ' (stopped at limit)'}"
        )

        if max_colorings is None:
            return list(self._found)
        return self._found[:max_colorings]

    def to_dimacs(self) -> str:
        """
        The base constraints as DIMACS CNF text (variable v is written as v + 1).
        """
        return write_dimacs(
            [[literal.to_dimacs() for literal in clause] for clause in self.clauses()],
            self._num_vars,
            comments=[
                f"{self._num_colors}-coloring of a graph with "
                f"{self._num_nodes} nodes and {self._graph.num_edges} edges",
                "variable c * num_nodes + n + 1 means node n has color c",
            ],
        )

    def close(self) -> None:
        """Release the owned backend."""
        self._solver.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
