"""
Unit tests for the k-coloring SAT reduction and the enumeration of all colorings.

Small graphs are checked exhaustively against a brute-force oracle.
"""

import itertools
import os
import sys
import unittest

import numpy as np

# Add the src directory to the path so the package imports without installation
sys.path.insert(
    0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
)

from kcolorsat.config import get_config
from kcolorsat.encoder import Coloring, ColoringEncoder, colorings_to_array
from kcolorsat.graph import Graph, is_valid_coloring, random_graph
from kcolorsat.solvers import LiteralValue, SolverStatus
from kcolorsat.solvers.pysat_solver import PySATSolver
from kcolorsat.utils.cnf import check_solution, parse_dimacs
from kcolorsat.utils.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    InvariantViolationError,
    SolverTimeoutError,
)


def brute_force_colorings(graph, num_colors):
    """All valid colorings as tuples, by trying every color assignment."""
    return {
        colors
        for colors in itertools.product(range(num_colors), repeat=graph.num_nodes)
        if all(colors[a] != colors[b] for a, b in graph.edges())
    }


def decoded(colorings):
    return [tuple(coloring.as_list()) for coloring in colorings]


def triangle():
    return Graph.from_edges(3, [(0, 1), (1, 2), (0, 2)])


def four_cycle():
    return Graph.from_edges(4, [(0, 1), (1, 2), (2, 3), (0, 3)])


def complete_graph(num_nodes):
    return Graph.from_edges(num_nodes, itertools.combinations(range(num_nodes), 2))


class GrowingSolver(PySATSolver):
    """Backend that allocates a stray variable on every solve."""

    def solve(self, assumptions=None) -> bool:
        result = super().solve(assumptions)
        self.new_variable()
        return result


class TestVariableLayout(unittest.TestCase):
    """Test cases for the variable universe."""

    def test_universe_size(self):
        """Test that the encoder allocates num_nodes * k variables."""
        with ColoringEncoder(four_cycle(), 3) as encoder:
            self.assertEqual(encoder.num_vars, 12)
            self.assertEqual(encoder.solver.num_vars, 12)

    def test_variable_numbering(self):
        """Test the c * num_nodes + n variable layout."""
        with ColoringEncoder(Graph(5), 3) as encoder:
            self.assertEqual(encoder.variable(0, 0), 0)
            self.assertEqual(encoder.variable(4, 0), 4)
            self.assertEqual(encoder.variable(0, 1), 5)
            self.assertEqual(encoder.variable(2, 2), 12)

    def test_variable_out_of_range(self):
        """Test variable lookup outside the universe."""
        with ColoringEncoder(Graph(2), 2) as encoder:
            with self.assertRaises(InvalidArgumentError):
                encoder.variable(2, 0)
            with self.assertRaises(InvalidArgumentError):
                encoder.variable(0, 2)

    def test_negative_color_count_rejected(self):
        """Test that a negative color count is rejected."""
        with self.assertRaises(InvalidArgumentError):
            ColoringEncoder(Graph(2), -1)

    def test_used_solver_rejected(self):
        """Test that a solver with allocated variables is rejected."""
        solver = PySATSolver()
        solver.new_variable()
        with self.assertRaises(InvalidArgumentError):
            ColoringEncoder(Graph(2), 2, solver=solver)
        solver.close()


class TestSolverSelection(unittest.TestCase):
    """Test cases for building the backend from the configuration."""

    def setUp(self):
        self.config = get_config()
        self.saved_name = self.config.get("solver.name")

    def tearDown(self):
        self.config.set("solver.name", self.saved_name)

    def test_configured_solver(self):
        """Test that the configured backend name is used."""
        self.config.set("solver.name", "pysat")
        with ColoringEncoder(triangle(), 3) as encoder:
            self.assertIsInstance(encoder.solver, PySATSolver)

    def test_unset_solver_name_falls_back_to_pysat(self):
        """Test that an unset backend name selects the PySAT backend."""
        self.config.set("solver.name", None)
        with ColoringEncoder(triangle(), 3) as encoder:
            self.assertIsInstance(encoder.solver, PySATSolver)
            self.assertTrue(encoder.is_colorable())

    def test_unknown_solver_name(self):
        """Test that an unregistered backend name is a configuration error."""
        self.config.set("solver.name", "nope")
        with self.assertRaises(ConfigurationError):
            ColoringEncoder(triangle(), 3)


class TestConstraintGeneration(unittest.TestCase):
    """Test cases for the generated clauses."""

    def test_clause_count(self):
        """Test the number of base clauses for a triangle."""
        # 3 nodes * (1 at-least-one + 3 at-most-one) + 3 edges * 3 colors
        with ColoringEncoder(triangle(), 3) as encoder:
            self.assertEqual(len(list(encoder.clauses())), 21)

    def test_edge_clauses_forbid_equal_colors(self):
        """Test the per-color clauses of an edge."""
        graph = Graph.from_edges(2, [(0, 1)])
        with ColoringEncoder(graph, 2) as encoder:
            clauses = [
                [(lit.variable, lit.negated) for lit in clause]
                for clause in encoder.clauses()
            ]
        self.assertIn([(0, True), (1, True)], clauses)
        self.assertIn([(2, True), (3, True)], clauses)

    def test_zero_colors_yields_empty_clauses(self):
        """Test that k = 0 gives one empty clause per node."""
        with ColoringEncoder(Graph(2), 0) as encoder:
            self.assertEqual(list(encoder.clauses()), [[], []])

    def test_constraints_asserted_once(self):
        """Test that base clauses are added to the solver only once."""
        with ColoringEncoder(triangle(), 3) as encoder:
            encoder.is_colorable()
            after_first = encoder.solver.num_clauses
            encoder.is_colorable()
            self.assertEqual(encoder.solver.num_clauses, after_first)
            self.assertEqual(after_first, 21)

    def test_dimacs_export(self):
        """Test that every enumerated coloring satisfies the DIMACS export."""
        with ColoringEncoder(triangle(), 3) as encoder:
            formula, metadata = parse_dimacs(encoder.to_dimacs())
            colorings = encoder.enumerate_all_colorings()

        self.assertEqual(metadata["num_variables"], 9)
        self.assertEqual(metadata["num_clauses"], 21)
        for coloring in colorings:
            assignment = {
                v + 1: value is LiteralValue.TRUE
                for v, value in enumerate(coloring.values)
            }
            self.assertTrue(check_solution(formula, assignment))


class TestColorability(unittest.TestCase):
    """Test cases for the colorability query."""

    def test_four_cycle(self):
        """Test that a 4-cycle is 2-colorable."""
        with ColoringEncoder(four_cycle(), 2) as encoder:
            self.assertTrue(encoder.is_colorable())

    def test_triangle_two_colors(self):
        """Test that a triangle is not 2-colorable."""
        with ColoringEncoder(triangle(), 2) as encoder:
            self.assertFalse(encoder.is_colorable())

    def test_triangle_three_colors(self):
        """Test that a triangle is 3-colorable."""
        with ColoringEncoder(triangle(), 3) as encoder:
            self.assertTrue(encoder.is_colorable())

    def test_zero_colors(self):
        """Test that a graph with nodes is not 0-colorable."""
        with ColoringEncoder(Graph(1), 0) as encoder:
            self.assertFalse(encoder.is_colorable())

    def test_no_nodes(self):
        """Test that the empty graph is colorable for any k."""
        for k in range(3):
            with ColoringEncoder(Graph(0), k) as encoder:
                self.assertTrue(encoder.is_colorable())

    def test_self_loop(self):
        """Test that a self-loop makes the graph uncolorable."""
        graph = Graph(2)
        graph.add_edge(0, 0)
        with ColoringEncoder(graph, 3) as encoder:
            self.assertFalse(encoder.is_colorable())

    def test_matches_brute_force(self):
        """Test colorability against brute force on random graphs."""
        for num_nodes in range(1, 6):
            for num_colors in range(1, 4):
                for seed in range(3):
                    graph = random_graph(num_nodes, num_nodes + seed, seed=seed)
                    expected = bool(brute_force_colorings(graph, num_colors))
                    with ColoringEncoder(graph, num_colors) as encoder:
                        self.assertEqual(
                            encoder.is_colorable(),
                            expected,
                            f"n={num_nodes}, k={num_colors}, seed={seed}",
                        )

    def test_logs_outcome(self):
        """Test that the colorability outcome is logged."""
        with self.assertLogs("kcolorsat.encoder", level="INFO") as cm:
            with ColoringEncoder(triangle(), 2) as encoder:
                encoder.is_colorable()
        self.assertTrue(any("not 2-colorable" in line for line in cm.output))

    def test_timeout_on_hard_instance(self):
        """Test that a solve past the deadline raises SolverTimeoutError."""
        solver = PySATSolver(timeout=0.2)
        with ColoringEncoder(complete_graph(12), 11, solver=solver) as encoder:
            with self.assertRaises(SolverTimeoutError):
                encoder.is_colorable()
            self.assertIs(encoder.solver.last_result.status, SolverStatus.TIMEOUT)


class TestEnumeration(unittest.TestCase):
    """Test cases for the enumeration of all colorings."""

    def test_four_cycle_two_colorings(self):
        """Test the two 2-colorings of a 4-cycle."""
        with ColoringEncoder(four_cycle(), 2) as encoder:
            colorings = decoded(encoder.enumerate_all_colorings())
        self.assertEqual(sorted(colorings), [(0, 1, 0, 1), (1, 0, 1, 0)])

    def test_triangle_permutations(self):
        """Test that the 3-colorings of a triangle are the permutations."""
        with ColoringEncoder(triangle(), 3) as encoder:
            colorings = decoded(encoder.enumerate_all_colorings())
        self.assertEqual(sorted(colorings), sorted(itertools.permutations(range(3))))

    def test_triangle_two_colors_empty(self):
        """Test enumeration when no coloring exists."""
        with ColoringEncoder(triangle(), 2) as encoder:
            self.assertEqual(encoder.enumerate_all_colorings(), [])

    def test_single_node(self):
        """Test enumeration for a single node and one color."""
        with ColoringEncoder(Graph(1), 1) as encoder:
            colorings = encoder.enumerate_all_colorings()
        self.assertEqual(decoded(colorings), [(0,)])

    def test_no_nodes_single_empty_coloring(self):
        """Test that the empty graph has exactly one coloring."""
        for k in range(3):
            with ColoringEncoder(Graph(0), k) as encoder:
                colorings = encoder.enumerate_all_colorings()
            self.assertEqual(len(colorings), 1)
            self.assertEqual(colorings[0].as_list(), [])

    def test_zero_colors_with_nodes(self):
        """Test enumeration with k = 0."""
        with ColoringEncoder(Graph(3), 0) as encoder:
            self.assertEqual(encoder.enumerate_all_colorings(), [])

    def test_coloring_values_cover_universe(self):
        """Test that each coloring gives every node exactly one TRUE color."""
        with ColoringEncoder(four_cycle(), 3) as encoder:
            for coloring in encoder.enumerate_all_colorings():
                self.assertEqual(len(coloring), 12)
                for node in range(4):
                    true_count = sum(
                        coloring.values[c * 4 + node] is LiteralValue.TRUE
                        for c in range(3)
                    )
                    self.assertEqual(true_count, 1)

    def test_matches_brute_force_exhaustively(self):
        """Test enumeration against brute force on small random graphs."""
        for num_nodes in range(0, 7):
            for num_colors in range(0, 5):
                for seed in range(2):
                    num_edges = num_nodes + seed if num_nodes else 0
                    graph = random_graph(num_nodes, num_edges, seed=seed)
                    expected = brute_force_colorings(graph, num_colors)
                    with ColoringEncoder(graph, num_colors) as encoder:
                        colorings = decoded(encoder.enumerate_all_colorings())

                    label = f"n={num_nodes}, k={num_colors}, seed={seed}"
                    self.assertEqual(len(colorings), len(set(colorings)), label)
                    self.assertEqual(set(colorings), expected, label)
                    for colors in colorings:
                        self.assertTrue(
                            is_valid_coloring(graph, list(colors), num_colors), label
                        )

    def test_fresh_encoders_agree(self):
        """Test that two encoders find the same set of colorings."""
        graph = random_graph(5, 5, seed=11)
        with ColoringEncoder(graph, 3) as first:
            first_set = set(decoded(first.enumerate_all_colorings()))
        with ColoringEncoder(graph, 3) as second:
            second_set = set(decoded(second.enumerate_all_colorings()))
        self.assertEqual(first_set, second_set)

    def test_repeated_enumeration_on_same_encoder(self):
        """Test that enumerating twice returns the same set."""
        with ColoringEncoder(four_cycle(), 3) as encoder:
            first = set(decoded(encoder.enumerate_all_colorings()))
            second = set(decoded(encoder.enumerate_all_colorings()))
            self.assertEqual(first, second)
            self.assertEqual(len(first), 18)

    def test_colorability_after_enumeration(self):
        """Test a colorability query after enumeration."""
        with ColoringEncoder(four_cycle(), 2) as encoder:
            self.assertEqual(len(encoder.enumerate_all_colorings()), 2)
            self.assertTrue(encoder.is_colorable())

    def test_both_queries_share_constraints(self):
        """Test that both queries share one set of base clauses."""
        with ColoringEncoder(triangle(), 3) as encoder:
            self.assertTrue(encoder.is_colorable())
            colorings = encoder.enumerate_all_colorings()
            # 21 base clauses plus one blocking clause per coloring
            self.assertEqual(encoder.solver.num_clauses, 21 + len(colorings))
        self.assertEqual(len(colorings), 6)

    def test_max_colorings_and_resume(self):
        """Test a capped enumeration and its resumption."""
        with ColoringEncoder(triangle(), 3) as encoder:
            partial = encoder.enumerate_all_colorings(max_colorings=2)
            self.assertEqual(len(partial), 2)
            full = encoder.enumerate_all_colorings()
        self.assertEqual(len(full), 6)
        self.assertEqual(decoded(full[:2]), decoded(partial))

    def test_max_colorings_from_config(self):
        """Test the enumeration cap taken from the configuration."""
        config = get_config()
        config.set("enumeration.max_colorings", 3)
        try:
            with ColoringEncoder(triangle(), 3) as encoder:
                self.assertEqual(len(encoder.enumerate_all_colorings()), 3)
        finally:
            config.set("enumeration.max_colorings", None)

    def test_negative_max_colorings_rejected(self):
        """Test that a negative cap is rejected."""
        with ColoringEncoder(triangle(), 3) as encoder:
            with self.assertRaises(InvalidArgumentError):
                encoder.enumerate_all_colorings(max_colorings=-1)

    def test_growing_universe_detected(self):
        """Test that a backend growing the universe is detected."""
        with ColoringEncoder(four_cycle(), 2, solver=GrowingSolver()) as encoder:
            with self.assertRaises(InvariantViolationError):
                encoder.enumerate_all_colorings()


class TestColoring(unittest.TestCase):
    """Test cases for the Coloring record."""

    def test_decode(self):
        """Test decoding a coloring to colors per node."""
        t, f = LiteralValue.TRUE, LiteralValue.FALSE
        # 2 nodes, 2 colors: node 0 -> color 1, node 1 -> color 0
        coloring = Coloring(2, 2, (f, t, t, f))
        self.assertEqual(coloring.color_of(0), 1)
        self.assertEqual(coloring.color_of(1), 0)
        self.assertEqual(coloring.as_list(), [1, 0])

    def test_unknown_values_mean_uncolored(self):
        """Test that UNKNOWN values leave a node uncolored."""
        u = LiteralValue.UNKNOWN
        self.assertIsNone(Coloring(1, 2, (u, u)).color_of(0))

    def test_size_mismatch(self):
        """Test that the value count must match the universe."""
        with self.assertRaises(InvariantViolationError):
            Coloring(2, 2, (LiteralValue.TRUE,))

    def test_colorings_to_array(self):
        """Test stacking colorings into an array."""
        with ColoringEncoder(four_cycle(), 2) as encoder:
            array = colorings_to_array(encoder.enumerate_all_colorings())
        self.assertEqual(array.shape, (2, 4))
        self.assertTrue(np.all(array[:, 0] != array[:, 1]))

    def test_colorings_to_array_empty(self):
        """Test stacking an empty list of colorings."""
        self.assertEqual(colorings_to_array([]).shape, (0, 0))


if __name__ == "__main__":
    unittest.main()
