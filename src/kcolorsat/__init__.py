"""
kcolorsat: graph k-coloring through a SAT reduction.
"""

from .encoder import Coloring, ColoringEncoder, colorings_to_array
from .graph import Graph, is_valid_coloring, random_graph
from .solvers import Literal, LiteralValue, SolverBase, SolverRegistry
from .utils.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    InvariantViolationError,
    KColorBaseException,
    SolverError,
    SolverTimeoutError,
)

__version__ = "0.1.0"

__all__ = [
    "Coloring",
    "ColoringEncoder",
    "colorings_to_array",
    "Graph",
    "is_valid_coloring",
    "random_graph",
    "Literal",
    "LiteralValue",
    "SolverBase",
    "SolverRegistry",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvariantViolationError",
    "KColorBaseException",
    "SolverError",
    "SolverTimeoutError",
]
