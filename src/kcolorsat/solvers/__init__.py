"""
SAT backends with a unified incremental interface.
"""

from .base import Literal, LiteralValue, SolverBase, SolverResult, SolverStatus
from .registry import SolverRegistry, register_solver

# Register every backend module of this package
SolverRegistry.auto_discover()

__all__ = [
    "Literal",
    "LiteralValue",
    "SolverBase",
    "SolverResult",
    "SolverStatus",
    "SolverRegistry",
    "register_solver",
]
