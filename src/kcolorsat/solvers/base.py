"""
Base interface for the SAT backends driven by the coloring reduction.
Defines the incremental solver interface every backend must follow.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, NamedTuple


class SolverStatus(Enum):
    """Enum representing the status of a solver run."""

    UNKNOWN = "unknown"
    SATISFIABLE = "satisfiable"
    UNSATISFIABLE = "unsatisfiable"
    TIMEOUT = "timeout"
    ERROR = "error"


class LiteralValue(Enum):
    """Three-valued truth assignment of a variable in a model."""

    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    def __bool__(self) -> bool:
        return self is LiteralValue.TRUE


class Literal(NamedTuple):
    """A variable or its negation."""

    variable: int
    negated: bool = False

    def to_dimacs(self) -> int:
        """DIMACS form of the literal (variables are shifted to start at 1)."""
        return -(self.variable + 1) if self.negated else self.variable + 1


class SolverResult:
    """
    Outcome of the most recent solve call.
    """

    def __init__(
        self,
        status: SolverStatus = SolverStatus.UNKNOWN,
        runtime: float = 0.0,
        num_vars: int = 0,
        num_clauses: int = 0,
        statistics: dict[str, Any] | None = None,
        error_message: str | None = None,
    ):
        self.status = status
        self.runtime = runtime
        self.num_vars = num_vars
        self.num_clauses = num_clauses
        self.statistics = statistics or {}
        self.error_message = error_message

    @property
    def is_sat(self) -> bool:
        """Returns True if the problem is satisfiable."""
        return self.status == SolverStatus.SATISFIABLE

    @property
    def is_unsat(self) -> bool:
        """Returns True if the problem is unsatisfiable."""
        return self.status == SolverStatus.UNSATISFIABLE

    def __str__(self) -> str:
        status_str = str(self.status.value).upper()
        if self.status in (SolverStatus.SATISFIABLE, SolverStatus.UNSATISFIABLE):
            return (
                f"SAT Result: {status_str} ({self.num_vars} vars, "
                f"{self.num_clauses} clauses, {self.runtime:.4f}s)"
            )
        elif self.status == SolverStatus.TIMEOUT:
            return f"SAT Result: {status_str} (after {self.runtime:.4f}s)"
        elif self.status == SolverStatus.ERROR:
            return f"SAT Result: ERROR ({self.error_message})"
        else:
            return "SAT Result: UNKNOWN"


class SolverBase(ABC):
    """
    Abstract base class for incremental SAT backends.

    Variables are dense 0-based integers handed out by ``new_variable``.
    Clauses are never retracted once added. A backend instance is meant to be
    owned by a single caller and is not safe for concurrent use.
    """

    @abstractmethod
    def new_variable(self) -> int:
        """
        Allocate a fresh Boolean variable.

        Returns:
            The id of the new variable
        """

    @property
    @abstractmethod
    def num_vars(self) -> int:
        """Number of variables allocated so far."""

    @abstractmethod
    def add_clause(self, literals: Iterable[Literal]) -> None:
        """
        Assert a disjunction of literals.

        Args:
            literals: The literals of the clause. An empty clause makes the
                clause set unsatisfiable.
        """

    def add_clauses(self, clauses: Iterable[Iterable[Literal]]) -> None:
        """
        Add multiple clauses to the solver.

        Args:
            clauses: An iterable of clauses
        """
        for clause in clauses:
            self.add_clause(clause)

    @abstractmethod
    def solve(self, assumptions: Iterable[Literal] | None = None) -> bool:
        """
        Decide satisfiability of the clauses asserted so far.

        May be called repeatedly while clauses keep being added.

        Args:
            assumptions: Optional literals assumed true for this call only

        Returns:
            True if the current clause set is satisfiable
        """

    @abstractmethod
    def model_value(self, variable: int) -> LiteralValue:
        """
        Truth value of a variable in the model found by the last solve.

        Args:
            variable: Variable id

        Returns:
            The variable's LiteralValue
        """

    @property
    @abstractmethod
    def last_result(self) -> SolverResult:
        """Result record of the most recent solve call."""

    @abstractmethod
    def get_statistics(self) -> dict[str, Any]:
        """
        Get solver statistics.

        Returns:
            Dictionary of statistics
        """

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
