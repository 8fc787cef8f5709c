"""
Incremental SAT backend built on PySAT.

Wraps a single ``pysat.solvers.Solver`` (MiniSat 2.2 by default) and exposes
it through the SolverBase interface: dense 0-based variables, clause
assertion, repeated solving over a growing clause set and model inspection.
"""

import logging
import threading
import time
from typing import Any, Iterable

from pysat.solvers import Solver, SolverNames

from ..config import get_config
from ..utils.exceptions import (
    ConfigurationError,
    InvariantViolationError,
    SolverError,
    SolverTimeoutError,
)
from .base import Literal, LiteralValue, SolverBase, SolverResult, SolverStatus
from .registry import register_solver

# Set up logging
logger = logging.getLogger(__name__)


def available_backends() -> set[str]:
    """All solver names (and aliases) PySAT accepts."""
    return {
        alias
        for attr, aliases in vars(SolverNames).items()
        if not attr.startswith("_") and isinstance(aliases, tuple)
        for alias in aliases
    }


@register_solver("pysat")
class PySATSolver(SolverBase):
    """
    PySAT-backed incremental solver.
    """

    def __init__(self, backend: str | None = None, timeout: float | None = None):
        """
        Initialize the backend.

        Args:
            backend: PySAT solver name (e.g. "minisat22", "glucose4", "cadical153")
            timeout: Optional deadline for each solve call in seconds
        """
        config = get_config()
        self.backend = backend or config.get("solver.backend", "minisat22")
        self.timeout = timeout if timeout is not None else config.get("solver.timeout")

        if self.backend.lower() not in available_backends():
            raise ConfigurationError(f"Unknown PySAT backend '{self.backend}'")

        try:
            self._solver = Solver(name=self.backend, use_timer=True)
        except NotImplementedError as e:
            raise ConfigurationError(
                f"Unknown PySAT backend '{self.backend}': {e}"
            ) from e

        self._num_vars = 0
        self._num_clauses = 0
        # Set once an empty clause is asserted; the clause set stays unsatisfiable
        self._has_empty_clause = False
        self._model: dict[int, bool] | None = None
        self._last_result = SolverResult()
        self.stats = {
            "solve_calls": 0,
            "total_time": 0.0,
            "solver_name": self.backend,
        }

        logger.debug(f"Created PySAT backend '{self.backend}' (timeout={self.timeout})")

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def num_clauses(self) -> int:
        return self._num_clauses

    @property
    def last_result(self) -> SolverResult:
        return self._last_result

    def new_variable(self) -> int:
        variable = self._num_vars
        self._num_vars += 1
        return variable

    def _to_dimacs(self, literals: Iterable[Literal]) -> list[int]:
        dimacs = []
        for literal in literals:
            literal = Literal(*literal)
            if not 0 <= literal.variable < self._num_vars:
                raise InvariantViolationError(
                    "Literal references an unallocated variable",
                    expected=f"< {self._num_vars}",
                    actual=literal.variable,
                )
            dimacs.append(literal.to_dimacs())
        return dimacs

    def add_clause(self, literals: Iterable[Literal]) -> None:
        """
        Assert a clause. Adding a clause invalidates the current model.

        Args:
            literals: Literals over variables allocated by ``new_variable``
        """
        if self._solver is None:
            raise SolverError("Clause added to a closed solver", backend=self.backend)

        clause = self._to_dimacs(literals)
        self._model = None
        self._num_clauses += 1

        if not clause:
            self._has_empty_clause = True
            return

        try:
            self._solver.add_clause(clause)
        except (RuntimeError, TypeError, ValueError) as e:
            raise SolverError(
                f"Failed to add clause {clause}: {e}", backend=self.backend
            ) from e

    def solve(self, assumptions: Iterable[Literal] | None = None) -> bool:
        """
        Solve the clauses asserted so far.

        Args:
            assumptions: Optional literals assumed true for this call only

        Returns:
            True if satisfiable

        Raises:
            SolverTimeoutError: If a timeout is configured and exceeded
            SolverError: If the backend fails
        """
        if self._solver is None:
            raise SolverError("Solve called on a closed solver", backend=self.backend)

        assumed = self._to_dimacs(assumptions or [])
        self._model = None
        self.stats["solve_calls"] += 1
        start_time = time.time()

        if self._has_empty_clause:
            satisfiable = False
        else:
            try:
                satisfiable = self._run_backend(assumed)
            except SolverTimeoutError:
                runtime = time.time() - start_time
                self._record(SolverStatus.TIMEOUT, runtime)
                raise
            except (RuntimeError, NotImplementedError) as e:
                runtime = time.time() - start_time
                self._record(SolverStatus.ERROR, runtime, error_message=str(e))
                raise SolverError(f"Solve failed: {e}", backend=self.backend) from e

        runtime = time.time() - start_time
        if satisfiable:
            model = self._solver.get_model() or []
            self._model = {abs(lit) - 1: lit > 0 for lit in model}
            self._record(SolverStatus.SATISFIABLE, runtime)
        else:
            self._record(SolverStatus.UNSATISFIABLE, runtime)

        logger.debug(str(self._last_result))
        return satisfiable

    def _run_backend(self, assumptions: list[int]) -> bool:
        if self.timeout is None:
            return self._solver.solve(assumptions=assumptions)

        # solve_limited returns None when the interrupt fires first
        timer = threading.Timer(self.timeout, self._solver.interrupt)
        start_time = time.time()
        timer.start()
        try:
            outcome = self._solver.solve_limited(
                assumptions=assumptions, expect_interrupt=True
            )
        finally:
            timer.cancel()
            self._solver.clear_interrupt()

        if outcome is None:
            raise SolverTimeoutError(
                time_spent=time.time() - start_time, backend=self.backend
            )
        return outcome

    def _record(
        self, status: SolverStatus, runtime: float, error_message: str | None = None
    ) -> None:
        self.stats["total_time"] += runtime
        self._last_result = SolverResult(
            status=status,
            runtime=runtime,
            num_vars=self._num_vars,
            num_clauses=self._num_clauses,
            statistics=dict(self.stats),
            error_message=error_message,
        )

    def model_value(self, variable: int) -> LiteralValue:
        """
        Truth value of ``variable`` in the current model.

        Variables that the backend never saw in a clause read as UNKNOWN.

        Raises:
            InvariantViolationError: If no satisfying model is available
        """
        if self._model is None:
            raise InvariantViolationError(
                "Model read without a preceding satisfiable solve",
                expected=SolverStatus.SATISFIABLE.value,
                actual=self._last_result.status.value,
            )
        if not 0 <= variable < self._num_vars:
            raise InvariantViolationError(
                "Model read of an unallocated variable",
                expected=f"< {self._num_vars}",
                actual=variable,
            )

        value = self._model.get(variable)
        if value is None:
            return LiteralValue.UNKNOWN
        return LiteralValue.TRUE if value else LiteralValue.FALSE

    def get_statistics(self) -> dict[str, Any]:
        stats = dict(self.stats)
        stats["num_vars"] = self._num_vars
        stats["num_clauses"] = self._num_clauses
        if self._solver is not None:
            stats.update(self._solver.accum_stats() or {})
        return stats

    def close(self) -> None:
        if self._solver is not None:
            self._solver.delete()
            self._solver = None
