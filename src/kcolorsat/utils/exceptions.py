"""
Custom exception classes for graph coloring via SAT.

This module defines specialized exceptions for the failure modes of graph
construction, the coloring reduction, and the underlying SAT backend.
"""


class KColorBaseException(Exception):
    """Base exception class for all kcolorsat exceptions."""
    pass


class InvalidArgumentError(KColorBaseException, ValueError):
    """
    Raised when a caller passes a malformed argument, e.g. a negative node
    count or an edge whose endpoints are out of range or out of order.
    """
    def __init__(self, message="Invalid argument", argument=None):
        self.argument = argument
        self.message = message
        if argument is not None:
            self.message = f"{message}: {argument!r}"
        super().__init__(self.message)


class InvariantViolationError(KColorBaseException):
    """
    Raised when an internal invariant does not hold, e.g. the variable
    universe grows during enumeration or a model is read without a
    satisfying solve.

    This should be unreachable in correct usage and is treated as fatal.
    """
    def __init__(
        self, message="Internal invariant violated", expected=None, actual=None
    ):
        self.expected = expected
        self.actual = actual
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        if self.expected is None and self.actual is None:
            return self.message
        return f"{self.message} (expected={self.expected}, actual={self.actual})"


class SolverError(KColorBaseException):
    """
    Raised when the SAT backend reports a fault.

    Solving is deterministic for a fixed clause set, so these are never retried.
    """
    def __init__(self, message="SAT backend failure", backend=None):
        self.backend = backend
        self.message = message
        if backend is not None:
            self.message = f"{message} [{backend}]"
        super().__init__(self.message)


class SolverTimeoutError(SolverError):
    """
    Raised when a solve call exceeds its configured deadline.

    Attributes:
        time_spent: Time spent before the interrupt in seconds
    """
    def __init__(
        self, message="Solver exceeded time limit", time_spent=None, backend=None
    ):
        self.time_spent = time_spent
        super().__init__(message, backend=backend)

    def __str__(self):
        if self.time_spent is None:
            return self.message
        return f"{self.message} (time_spent={self.time_spent:.2f}s)"


class ConfigurationError(KColorBaseException):
    """
    Raised when there's a problem with solver configuration.
    """
    pass
