"""Custom exceptions for the transportation solver library."""

from __future__ import annotations


class TransportSolverError(Exception):
    """Base exception for all transportation solver errors.

    All custom exceptions in the transport_solver package inherit from this class,
    allowing users to catch all solver-related errors with a single except clause.

    Example:
        try:
            plan = build_initial_plan(model)
        except TransportSolverError as e:
            print(f"Solver error: {e}")
    """


class InvalidProblemError(TransportSolverError):
    """Raised when a problem definition is invalid or malformed.

    This includes:
    - Cost matrix shape not matching the supply/demand vectors
    - Negative or non-integral supplies, demands or costs
    - Allocation matrices whose shape does not match the model
    - Malformed JSON input

    Example:
        InvalidProblemError("Cost matrix row 1 has 4 entries, expected 5")
    """


class UnbalancedProblemError(InvalidProblemError):
    """Raised when total supply differs from total demand.

    The engine only solves balanced problems. Unbalanced instances are rejected
    before any allocation is attempted instead of being padded with dummy rows
    or columns.

    Example:
        UnbalancedProblemError(
            "Problem is unbalanced: total supply 10 != total demand 15",
            total_supply=10,
            total_demand=15,
        )
    """

    def __init__(self, message: str, total_supply: int = 0, total_demand: int = 0):
        """Initialize with message and the mismatched totals."""
        super().__init__(message)
        self.total_supply = total_supply
        self.total_demand = total_demand


class CycleNotFoundError(TransportSolverError):
    """Raised when no stepping-stone cycle closes through the entering cell.

    The optimizer never lets this escape: a missing cycle ends the run in the
    stalled state. It is raised only by ``require_cycle`` for callers that want
    a hard failure.
    """

    def __init__(self, message: str, entering_cell: tuple[int, int] | None = None):
        """Initialize with message and the cell that failed to enter."""
        super().__init__(message)
        self.entering_cell = entering_cell


class InvalidBasisError(TransportSolverError):
    """Raised when the basic cells cannot form a spanning tree.

    This occurs when a caller-supplied plan has positive cells that form a
    closed cycle (it is not a basic solution), or when the basis cannot be
    reconnected with zero-valued cells.
    """


class IterationLimitError(TransportSolverError):
    """Raised when the optimizer reaches the iteration limit before converging.

    This is technically not an error condition - the optimizer returns a feasible
    plan that is not proven optimal. ``optimize`` never raises it; call
    ``OptimizationOutcome.raise_for_status()`` to treat the limit as an error.

    Example:
        IterationLimitError(
            "Iteration limit reached: 100 iterations completed",
            iterations=100,
            total_cost=6580,
        )
    """

    def __init__(self, message: str, iterations: int = 0, total_cost: int | None = None):
        """Initialize with message and plan state."""
        super().__init__(message)
        self.iterations = iterations
        self.total_cost = total_cost


class SolverConfigurationError(TransportSolverError):
    """Raised when optimizer configuration or options are invalid.

    Example:
        SolverConfigurationError("max_iterations must be positive, got -1")
    """
