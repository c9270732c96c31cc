"""High-level entrypoints for the transportation problem solver library."""

from .cost import total_cost
from .cycles import SteppingStoneCycle, find_cycle, require_cycle
from .data import CostModel, IterationInfo, OptimizerOptions, Plan, ProgressCallback, build_model
from .diagnostics import BasisHistory, ConvergenceMonitor
from .exceptions import (
    CycleNotFoundError,
    InvalidBasisError,
    InvalidProblemError,
    IterationLimitError,
    SolverConfigurationError,
    TransportSolverError,
    UnbalancedProblemError,
)
from .initial import build_initial_plan
from .optimizer import (
    OptimizationOutcome,
    OutcomeStatus,
    is_optimal,
    optimize,
    reallocate,
    reduce_to_basic_plan,
)
from .potentials import (
    Potentials,
    complete_basis,
    compute_potentials,
    cycle_rank,
    reduced_costs,
    select_entering_cell,
)
from .report import PlanComparison, compare_plans, format_model, format_plan
from .solver import SolveResult, load_model, save_result, solve_transportation
from .utils import ValidationResult, validate_plan

__version__ = "0.1.0"

__all__ = [
    # Main API
    "build_model",
    "build_initial_plan",
    "optimize",
    "total_cost",
    "solve_transportation",
    "load_model",
    "save_result",
    # Data
    "CostModel",
    "Plan",
    "SolveResult",
    "OptimizationOutcome",
    "OutcomeStatus",
    # Configuration
    "OptimizerOptions",
    # Progress tracking
    "IterationInfo",
    "ProgressCallback",
    # Engine internals
    "Potentials",
    "compute_potentials",
    "reduced_costs",
    "select_entering_cell",
    "complete_basis",
    "cycle_rank",
    "reduce_to_basic_plan",
    "SteppingStoneCycle",
    "find_cycle",
    "require_cycle",
    "reallocate",
    "is_optimal",
    # Reporting and validation
    "format_model",
    "format_plan",
    "compare_plans",
    "PlanComparison",
    "validate_plan",
    "ValidationResult",
    # Diagnostics
    "ConvergenceMonitor",
    "BasisHistory",
    # Exceptions
    "TransportSolverError",
    "InvalidProblemError",
    "UnbalancedProblemError",
    "CycleNotFoundError",
    "InvalidBasisError",
    "IterationLimitError",
    "SolverConfigurationError",
]
