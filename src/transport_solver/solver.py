"""Public solver entrypoints."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .data import CostModel, OptimizerOptions, Plan, ProgressCallback
from .initial import build_initial_plan
from .io import load_model as load_model_file
from .io import save_result as save_result_file
from .optimizer import OptimizationOutcome, optimize
from .potentials import Potentials, compute_potentials


@dataclass
class SolveResult:
    """Output of solve_transportation().

    Attributes:
        initial_plan: North-west corner plan the optimizer started from.
        plan: Final plan after optimization.
        outcome: How the optimization loop ended.
        potentials: Row/column potentials of the final basis. For optimal plans
                    these are the dual prices of the supplies and demands.
    """

    initial_plan: Plan
    plan: Plan
    outcome: OptimizationOutcome
    potentials: Potentials

    @property
    def status(self) -> str:
        return self.outcome.status.value

    @property
    def total_cost(self) -> int:
        return self.plan.total_cost


def solve_transportation(
    model: CostModel,
    options: OptimizerOptions | None = None,
    max_iterations: int | None = None,
    progress_callback: ProgressCallback | None = None,
) -> SolveResult:
    """Solve a balanced transportation problem.

    Builds the north-west corner plan and improves it with the method of
    potentials. The initial plan is kept as a separate copy for reporting.

    Args:
        model: Balanced transportation problem.
        options: Optimizer configuration. If None, uses defaults.
        max_iterations: Iteration cap. Overrides options.max_iterations if provided.
        progress_callback: Receives IterationInfo after reallocation steps.

    Returns:
        SolveResult with the initial plan, final plan, outcome and potentials.

    Raises:
        UnbalancedProblemError: If total supply differs from total demand.

    Examples:
        >>> model = build_model([200, 150, 150], [90, 100, 70, 130, 110],
        ...                     [[12, 15, 21, 14, 17], [14, 8, 15, 11, 21], [19, 16, 26, 12, 20]])
        >>> result = solve_transportation(model)
        >>> result.status, result.initial_plan.total_cost, result.total_cost
        ('optimal', 7360, 6520)
    """
    # Build a fresh plan each call so concurrent solves never share one.
    initial_plan = build_initial_plan(model)
    plan, outcome = optimize(
        model,
        initial_plan.copy(),
        options=options,
        max_iterations=max_iterations,
        progress_callback=progress_callback,
    )
    return SolveResult(
        initial_plan=initial_plan,
        plan=plan,
        outcome=outcome,
        potentials=compute_potentials(model, plan.basis),
    )


def load_model(path: str | Path) -> CostModel:
    """Load a transportation problem from a JSON file.

    Args:
        path: Path to JSON file with "supplies", "demands" and "costs".

    Returns:
        CostModel instance ready to solve.

    Raises:
        FileNotFoundError: If file does not exist.
        InvalidProblemError: If JSON is malformed or the model is invalid.
    """
    return load_model_file(path)


def save_result(path: str | Path, result: SolveResult) -> None:
    """Save a solve result to a JSON file.

    Args:
        path: Path where JSON file will be written.
        result: SolveResult from solve_transportation().
    """
    save_result_file(path, result)
