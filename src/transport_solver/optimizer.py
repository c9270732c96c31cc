"""Potential (MODI) optimization of a feasible transportation plan."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum

from .cycles import SteppingStoneCycle, find_cycle
from .data import Cell, CostModel, IterationInfo, OptimizerOptions, Plan, ProgressCallback
from .diagnostics import BasisHistory, ConvergenceMonitor
from .exceptions import InvalidBasisError, InvalidProblemError, IterationLimitError
from .potentials import complete_basis, compute_potentials, cycle_rank, select_entering_cell

logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    """Terminal states of the optimization loop."""

    OPTIMAL = "optimal"
    STALLED = "stalled"
    ITERATION_LIMIT = "iteration_limit"


@dataclass(frozen=True)
class OptimizationOutcome:
    """How an optimize() run ended.

    Attributes:
        status: OPTIMAL when no non-basic cell has a negative reduced cost,
                STALLED when the loop could not improve further (no cycle,
                undetermined potentials or basis cycling), ITERATION_LIMIT when
                the cap was reached with an improving cell still available.
        iterations: Number of reallocation steps performed.
        initial_cost: Plan cost when optimize() was called.
        final_cost: Plan cost on return.
        reason: Human-readable explanation for STALLED and ITERATION_LIMIT.
        degenerate_iterations: Steps that shifted a zero quantity.
    """

    status: OutcomeStatus
    iterations: int
    initial_cost: int
    final_cost: int
    reason: str | None = None
    degenerate_iterations: int = 0

    @property
    def is_optimal(self) -> bool:
        return self.status is OutcomeStatus.OPTIMAL

    @property
    def may_be_suboptimal(self) -> bool:
        return self.status is not OutcomeStatus.OPTIMAL

    @property
    def savings(self) -> int:
        return self.initial_cost - self.final_cost

    def raise_for_status(self) -> None:
        """Raise IterationLimitError if the run ended at the iteration cap."""
        if self.status is OutcomeStatus.ITERATION_LIMIT:
            raise IterationLimitError(
                f"Iteration limit reached: {self.iterations} iterations completed",
                iterations=self.iterations,
                total_cost=self.final_cost,
            )


def reallocate(model: CostModel, plan: Plan, cycle: SteppingStoneCycle) -> tuple[int, Cell]:
    """Shift the largest feasible quantity around a stepping-stone cycle.

    The quantity q is the smallest allocation among the donating cells. Every
    receiving cell gains q and every donating cell loses q, so no row or column
    total changes. The entering cell joins the basis and the first donating
    cell (in cycle order) holding exactly q leaves it. Other donating cells that
    also drop to zero stay in the basis as degenerate basic cells, which keeps
    the basis at its original size. total_cost is recomputed from scratch.

    Args:
        model: Problem supplying the cost matrix.
        plan: Plan mutated in place.
        cycle: Cycle whose entering cell is not yet basic.

    Returns:
        (q, leaving_cell).
    """
    donating = cycle.donating
    quantity = min(int(plan.allocations[cell]) for cell in donating)
    leaving = next(cell for cell in donating if plan.allocations[cell] == quantity)

    for cell in cycle.receiving:
        plan.allocations[cell] += quantity
    for cell in donating:
        plan.allocations[cell] -= quantity

    plan.basis.discard(leaving)
    plan.basis.add(cycle.entering)
    plan.refresh_cost(model)
    return quantity, leaving


def reduce_to_basic_plan(model: CostModel, plan: Plan) -> int:
    """Remove cycles from the positive cells of a feasible plan.

    A feasible plan whose positive cells form a cycle is not a basic solution,
    so it has no unique potentials. Each pass finds one such cycle and shifts
    the smallest donating allocation around it in the direction that does not
    raise the cost. Donating cells that reach zero leave plan.basis. Passes
    repeat until the positive cells form a forest. Row and column totals never
    change and total_cost is recomputed when anything moved.

    Args:
        model: Problem supplying the cost matrix.
        plan: Feasible plan, mutated in place.

    Returns:
        Number of cycles removed (0 when the plan was already basic).

    Examples:
        >>> model = build_model([10, 10], [10, 10], [[1, 5], [5, 1]])
        >>> plan = Plan(allocations=[[5, 5], [5, 5]])
        >>> reduce_to_basic_plan(model, plan)
        1
        >>> plan.allocations.tolist()
        [[10, 0], [0, 10]]
    """
    rows, cols = model.shape
    removed = 0
    while True:
        positive = plan.basic_cells()
        if cycle_rank(positive, rows, cols) <= 0:
            break

        # A positive cycle rank means some positive cell closes a cycle with the others.
        cycle: SteppingStoneCycle | None = None
        for cell in positive:
            cycle = find_cycle([other for other in positive if other != cell], cell)
            if cycle is not None:
                break
        if cycle is None:
            raise InvalidBasisError(
                f"Positive cells have cycle rank {cycle_rank(positive, rows, cols)} but no "
                f"stepping-stone cycle was found among them."
            )

        receiving_cost = sum(model.costs[i][j] for i, j in cycle.receiving)
        donating_cost = sum(model.costs[i][j] for i, j in cycle.donating)
        if receiving_cost > donating_cost:
            # Rotate by one cell so the roles swap and the closing cell donates.
            cycle = SteppingStoneCycle(cells=cycle.cells[1:] + cycle.cells[1:2])

        quantity = min(int(plan.allocations[cell]) for cell in cycle.donating)
        for cell in cycle.receiving:
            plan.allocations[cell] += quantity
        for cell in cycle.donating:
            plan.allocations[cell] -= quantity
            if plan.allocations[cell] == 0:
                plan.basis.discard(cell)
        removed += 1

    if removed:
        plan.refresh_cost(model)
        logger.info(
            "Reduced plan to a basic solution",
            extra={"cycles_removed": removed, "total_cost": plan.total_cost},
        )
    return removed


def _check_plan(model: CostModel, plan: Plan) -> None:
    if plan.shape != model.shape:
        raise InvalidProblemError(
            f"Plan has shape {plan.shape}, expected {model.shape} (supplies x demands)."
        )
    if plan.row_sums() != list(model.supplies) or plan.column_sums() != list(model.demands):
        raise InvalidProblemError(
            "Plan is not feasible: row sums must equal supplies and column sums must equal "
            f"demands (rows {plan.row_sums()} vs {list(model.supplies)}, columns "
            f"{plan.column_sums()} vs {list(model.demands)})."
        )


def optimize(
    model: CostModel,
    plan: Plan,
    options: OptimizerOptions | None = None,
    max_iterations: int | None = None,
    progress_callback: ProgressCallback | None = None,
) -> tuple[Plan, OptimizationOutcome]:
    """Improve a feasible plan with the method of potentials until it is optimal.

    Each iteration computes row/column potentials from the basis, prices every
    non-basic cell, and moves the cell with the most negative reduced cost into
    the basis by reallocating along its stepping-stone cycle. The total cost
    never increases.

    Args:
        model: Balanced transportation problem.
        plan: Feasible plan, typically from build_initial_plan(). Mutated in
              place and also returned.
        options: Optimizer configuration. If None, uses defaults.
        max_iterations: Iteration cap. Overrides options.max_iterations if provided.
        progress_callback: Called with IterationInfo every options.progress_interval steps.

    Returns:
        (plan, outcome). outcome.status is OPTIMAL, STALLED or ITERATION_LIMIT;
        the last two mean the plan is feasible but may not be optimal.

    Raises:
        UnbalancedProblemError: If the model is unbalanced.
        InvalidProblemError: If the plan does not fit the model or is infeasible.
        InvalidBasisError: If plan.basis holds cells outside the plan or zero-valued
                           cells that close a cycle. Positive cells forming a cycle
                           are not an error: the plan is first reduced to a basic one.

    Examples:
        >>> plan = build_initial_plan(model)
        >>> plan, outcome = optimize(model, plan)
        >>> outcome.status
        <OutcomeStatus.OPTIMAL: 'optimal'>
    """
    options = options if options is not None else OptimizerOptions()
    model.ensure_balanced()
    _check_plan(model, plan)
    if max_iterations is None:
        max_iterations = options.resolve_max_iterations(model)

    start_time = time.time()
    initial_cost = plan.refresh_cost(model)
    plan.basis.update(plan.basic_cells())
    reduce_to_basic_plan(model, plan)
    complete_basis(model, plan)

    logger.info(
        "Starting potential optimization",
        extra={
            "rows": model.shape[0],
            "columns": model.shape[1],
            "initial_cost": initial_cost,
            "basis_size": len(plan.basis),
            "max_iterations": max_iterations,
            "tolerance": options.tolerance,
        },
    )

    monitor = ConvergenceMonitor()
    history = BasisHistory()
    history.record_basis(plan.basis)
    iterations = 0
    reason: str | None = None

    while True:
        potentials = compute_potentials(model, plan.basis)
        if potentials.defaulted:
            status = OutcomeStatus.STALLED
            reason = "potentials undetermined for a disconnected basis"
            break

        entering = select_entering_cell(model, plan, potentials, options.tolerance)
        if entering is None:
            status = OutcomeStatus.OPTIMAL
            break
        if iterations >= max_iterations:
            status = OutcomeStatus.ITERATION_LIMIT
            reason = f"iteration limit of {max_iterations} reached with improving cells left"
            logger.warning(
                "Iteration limit reached before optimality",
                extra={"iterations": iterations, "max_iterations": max_iterations},
            )
            break

        cell, delta = entering
        cycle = find_cycle(plan.basis, cell)
        if cycle is None:
            status = OutcomeStatus.STALLED
            reason = f"no stepping-stone cycle through cell {cell}"
            logger.warning(
                "Cycle search failed; stopping without claiming optimality",
                extra={"entering_cell": cell, "reduced_cost": delta},
            )
            break

        previous_cost = plan.total_cost
        quantity, leaving = reallocate(model, plan, cycle)
        iterations += 1
        monitor.record_iteration(plan.total_cost, is_degenerate=quantity == 0, iteration=iterations)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Reallocated along stepping-stone cycle",
                extra={
                    "iteration": iterations,
                    "entering_cell": cell,
                    "leaving_cell": leaving,
                    "reduced_cost": delta,
                    "quantity": quantity,
                    "cycle_length": len(cycle),
                    "cost_change": plan.total_cost - previous_cost,
                },
            )

        if progress_callback is not None and iterations % options.progress_interval == 0:
            progress_callback(
                IterationInfo(
                    iteration=iterations,
                    max_iterations=max_iterations,
                    entering_cell=cell,
                    reduced_cost=delta,
                    quantity=quantity,
                    leaving_cell=leaving,
                    total_cost=plan.total_cost,
                )
            )

        if options.detect_cycling:
            history.record_basis(plan.basis)
            if history.is_cycling(min_revisits=options.cycling_revisits):
                status = OutcomeStatus.STALLED
                reason = "basis cycling detected on degenerate steps"
                logger.warning(
                    "Basis cycling detected",
                    extra={
                        "iterations": iterations,
                        "basis_visits": history.get_most_frequent_basis_count(),
                        **monitor.get_diagnostic_summary(),
                    },
                )
                break

    elapsed_ms = (time.time() - start_time) * 1000
    logger.info(
        "Optimization complete",
        extra={
            "status": status.value,
            "iterations": iterations,
            "initial_cost": initial_cost,
            "final_cost": plan.total_cost,
            "degenerate_iterations": monitor.degenerate_steps,
            "elapsed_ms": elapsed_ms,
        },
    )

    return plan, OptimizationOutcome(
        status=status,
        iterations=iterations,
        initial_cost=initial_cost,
        final_cost=plan.total_cost,
        reason=reason,
        degenerate_iterations=monitor.degenerate_steps,
    )


def is_optimal(model: CostModel, plan: Plan, tolerance: float = 1e-4) -> bool:
    """Return True if no non-basic cell of the plan has a negative reduced cost."""
    candidate = plan.copy()
    cost = candidate.refresh_cost(model)
    candidate.basis.update(candidate.basic_cells())
    if reduce_to_basic_plan(model, candidate) and candidate.total_cost < cost:
        return False
    complete_basis(model, candidate)
    potentials = compute_potentials(model, candidate.basis)
    if potentials.defaulted:
        return False
    return select_entering_cell(model, candidate, potentials, tolerance) is None

