"""Core data structures for balanced transportation problems."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from .cost import total_cost
from .exceptions import InvalidProblemError, SolverConfigurationError, UnbalancedProblemError

Cell = tuple[int, int]


def _as_count(value: object, what: str) -> int:
    # Supplies, demands and costs are whole, non-negative quantities.
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise InvalidProblemError(f"{what} must be an integer, got {value!r}") from exc
    if number != value or isinstance(value, bool):
        raise InvalidProblemError(f"{what} must be an integer, got {value!r}")
    if number < 0:
        raise InvalidProblemError(f"{what} must be non-negative, got {number}")
    return number


@dataclass(frozen=True)
class CostModel:
    """Immutable description of a transportation problem.

    Attributes:
        supplies: Capacity of each supply node (row), length m.
        demands: Requirement of each demand node (column), length n.
        costs: m x n matrix of unit shipping costs.

    Examples:
        >>> model = CostModel(
        ...     supplies=(20, 30),
        ...     demands=(25, 25),
        ...     costs=((4, 6), (5, 3)),
        ... )
        >>> model.shape
        (2, 2)
        >>> model.is_balanced()
        True

    Note:
        Balance (total supply == total demand) is not enforced at construction so
        that unbalanced instances can be loaded and reported. Every solver entry
        point calls ensure_balanced() before allocating.
    """

    supplies: tuple[int, ...]
    demands: tuple[int, ...]
    costs: tuple[tuple[int, ...], ...]

    def __post_init__(self) -> None:
        supplies = tuple(_as_count(s, f"Supply {i}") for i, s in enumerate(self.supplies))
        demands = tuple(_as_count(d, f"Demand {j}") for j, d in enumerate(self.demands))
        if not supplies or not demands:
            raise InvalidProblemError(
                f"A transportation problem needs at least one supply and one demand node, "
                f"got {len(supplies)} supplies and {len(demands)} demands."
            )
        rows = [tuple(row) for row in self.costs]
        if len(rows) != len(supplies):
            raise InvalidProblemError(
                f"Cost matrix has {len(rows)} rows, expected {len(supplies)} (one per supply node)."
            )
        costs = []
        for i, row in enumerate(rows):
            if len(row) != len(demands):
                raise InvalidProblemError(
                    f"Cost matrix row {i} has {len(row)} entries, expected {len(demands)} "
                    f"(one per demand node)."
                )
            costs.append(tuple(_as_count(c, f"Cost ({i}, {j})") for j, c in enumerate(row)))
        object.__setattr__(self, "supplies", supplies)
        object.__setattr__(self, "demands", demands)
        object.__setattr__(self, "costs", tuple(costs))

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.supplies), len(self.demands)

    @property
    def total_supply(self) -> int:
        return sum(self.supplies)

    @property
    def total_demand(self) -> int:
        return sum(self.demands)

    @property
    def cost_matrix(self) -> np.ndarray:
        """Read-only int64 array view of the cost matrix."""
        matrix = np.array(self.costs, dtype=np.int64)
        matrix.flags.writeable = False
        return matrix

    def is_balanced(self) -> bool:
        return self.total_supply == self.total_demand

    def ensure_balanced(self) -> None:
        """Raise UnbalancedProblemError unless total supply equals total demand."""
        if not self.is_balanced():
            raise UnbalancedProblemError(
                f"Problem is unbalanced: total supply {self.total_supply} != total demand "
                f"{self.total_demand}. Only balanced transportation problems are supported.",
                total_supply=self.total_supply,
                total_demand=self.total_demand,
            )


@dataclass(eq=False)
class Plan:
    """A shipment plan for a CostModel.

    Attributes:
        allocations: m x n int64 array of shipped quantities.
        total_cost: Cached value of sum(allocations * costs). Refreshed by
                    refresh_cost() after every mutation.
        basis: Cells treated as basic. Holds every positive cell plus any
               zero-valued cells kept to hold a degenerate basis together.
               Defaults to the positive cells.

    Note:
        A Plan is owned by one optimize() call at a time. Use copy() to keep a
        snapshot before optimizing in place.
    """

    allocations: np.ndarray
    total_cost: int = 0
    basis: set[Cell] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.allocations = np.array(self.allocations, dtype=np.int64)
        if self.allocations.ndim != 2:
            raise InvalidProblemError(
                f"Allocations must be a 2-D matrix, got {self.allocations.ndim} dimensions."
            )
        if (self.allocations < 0).any():
            raise InvalidProblemError("Allocations must be non-negative.")
        if not self.basis:
            self.basis = set(self.basic_cells())
        else:
            self.basis = {(int(i), int(j)) for i, j in self.basis}

    @property
    def shape(self) -> tuple[int, int]:
        rows, cols = self.allocations.shape
        return int(rows), int(cols)

    def basic_cells(self) -> list[Cell]:
        """Return the cells with strictly positive allocation in row-major order."""
        return [(int(i), int(j)) for i, j in zip(*np.nonzero(self.allocations > 0))]

    def row_sums(self) -> list[int]:
        return [int(x) for x in self.allocations.sum(axis=1)]

    def column_sums(self) -> list[int]:
        return [int(x) for x in self.allocations.sum(axis=0)]

    def refresh_cost(self, model: CostModel) -> int:
        """Recompute total_cost from scratch over the full matrix."""
        self.total_cost = total_cost(model, self.allocations)
        return self.total_cost

    def copy(self) -> Plan:
        return Plan(
            allocations=self.allocations.copy(),
            total_cost=self.total_cost,
            basis=set(self.basis),
        )


@dataclass(frozen=True)
class IterationInfo:
    """Progress information delivered after each reallocation step.

    Attributes:
        iteration: Iteration number (1-based).
        max_iterations: Iteration cap for this run.
        entering_cell: Non-basic cell that entered the basis.
        reduced_cost: Reduced cost of the entering cell (negative).
        quantity: Amount shifted around the stepping-stone cycle.
        leaving_cell: Donating cell that left the basis.
        total_cost: Plan cost after the step.
    """

    iteration: int
    max_iterations: int
    entering_cell: Cell
    reduced_cost: float
    quantity: int
    leaving_cell: Cell
    total_cost: int


# Type alias for progress callback function
ProgressCallback = Callable[[IterationInfo], None]


@dataclass
class OptimizerOptions:
    """Configuration options for the potential (MODI) optimizer.

    Attributes:
        max_iterations: Maximum number of reallocation steps.
                       If None, defaults to max(100, 20 * m * n).
        tolerance: Reduced costs >= -tolerance are treated as non-improving (default: 1e-4).
        detect_cycling: Stop in the stalled state when the same basis keeps reappearing
                        (default: True). Guards against degenerate cycling.
        cycling_revisits: Number of visits to one basis that counts as cycling (default: 3).
        progress_interval: Number of iterations between progress callbacks (default: 1).

    Examples:
        >>> options = OptimizerOptions()
        >>> options = OptimizerOptions(max_iterations=10, tolerance=1e-6)
    """

    max_iterations: int | None = None
    tolerance: float = 1e-4
    detect_cycling: bool = True
    cycling_revisits: int = 3
    progress_interval: int = 1

    def __post_init__(self) -> None:
        if self.max_iterations is not None and self.max_iterations < 0:
            raise SolverConfigurationError(
                f"max_iterations must be non-negative, got {self.max_iterations}."
            )
        if self.tolerance <= 0:
            raise SolverConfigurationError(
                f"Tolerance must be positive, got {self.tolerance}. "
                f"Tolerance controls which reduced costs count as improving."
            )
        if self.cycling_revisits < 2:
            raise SolverConfigurationError(
                f"cycling_revisits must be at least 2, got {self.cycling_revisits}."
            )
        if self.progress_interval < 1:
            raise SolverConfigurationError(
                f"progress_interval must be positive, got {self.progress_interval}."
            )

    def resolve_max_iterations(self, model: CostModel) -> int:
        if self.max_iterations is not None:
            return self.max_iterations
        rows, cols = model.shape
        return max(100, 20 * rows * cols)


def build_model(
    supplies: Iterable[int],
    demands: Iterable[int],
    costs: Iterable[Sequence[int]],
) -> CostModel:
    """Factory helper used by the IO layer to assemble a CostModel."""
    return CostModel(
        supplies=tuple(supplies),
        demands=tuple(demands),
        costs=tuple(tuple(row) for row in costs),
    )
