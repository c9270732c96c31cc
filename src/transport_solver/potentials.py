"""Dual potentials, reduced costs and entering-cell pricing.

Row potentials ``u`` and column potentials ``v`` satisfy
``cost[i][j] == u[i] + v[j]`` on every basic cell. The reduced cost
``cost[i][j] - (u[i] + v[j])`` of a non-basic cell is the change in total cost
per unit shifted into that cell around its stepping-stone cycle, so the most
negative one is the best cell to bring into the basis.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from .data import Cell, CostModel, Plan
from .exceptions import InvalidBasisError

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-4


@dataclass
class Potentials:
    """Row and column dual values for one basis.

    Attributes:
        u: One potential per supply row. None where propagation never reached the row.
        v: One potential per demand column. None where propagation never reached it.

    Note:
        Undetermined entries read as 0.0 through row_values()/column_values().
        That default is a policy for disconnected bases, not a dual value, so a
        plan priced with defaulted potentials is never reported optimal.
    """

    u: list[float | None]
    v: list[float | None]

    @property
    def defaulted(self) -> bool:
        return any(x is None for x in self.u) or any(x is None for x in self.v)

    def row_values(self) -> np.ndarray:
        return np.array([0.0 if x is None else x for x in self.u], dtype=float)

    def column_values(self) -> np.ndarray:
        return np.array([0.0 if x is None else x for x in self.v], dtype=float)


def compute_potentials(model: CostModel, basis: Iterable[Cell]) -> Potentials:
    """Propagate potentials over the basic cells from the anchor u[0] = 0.

    Basic cells are scanned in row-major order; whenever one endpoint of a cell
    is known and the other is not, the unknown one is derived from
    cost[i][j] = u[i] + v[j]. Scanning repeats until a full pass derives nothing.

    Args:
        model: Problem supplying the cost matrix.
        basis: Basic cells of the current plan (zero-valued degenerate cells included).

    Returns:
        Potentials with None left in any row or column the basis does not reach.
    """
    rows, cols = model.shape
    u: list[float | None] = [None] * rows
    v: list[float | None] = [None] * cols
    u[0] = 0.0
    cells = sorted(basis)

    changed = True
    while changed:
        changed = False
        for i, j in cells:
            row_value = u[i]
            column_value = v[j]
            if row_value is not None and column_value is None:
                v[j] = model.costs[i][j] - row_value
                changed = True
            elif column_value is not None and row_value is None:
                u[i] = model.costs[i][j] - column_value
                changed = True

    potentials = Potentials(u=u, v=v)
    if potentials.defaulted:
        logger.warning(
            "Basis does not reach every row and column; defaulting potentials to 0",
            extra={
                "undetermined_rows": [i for i, x in enumerate(u) if x is None],
                "undetermined_columns": [j for j, x in enumerate(v) if x is None],
            },
        )
    return potentials


def reduced_costs(model: CostModel, potentials: Potentials) -> np.ndarray:
    """Return the m x n matrix cost[i][j] - (u[i] + v[j])."""
    u = potentials.row_values()
    v = potentials.column_values()
    return model.cost_matrix.astype(float) - (u[:, np.newaxis] + v[np.newaxis, :])


def select_entering_cell(
    model: CostModel,
    plan: Plan,
    potentials: Potentials,
    tolerance: float = DEFAULT_TOLERANCE,
) -> tuple[Cell, float] | None:
    """Pick the non-basic cell with the most negative reduced cost.

    Ties go to the first cell in row-major order.

    Returns:
        ((i, j), reduced_cost) for the entering cell, or None when every
        non-basic reduced cost is >= -tolerance (the plan is optimal for this basis).
    """
    deltas = reduced_costs(model, potentials)
    for i, j in plan.basis:
        deltas[i, j] = np.inf
    flat_index = int(np.argmin(deltas))
    best = float(deltas.flat[flat_index])
    if not np.isfinite(best) or best >= -tolerance:
        return None
    _, cols = model.shape
    i, j = divmod(flat_index, cols)
    return (i, j), best


def _basis_components(basis: Iterable[Cell], rows: int, cols: int) -> tuple[int, np.ndarray]:
    # Bipartite graph: nodes 0..rows-1 are supply rows, rows..rows+cols-1 demand columns.
    cells = list(basis)
    row_index = np.fromiter((i for i, _ in cells), dtype=np.int64, count=len(cells))
    col_index = np.fromiter((rows + j for _, j in cells), dtype=np.int64, count=len(cells))
    graph = coo_matrix(
        (np.ones(len(cells), dtype=np.int8), (row_index, col_index)),
        shape=(rows + cols, rows + cols),
    )
    count, labels = connected_components(graph, directed=False)
    return int(count), labels


def cycle_rank(cells: Iterable[Cell], rows: int, cols: int) -> int:
    """Number of independent cycles the cells form over rows and columns (0 for a forest)."""
    cells = list(cells)
    count, _ = _basis_components(cells, rows, cols)
    return len(cells) - (rows + cols) + count


def complete_basis(model: CostModel, plan: Plan) -> list[Cell]:
    """Grow plan.basis into a spanning tree over all rows and columns.

    A degenerate plan has fewer than m + n - 1 basic cells, so its basis splits
    into several components and potentials cannot be propagated everywhere.
    The cheapest zero cell joining two different components is added until a
    single component remains. Cells inside one component are never added, so
    the basis stays cycle-free.

    Args:
        model: Problem supplying the costs used to pick connecting cells.
        plan: Plan whose basis is extended in place.

    Returns:
        Cells added to the basis, in the order they were added.

    Raises:
        InvalidBasisError: If the basis already contains a cycle of cells (the
                           plan is not a basic solution) or cannot be connected.
    """
    rows, cols = model.shape
    costs = model.cost_matrix
    added: list[Cell] = []

    for i, j in plan.basis:
        if not (0 <= i < rows and 0 <= j < cols):
            raise InvalidBasisError(f"Basis cell ({i}, {j}) lies outside the {rows}x{cols} plan.")

    while True:
        count, labels = _basis_components(plan.basis, rows, cols)
        # Cyclomatic number of the basis graph: edges - nodes + components.
        if len(plan.basis) - (rows + cols) + count > 0:
            raise InvalidBasisError(
                f"Basis with {len(plan.basis)} cells contains a cycle; a basic plan has at most "
                f"{rows + cols - 1} cells forming a tree over rows and columns."
            )
        if count == 1:
            break

        best: Cell | None = None
        for i in range(rows):
            for j in range(cols):
                if labels[i] == labels[rows + j]:
                    continue
                if best is None or costs[i, j] < costs[best]:
                    best = (i, j)
        if best is None:
            raise InvalidBasisError(
                f"Cannot connect basis with {count} components over a {rows}x{cols} plan."
            )
        plan.basis.add(best)
        added.append(best)

    if added:
        logger.debug(
            "Completed degenerate basis with zero-valued cells",
            extra={"added_cells": added, "basis_size": len(plan.basis)},
        )
    return added
