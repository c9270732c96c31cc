"""North-west corner construction of an initial basic feasible plan."""

from __future__ import annotations

import logging

import numpy as np

from .data import Cell, CostModel, Plan

logger = logging.getLogger(__name__)


def build_initial_plan(model: CostModel) -> Plan:
    """Build a feasible basic plan with the north-west corner sweep.

    Starting at cell (0, 0), each step ships min(remaining supply, remaining
    demand) and moves down when the row is exhausted, right when the column is
    exhausted, or diagonally when both run out together. A diagonal move drops
    a basis cell, so the zero cell to the right of the current one is kept as a
    degenerate basic cell and the basis still spans all rows and columns.

    Args:
        model: Balanced transportation problem.

    Returns:
        Plan whose rows sum to the supplies and whose columns sum to the demands.

    Raises:
        UnbalancedProblemError: If total supply differs from total demand. Checked
                                before any allocation is attempted.

    Examples:
        >>> model = build_model([200, 150, 150], [90, 100, 70, 130, 110],
        ...                     [[12, 15, 21, 14, 17], [14, 8, 15, 11, 21], [19, 16, 26, 12, 20]])
        >>> plan = build_initial_plan(model)
        >>> plan.allocations.tolist()
        [[90, 100, 10, 0, 0], [0, 0, 60, 90, 0], [0, 0, 0, 40, 110]]
        >>> plan.total_cost
        7360
    """
    model.ensure_balanced()
    rows, cols = model.shape
    allocations = np.zeros((rows, cols), dtype=np.int64)
    basis: set[Cell] = set()
    supply_left = list(model.supplies)
    demand_left = list(model.demands)

    i = j = 0
    while i < rows and j < cols:
        quantity = min(supply_left[i], demand_left[j])
        allocations[i, j] = quantity
        basis.add((i, j))
        supply_left[i] -= quantity
        demand_left[j] -= quantity

        row_done = supply_left[i] == 0
        column_done = demand_left[j] == 0
        if row_done and column_done and i + 1 < rows and j + 1 < cols:
            basis.add((i, j + 1))
        if row_done:
            i += 1
        if column_done:
            j += 1

    plan = Plan(allocations=allocations, basis=basis)
    plan.refresh_cost(model)
    logger.debug(
        "Built north-west corner plan",
        extra={
            "total_cost": plan.total_cost,
            "basic_cells": len(plan.basic_cells()),
            "basis_size": len(plan.basis),
        },
    )
    return plan
