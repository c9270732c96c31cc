"""Utility functions for validating transportation plans."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .cost import total_cost
from .data import Cell, CostModel, Plan


@dataclass
class ValidationResult:
    """Results from validating a plan against its model.

    Attributes:
        is_valid: True if the plan satisfies all constraints.
        errors: List of validation error messages (empty if valid).
        row_imbalance: Row sum minus supply, per supply node.
        column_imbalance: Column sum minus demand, per demand node.
        negative_cells: Cells holding a negative allocation.
        cost_drift: Cached total_cost minus the recomputed cost (0 when in sync).
    """

    is_valid: bool
    errors: list[str]
    row_imbalance: list[int]
    column_imbalance: list[int]
    negative_cells: list[Cell]
    cost_drift: int


def validate_plan(model: CostModel, plan: Plan) -> ValidationResult:
    """Validate that a plan ships exactly the supplies and demands of its model.

    Checks:
    - Matrix shape matches the model
    - Every allocation is non-negative
    - Row sums equal supplies and column sums equal demands
    - The cached total_cost equals the cost recomputed from the allocations

    Args:
        model: Problem definition.
        plan: Plan to validate.

    Returns:
        ValidationResult with detailed information about any violations.
    """
    rows, cols = model.shape
    if plan.shape != model.shape:
        return ValidationResult(
            is_valid=False,
            errors=[f"Plan shape {plan.shape} does not match model shape {model.shape}"],
            row_imbalance=[],
            column_imbalance=[],
            negative_cells=[],
            cost_drift=0,
        )

    errors: list[str] = []
    allocations = plan.allocations
    negative_cells = [(int(i), int(j)) for i, j in zip(*np.nonzero(allocations < 0))]
    for i, j in negative_cells:
        errors.append(f"Cell ({i}, {j}): negative allocation {int(allocations[i, j])}")

    row_imbalance = [plan.row_sums()[i] - model.supplies[i] for i in range(rows)]
    column_imbalance = [plan.column_sums()[j] - model.demands[j] for j in range(cols)]
    for i, diff in enumerate(row_imbalance):
        if diff:
            errors.append(f"Row {i}: ships {model.supplies[i] + diff}, supply is {model.supplies[i]}")
    for j, diff in enumerate(column_imbalance):
        if diff:
            errors.append(
                f"Column {j}: receives {model.demands[j] + diff}, demand is {model.demands[j]}"
            )

    cost_drift = plan.total_cost - total_cost(model, allocations)
    if cost_drift:
        errors.append(
            f"Cached total cost {plan.total_cost} differs from recomputed cost "
            f"{plan.total_cost - cost_drift}"
        )

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        row_imbalance=row_imbalance,
        column_imbalance=column_imbalance,
        negative_cells=negative_cells,
        cost_drift=cost_drift,
    )
