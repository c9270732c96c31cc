"""Total-cost evaluation for shipment plans."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .exceptions import InvalidProblemError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .data import CostModel


def total_cost(model: CostModel, allocations: np.ndarray | Sequence[Sequence[int]]) -> int:
    """Return sum(allocations[i][j] * costs[i][j]) over the full matrix.

    Args:
        model: Problem whose cost matrix prices the allocations.
        allocations: m x n matrix of shipped quantities (array or nested lists).

    Returns:
        Total shipping cost as an int.

    Raises:
        InvalidProblemError: If the matrix shape does not match the model.

    Examples:
        >>> model = build_model([5], [2, 3], [[4, 1]])
        >>> total_cost(model, [[2, 3]])
        11
    """
    matrix = np.asarray(allocations, dtype=np.int64)
    if matrix.shape != model.shape:
        raise InvalidProblemError(
            f"Allocation matrix has shape {matrix.shape}, expected {model.shape} "
            f"(supplies x demands)."
        )
    return int(np.sum(matrix * model.cost_matrix))
