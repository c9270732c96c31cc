"""Tests for total-cost evaluation."""

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import InvalidProblemError, build_model, total_cost  # noqa: E402

SUPPLIES = [200, 150, 150]
DEMANDS = [90, 100, 70, 130, 110]
COSTS = [
    [12, 15, 21, 14, 17],
    [14, 8, 15, 11, 21],
    [19, 16, 26, 12, 20],
]
NORTH_WEST = [
    [90, 100, 10, 0, 0],
    [0, 0, 60, 90, 0],
    [0, 0, 0, 40, 110],
]


def test_total_cost_of_north_west_plan():
    model = build_model(SUPPLIES, DEMANDS, COSTS)

    assert total_cost(model, NORTH_WEST) == 7360


def test_total_cost_of_improved_plan():
    model = build_model(SUPPLIES, DEMANDS, COSTS)
    improved = [
        [90, 100, 0, 0, 10],
        [0, 0, 70, 80, 0],
        [0, 0, 0, 50, 100],
    ]

    assert total_cost(model, improved) == 7280


def test_total_cost_returns_python_int():
    model = build_model(SUPPLIES, DEMANDS, COSTS)

    assert type(total_cost(model, np.array(NORTH_WEST))) is int


def test_total_cost_of_empty_plan_is_zero():
    model = build_model([0, 0], [0, 0], [[3, 4], [5, 6]])

    assert total_cost(model, [[0, 0], [0, 0]]) == 0


def test_total_cost_shape_mismatch():
    model = build_model(SUPPLIES, DEMANDS, COSTS)

    with pytest.raises(InvalidProblemError) as exc_info:
        total_cost(model, [[1, 2], [3, 4]])

    assert "shape" in str(exc_info.value)


def test_total_cost_invariant_under_permutation():
    """Permuting rows and columns consistently leaves the cost unchanged."""
    row_order = [2, 0, 1]
    column_order = [4, 1, 3, 0, 2]
    model = build_model(SUPPLIES, DEMANDS, COSTS)
    permuted = build_model(
        [SUPPLIES[i] for i in row_order],
        [DEMANDS[j] for j in column_order],
        [[COSTS[i][j] for j in column_order] for i in row_order],
    )
    permuted_plan = [[NORTH_WEST[i][j] for j in column_order] for i in row_order]

    assert total_cost(permuted, permuted_plan) == total_cost(model, NORTH_WEST)
