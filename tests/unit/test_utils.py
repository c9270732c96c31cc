"""Tests for plan validation."""

import sys
from pathlib import Path

import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import Plan, build_initial_plan, build_model, validate_plan  # noqa: E402


def _model():
    return build_model(supplies=[20, 30], demands=[25, 25], costs=[[4, 6], [5, 3]])


def test_initial_plan_is_valid():
    model = _model()
    plan = build_initial_plan(model)

    result = validate_plan(model, plan)

    assert result.is_valid
    assert result.errors == []
    assert result.row_imbalance == [0, 0]
    assert result.column_imbalance == [0, 0]
    assert result.negative_cells == []
    assert result.cost_drift == 0


def test_detects_row_and_column_imbalance():
    model = _model()
    plan = Plan(allocations=[[20, 0], [5, 20]])
    plan.refresh_cost(model)

    result = validate_plan(model, plan)

    assert not result.is_valid
    assert result.row_imbalance == [0, -5]
    assert result.column_imbalance == [0, -5]
    assert any("Row 1" in error for error in result.errors)
    assert any("Column 1" in error for error in result.errors)


def test_detects_stale_cost():
    model = _model()
    plan = build_initial_plan(model)
    plan.total_cost += 7

    result = validate_plan(model, plan)

    assert not result.is_valid
    assert result.cost_drift == 7
    assert any("Cached total cost" in error for error in result.errors)


def test_detects_negative_cells():
    model = _model()
    plan = build_initial_plan(model)
    # Corrupt the matrix after construction, bypassing Plan's checks.
    plan.allocations[0, 1] = -5
    plan.allocations[0, 0] = 25

    result = validate_plan(model, plan)

    assert not result.is_valid
    assert result.negative_cells == [(0, 1)]


def test_shape_mismatch():
    model = _model()
    plan = Plan(allocations=np.zeros((3, 2), dtype=np.int64))

    result = validate_plan(model, plan)

    assert not result.is_valid
    assert "shape" in result.errors[0]
