"""Tests for CostModel, Plan and OptimizerOptions validation."""

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    CostModel,
    InvalidProblemError,
    OptimizerOptions,
    Plan,
    SolverConfigurationError,
    UnbalancedProblemError,
    build_model,
)


def test_build_model_normalizes_to_tuples():
    model = build_model([5, 5], [4, 6], [[1, 2], [3, 4]])

    assert model.supplies == (5, 5)
    assert model.demands == (4, 6)
    assert model.costs == ((1, 2), (3, 4))
    assert model.shape == (2, 2)
    assert model.total_supply == 10
    assert model.total_demand == 10
    assert model.is_balanced()


def test_cost_model_is_immutable():
    model = build_model([5], [5], [[1]])

    with pytest.raises(AttributeError):
        model.supplies = (6,)

    matrix = model.cost_matrix
    assert matrix.dtype == np.int64
    with pytest.raises(ValueError):
        matrix[0, 0] = 9
    assert model.costs == ((1,),)


def test_cost_matrix_row_count_mismatch():
    with pytest.raises(InvalidProblemError) as exc_info:
        build_model([5, 5], [10], [[1]])

    assert "rows" in str(exc_info.value)


def test_cost_matrix_row_length_mismatch():
    with pytest.raises(InvalidProblemError) as exc_info:
        build_model([5], [2, 3], [[1, 2, 3]])

    assert "row 0" in str(exc_info.value)


@pytest.mark.parametrize(
    "supplies, demands, costs",
    [
        ([-1, 6], [5], [[1], [1]]),
        ([5], [-5], [[1]]),
        ([5], [5], [[-2]]),
    ],
)
def test_negative_values_rejected(supplies, demands, costs):
    with pytest.raises(InvalidProblemError) as exc_info:
        build_model(supplies, demands, costs)

    assert "non-negative" in str(exc_info.value)


def test_non_integral_values_rejected():
    with pytest.raises(InvalidProblemError) as exc_info:
        build_model([2.5], [2.5], [[1]])

    assert "integer" in str(exc_info.value)


def test_empty_model_rejected():
    with pytest.raises(InvalidProblemError):
        CostModel(supplies=(), demands=(1,), costs=())


def test_unbalanced_model_can_be_built_but_not_ensured():
    model = build_model([10], [5, 10], [[1, 2]])

    assert not model.is_balanced()
    with pytest.raises(UnbalancedProblemError) as exc_info:
        model.ensure_balanced()

    assert exc_info.value.total_supply == 10
    assert exc_info.value.total_demand == 15
    assert "unbalanced" in str(exc_info.value).lower()


def test_plan_defaults_basis_to_positive_cells():
    plan = Plan(allocations=[[3, 0], [0, 4]])

    assert plan.basis == {(0, 0), (1, 1)}
    assert plan.basic_cells() == [(0, 0), (1, 1)]
    assert plan.row_sums() == [3, 4]
    assert plan.column_sums() == [3, 4]


def test_plan_rejects_negative_allocations():
    with pytest.raises(InvalidProblemError):
        Plan(allocations=[[1, -1]])


def test_plan_refresh_cost_and_copy_are_independent():
    model = build_model([5], [2, 3], [[4, 1]])
    plan = Plan(allocations=[[2, 3]])

    assert plan.refresh_cost(model) == 11
    snapshot = plan.copy()
    plan.allocations[0, 0] = 0
    plan.basis.discard((0, 0))

    assert snapshot.allocations.tolist() == [[2, 3]]
    assert snapshot.basis == {(0, 0), (0, 1)}
    assert snapshot.total_cost == 11


def test_optimizer_options_defaults():
    options = OptimizerOptions()

    assert options.tolerance == pytest.approx(1e-4)
    assert options.detect_cycling is True
    model = build_model([1, 1], [1, 1], [[1, 1], [1, 1]])
    assert options.resolve_max_iterations(model) == 100
    assert OptimizerOptions(max_iterations=7).resolve_max_iterations(model) == 7


def test_optimizer_options_default_cap_scales_with_size():
    model = build_model([1] * 5, [1] * 5, [[1] * 5 for _ in range(5)])

    assert OptimizerOptions().resolve_max_iterations(model) == 500


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tolerance": 0.0},
        {"tolerance": -1e-3},
        {"max_iterations": -1},
        {"cycling_revisits": 1},
        {"progress_interval": 0},
    ],
)
def test_optimizer_options_validation(kwargs):
    with pytest.raises(SolverConfigurationError):
        OptimizerOptions(**kwargs)
