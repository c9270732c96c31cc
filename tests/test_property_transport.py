import sys
from pathlib import Path
from typing import List, Tuple

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import HealthCheck, given, settings  # type: ignore  # noqa: E402
from hypothesis import strategies as st  # type: ignore  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    OutcomeStatus,
    build_initial_plan,
    build_model,
    complete_basis,
    find_cycle,
    optimize,
    reallocate,
    validate_plan,
)
from transport_solver.potentials import compute_potentials, select_entering_cell  # noqa: E402


@st.composite
def _balanced_instances(draw) -> Tuple[List[int], List[int], List[List[int]]]:
    # Draw supplies first, then split their total across the demand nodes.
    supply_count = draw(st.integers(min_value=1, max_value=5))
    demand_count = draw(st.integers(min_value=1, max_value=5))
    supplies = [draw(st.integers(min_value=1, max_value=40)) for _ in range(supply_count)]

    remaining = sum(supplies)
    demands: List[int] = []
    for idx in range(demand_count):
        if idx == demand_count - 1:
            amount = remaining
        else:
            amount = draw(st.integers(min_value=0, max_value=remaining))
        remaining -= amount
        demands.append(amount)

    costs = [
        [draw(st.integers(min_value=0, max_value=25)) for _ in range(demand_count)]
        for _ in range(supply_count)
    ]
    return supplies, demands, costs


@settings(max_examples=60, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_balanced_instances())
def test_initial_plan_is_feasible_and_spanning(instance):
    supplies, demands, costs = instance
    model = build_model(supplies, demands, costs)

    plan = build_initial_plan(model)

    assert validate_plan(model, plan).is_valid
    assert set(plan.basic_cells()) <= plan.basis
    complete_basis(model, plan)
    assert len(plan.basis) == len(supplies) + len(demands) - 1


@settings(max_examples=60, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_balanced_instances())
def test_optimizer_keeps_plan_feasible_and_never_raises_cost(instance):
    # Property: every reallocation keeps the margins intact and cost is non-increasing.
    supplies, demands, costs = instance
    model = build_model(supplies, demands, costs)
    plan = build_initial_plan(model)
    history = [plan.total_cost]

    def check_step(info):
        assert plan.row_sums() == supplies
        assert plan.column_sums() == demands
        history.append(info.total_cost)

    plan, outcome = optimize(model, plan, progress_callback=check_step)

    assert outcome.status is OutcomeStatus.OPTIMAL
    assert all(later <= earlier for earlier, later in zip(history, history[1:]))
    assert validate_plan(model, plan).is_valid
    assert len(plan.basis) == len(supplies) + len(demands) - 1

    potentials = compute_potentials(model, plan.basis)
    assert select_entering_cell(model, plan, potentials) is None


@settings(max_examples=60, suppress_health_check=[HealthCheck.too_slow], deadline=None)
@given(_balanced_instances())
def test_single_reallocation_conserves_mass(instance):
    supplies, demands, costs = instance
    model = build_model(supplies, demands, costs)
    plan = build_initial_plan(model)
    complete_basis(model, plan)
    basis_size = len(plan.basis)

    potentials = compute_potentials(model, plan.basis)
    entering = select_entering_cell(model, plan, potentials)
    if entering is None:
        return
    cell, delta = entering
    before_cost = plan.total_cost

    cycle = find_cycle(plan.basis, cell)
    assert cycle is not None
    assert len(cycle) % 2 == 0
    quantity, leaving = reallocate(model, plan, cycle)

    assert plan.row_sums() == supplies
    assert plan.column_sums() == demands
    assert leaving in cycle.donating
    assert cell in plan.basis
    assert leaving not in plan.basis
    assert len(plan.basis) == basis_size
    assert plan.total_cost == before_cost + round(delta * quantity)
