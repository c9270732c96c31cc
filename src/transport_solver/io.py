"""File I/O helpers for transportation problems."""

from __future__ import annotations

import json
from collections.abc import MutableMapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .data import CostModel, build_model
from .exceptions import InvalidProblemError

if TYPE_CHECKING:
    from .solver import SolveResult


def load_model(path: str | Path) -> CostModel:
    """Load a transportation instance from a JSON file.

    The file holds ``{"supplies": [...], "demands": [...], "costs": [[...], ...]}``.
    """
    with Path(path).open("r", encoding="utf-8") as fh:
        payload: MutableMapping[str, Any] = json.load(fh)
    if not isinstance(payload, dict):
        raise InvalidProblemError(
            f"Invalid problem format: expected a JSON object, got {type(payload).__name__}"
        )
    supplies = payload.get("supplies")
    demands = payload.get("demands")
    costs = payload.get("costs")
    if not isinstance(supplies, list) or not isinstance(demands, list):
        raise InvalidProblemError(
            "Invalid problem format: JSON must include 'supplies' and 'demands' arrays. "
            f"Got supplies type: {type(supplies).__name__}, demands type: {type(demands).__name__}"
        )
    if not isinstance(costs, list) or not all(isinstance(row, list) for row in costs):
        raise InvalidProblemError(
            "Invalid problem format: 'costs' must be an array of arrays (one row per supply)."
        )
    # Defer to the core builder so validation rules remain centralized in one place.
    return build_model(supplies=supplies, demands=demands, costs=costs)


def save_result(path: str | Path, result: SolveResult) -> None:
    """Persist a solve result to JSON."""
    data = {
        "status": result.outcome.status.value,
        "reason": result.outcome.reason,
        "iterations": result.outcome.iterations,
        "initial_cost": result.initial_plan.total_cost,
        "total_cost": result.plan.total_cost,
        "allocations": result.plan.allocations.tolist(),
        "shipments": [
            {"supply": i, "demand": j, "quantity": int(result.plan.allocations[i, j])}
            for i, j in result.plan.basic_cells()
        ],
    }
    with Path(path).open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, sort_keys=False)
