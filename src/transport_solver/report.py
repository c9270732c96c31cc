"""Plain-text rendering of models and plans for drivers and examples."""

from __future__ import annotations

from dataclasses import dataclass

from .cost import total_cost
from .data import CostModel, Plan


@dataclass(frozen=True)
class PlanComparison:
    """Cost difference between two plans for the same model.

    Attributes:
        before_cost: Cost of the reference plan.
        after_cost: Cost of the compared plan.
        savings: before_cost - after_cost (negative if the second plan is worse).
        savings_percent: savings as a percentage of before_cost (0.0 if before_cost is 0).
    """

    before_cost: int
    after_cost: int
    savings: int
    savings_percent: float


def compare_plans(model: CostModel, before: Plan, after: Plan) -> PlanComparison:
    """Compare the recomputed costs of two plans without touching either plan."""
    before_cost = total_cost(model, before.allocations)
    after_cost = total_cost(model, after.allocations)
    savings = before_cost - after_cost
    percent = (savings / before_cost) * 100.0 if before_cost else 0.0
    return PlanComparison(
        before_cost=before_cost,
        after_cost=after_cost,
        savings=savings,
        savings_percent=percent,
    )


def format_model(model: CostModel) -> str:
    """Render supplies, demands and the cost matrix."""
    lines = [
        f"Supplies: {list(model.supplies)}",
        f"Demands: {list(model.demands)}",
        "Costs:",
    ]
    lines.extend(f"  {list(row)}" for row in model.costs)
    return "\n".join(lines)


def format_plan(model: CostModel, plan: Plan) -> str:
    """Render a plan as a table.

    Rows are supply nodes A1..Am and columns demand nodes B1..Bn. Basic cells
    show ``allocation(cost)``, other cells ``-``. The last column compares each
    row total to its supply and the last row each column total to its demand.

    Example output::

                  B1        B2   | Supply
        A1     10(4)         -   | 10/10
        A2         -     20(3)   | 20/20
        Demand 10/10     20/20
        Total cost: 100
    """
    rows, cols = model.shape
    cells = [
        [
            f"{int(plan.allocations[i, j])}({model.costs[i][j]})" if plan.allocations[i, j] > 0 else "-"
            for j in range(cols)
        ]
        for i in range(rows)
    ]
    row_sums = plan.row_sums()
    column_sums = plan.column_sums()
    footer = [f"{column_sums[j]}/{model.demands[j]}" for j in range(cols)]
    width = max(
        [len(f"B{j + 1}") for j in range(cols)]
        + [len(text) for row in cells for text in row]
        + [len(text) for text in footer]
    )
    label_width = max(len("Demand"), len(f"A{rows}"))

    lines = [
        " " * label_width + " " + " ".join(f"B{j + 1}".rjust(width) for j in range(cols)) + "   | Supply"
    ]
    for i in range(rows):
        body = " ".join(text.rjust(width) for text in cells[i])
        lines.append(f"{f'A{i + 1}'.ljust(label_width)} {body}   | {row_sums[i]}/{model.supplies[i]}")
    lines.append("Demand".ljust(label_width) + " " + " ".join(text.rjust(width) for text in footer))
    lines.append(f"Total cost: {plan.total_cost}")
    return "\n".join(lines)
