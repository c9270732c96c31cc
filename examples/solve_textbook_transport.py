"""Solve the textbook transportation example and store the result."""

from __future__ import annotations

from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    IterationInfo,
    UnbalancedProblemError,
    compare_plans,
    format_model,
    format_plan,
    load_model,
    save_result,
    solve_transportation,
)


def main() -> None:
    base_dir = Path(__file__).resolve().parent
    problem_path = base_dir / "textbook_transport_problem.json"
    output_path = base_dir / "textbook_transport_solution.json"

    model = load_model(problem_path)
    print("=== TRANSPORTATION PROBLEM ===")
    print(format_model(model))

    def report_step(info: IterationInfo) -> None:
        i, j = info.entering_cell
        print(
            f"Iteration {info.iteration}: cell ({i + 1}, {j + 1}) enters with reduced cost "
            f"{info.reduced_cost:.2f}, shifting {info.quantity} units; cost now {info.total_cost}"
        )

    try:
        result = solve_transportation(model, progress_callback=report_step)
    except UnbalancedProblemError as exc:
        print(f"Cannot solve: {exc}")
        return

    print("\n=== INITIAL PLAN (north-west corner) ===")
    print(format_plan(model, result.initial_plan))
    print("\n=== FINAL PLAN ===")
    print(format_plan(model, result.plan))
    if result.outcome.may_be_suboptimal:
        print(f"Plan may not be optimal: {result.outcome.reason}")

    comparison = compare_plans(model, result.initial_plan, result.plan)
    print(f"\nSavings: {comparison.savings} ({comparison.savings_percent:.1f}%)")

    save_result(output_path, result)
    print(
        f"Solved {problem_path.name}: status={result.status}, "
        f"total_cost={result.total_cost}"
    )


if __name__ == "__main__":
    main()
