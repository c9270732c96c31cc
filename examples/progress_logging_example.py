"""Example showing the optimizer's structured log records."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    OptimizerOptions,
    build_initial_plan,
    build_model,
    optimize,
)


class ExtraFormatter(logging.Formatter):
    """Append the ``extra`` fields attached by the solver to each message."""

    _standard = set(vars(logging.makeLogRecord({})))

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {k: v for k, v in vars(record).items() if k not in self._standard}
        if not extras:
            return base
        return f"{base} {extras}"


def main() -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ExtraFormatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=logging.DEBUG, handlers=[handler])

    # 6 plants, 6 warehouses: cost grows with distance, equal supplies cause degenerate steps
    size = 6
    model = build_model(
        supplies=[40] * size,
        demands=[40] * size,
        costs=[[abs(i - (size - 1 - j)) + 1 for j in range(size)] for i in range(size)],
    )
    plan = build_initial_plan(model)
    plan, outcome = optimize(model, plan, options=OptimizerOptions(max_iterations=50))
    print(f"Status: {outcome.status.value}, iterations: {outcome.iterations}, cost: {plan.total_cost}")


if __name__ == "__main__":
    main()
