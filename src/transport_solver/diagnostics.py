"""Convergence diagnostics and cycling detection for the potential optimizer.

This module provides utilities to monitor optimizer progress and detect
convergence issues such as stalling on degenerate steps and basis cycling.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class ConvergenceMonitor:
    """Monitors plan cost across reallocation steps.

    Tracks the total-cost history and the share of degenerate steps (steps that
    shift a zero quantity and only swap basis cells).

    Attributes:
        window_size: Number of recent iterations to track
        degeneracy_threshold: Ratio threshold for degeneracy warning

    Examples:
        >>> monitor = ConvergenceMonitor(window_size=20)
        >>> monitor.record_iteration(7360, is_degenerate=False, iteration=1)
        >>> monitor.record_iteration(7360, is_degenerate=True, iteration=2)
        >>> monitor.get_degeneracy_ratio()
        0.5
    """

    window_size: int = 50
    degeneracy_threshold: float = 0.5

    cost_history: deque[int] = field(default_factory=lambda: deque(maxlen=50))
    degenerate_steps: int = 0
    total_steps: int = 0

    consecutive_no_improvement: int = 0
    last_improvement_iter: int = 0

    def __post_init__(self) -> None:
        """Initialize history with correct maxlen."""
        self.cost_history = deque(maxlen=self.window_size)

    def record_iteration(
        self,
        total_cost: int,
        is_degenerate: bool = False,
        iteration: int = 0,
    ) -> None:
        """Record the plan cost after one reallocation step.

        Args:
            total_cost: Plan cost after the step
            is_degenerate: Whether the step shifted a zero quantity
            iteration: Current iteration number
        """
        self.cost_history.append(total_cost)
        self.total_steps += 1
        if is_degenerate:
            self.degenerate_steps += 1

        if len(self.cost_history) >= 2 and self.cost_history[-1] >= self.cost_history[-2]:
            self.consecutive_no_improvement += 1
        else:
            self.consecutive_no_improvement = 0
            self.last_improvement_iter = iteration

    def is_stalled(self, min_consecutive: int = 10) -> bool:
        """Return True after min_consecutive steps without a cost decrease."""
        return self.consecutive_no_improvement >= min_consecutive

    def is_highly_degenerate(self) -> bool:
        if self.total_steps < 10:
            return False
        return self.get_degeneracy_ratio() > self.degeneracy_threshold

    def get_degeneracy_ratio(self) -> float:
        if self.total_steps == 0:
            return 0.0
        return self.degenerate_steps / self.total_steps

    def get_recent_improvement(self) -> int | None:
        """Cost decrease from the oldest to the newest step in the window."""
        if len(self.cost_history) < 2:
            return None
        return self.cost_history[0] - self.cost_history[-1]

    def get_diagnostic_summary(self) -> dict[str, float | bool | int]:
        """Get summary of convergence diagnostics.

        Returns:
            Dictionary with diagnostic metrics
        """
        return {
            "total_steps": self.total_steps,
            "degenerate_steps": self.degenerate_steps,
            "degeneracy_ratio": self.get_degeneracy_ratio(),
            "is_stalled": self.is_stalled(),
            "is_highly_degenerate": self.is_highly_degenerate(),
            "consecutive_no_improvement": self.consecutive_no_improvement,
            "recent_improvement": self.get_recent_improvement() or 0,
        }


@dataclass
class BasisHistory:
    """Tracks recently visited bases to detect cycling.

    Degenerate steps can bring the optimizer back to a basis it has already
    visited without lowering the cost. Seeing the same basis repeatedly means
    the loop will not make progress on its own.

    Attributes:
        max_history: Maximum number of basis states to track

    Examples:
        >>> history = BasisHistory(max_history=100)
        >>> history.record_basis({(0, 0), (0, 1), (1, 1)})
        >>> history.is_cycling(min_revisits=2)
        False
    """

    max_history: int = 100
    history: deque[frozenset[tuple[int, int]]] = field(default_factory=lambda: deque(maxlen=100))
    visit_counts: dict[frozenset[tuple[int, int]], int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Initialize history with correct maxlen."""
        self.history = deque(maxlen=self.max_history)

    def record_basis(self, cells: Iterable[tuple[int, int]]) -> None:
        """Record the current set of basic cells."""
        key = frozenset(cells)
        self.history.append(key)
        self.visit_counts[key] = self.visit_counts.get(key, 0) + 1

        # Drop counts for bases that fell out of the window
        if len(self.visit_counts) > self.max_history * 2:
            current = set(self.history)
            for stale in [k for k in self.visit_counts if k not in current]:
                del self.visit_counts[stale]

    def is_cycling(self, min_revisits: int = 3) -> bool:
        """Return True if the latest basis has been visited at least min_revisits times."""
        if not self.history:
            return False
        return self.visit_counts.get(self.history[-1], 0) >= min_revisits

    def get_most_frequent_basis_count(self) -> int:
        if not self.visit_counts:
            return 0
        return max(self.visit_counts.values())
