"""Stepping-stone cycle search over the basic cells of a plan."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from .data import Cell
from .exceptions import CycleNotFoundError


@dataclass(frozen=True)
class SteppingStoneCycle:
    """Closed alternating path ``[entering, basic_1, ..., basic_k, entering]``.

    Consecutive cells share a row or a column, and the shared line alternates
    between row and column at every step, including the closing step. Cells at
    even positions receive the shifted quantity; cells at odd positions donate it.
    The entering cell appears at both ends but is counted once.
    """

    cells: tuple[Cell, ...]

    @property
    def entering(self) -> Cell:
        return self.cells[0]

    @property
    def receiving(self) -> tuple[Cell, ...]:
        return self.cells[0:-1:2]

    @property
    def donating(self) -> tuple[Cell, ...]:
        return self.cells[1:-1:2]

    def __len__(self) -> int:
        return len(self.cells) - 1


def find_cycle(basis: Iterable[Cell], entering: Cell) -> SteppingStoneCycle | None:
    """Find the stepping-stone cycle that the entering cell closes.

    Backtracking search over ``basis | {entering}``. From the entering cell the
    path first moves along its row, then along the column of the cell it
    reached, then along a row again, and so on. Each row and each column may be
    travelled at most once, so every row and column on the cycle is visited
    exactly twice (once in, once out). The path closes when a column move lands
    back on the entering cell.

    When the basis is a spanning tree the cycle exists and is unique.

    Args:
        basis: Basic cells of the current plan, zero-valued degenerate cells included.
        entering: Non-basic cell about to enter the basis.

    Returns:
        The cycle, or None when no alternating path closes through the entering cell.

    Examples:
        >>> basis = {(0, 0), (0, 1), (1, 1)}
        >>> find_cycle(basis, (1, 0)).cells
        ((1, 0), (1, 1), (0, 1), (0, 0), (1, 0))
    """
    cells = set(basis)
    cells.add(entering)
    by_row: dict[int, list[Cell]] = defaultdict(list)
    by_column: dict[int, list[Cell]] = defaultdict(list)
    for cell in sorted(cells):
        by_row[cell[0]].append(cell)
        by_column[cell[1]].append(cell)

    path: list[Cell] = [entering]
    used_rows: set[int] = set()
    used_columns: set[int] = set()

    def extend(current: Cell, along_row: bool) -> bool:
        if along_row:
            line = current[0]
            if line in used_rows:
                return False
            used, candidates = used_rows, by_row[line]
        else:
            line = current[1]
            if line in used_columns:
                return False
            used, candidates = used_columns, by_column[line]

        used.add(line)
        for candidate in candidates:
            if candidate == current:
                continue
            if candidate == entering:
                if not along_row and len(path) >= 4:
                    path.append(entering)
                    return True
                continue
            path.append(candidate)
            if extend(candidate, not along_row):
                return True
            path.pop()
        used.discard(line)
        return False

    if extend(entering, along_row=True):
        return SteppingStoneCycle(cells=tuple(path))
    return None


def require_cycle(basis: Iterable[Cell], entering: Cell) -> SteppingStoneCycle:
    """Like find_cycle, but raise CycleNotFoundError instead of returning None."""
    cycle = find_cycle(basis, entering)
    if cycle is None:
        raise CycleNotFoundError(
            f"No stepping-stone cycle closes through cell {entering}. The basis does not "
            f"connect the entering cell's row and column.",
            entering_cell=entering,
        )
    return cycle
