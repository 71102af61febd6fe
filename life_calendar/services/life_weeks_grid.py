"""
Life Weeks grid generation.

Turns life progress and the baseline expectancy into rows of classified
week cells. One row per year of life, 52 cells per row. Weeks beyond the
expectancy are only shown once they have been reached, and rows left with
no cells are dropped, so the grid grows with max(weeks lived, expectancy)
rather than with the 250-year cap.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .life_expectancy import LifeExpectancy
from .life_weeks_domain import MAX_LIFESPAN_YEARS, WEEKS_PER_YEAR


@dataclass(frozen=True)
class WeekCell:
    """One 7-day period since birth."""

    row_index: int
    col_index: int
    week_number: int
    is_lived: bool
    is_current: bool
    is_extra_life: bool
    fill_fraction: float = 0.0


@dataclass(frozen=True)
class GridRow:
    """Visible cells of one year of life; cells may be fewer than 52."""

    row_index: int
    cells: Tuple[WeekCell, ...]


@dataclass(frozen=True)
class CalendarGrid:
    """Ordered, row-trimmed grid of week cells."""

    rows: Tuple[GridRow, ...] = ()

    def __iter__(self) -> Iterator[GridRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def cells(self) -> Iterator[WeekCell]:
        """All cells in row-major order."""
        for row in self.rows:
            yield from row.cells

    @property
    def cell_count(self) -> int:
        return sum(len(row.cells) for row in self.rows)

    @property
    def current_cell(self) -> Optional[WeekCell]:
        for cell in self.cells():
            if cell.is_current:
                return cell
        return None


EMPTY_GRID = CalendarGrid()


def count_grid_rows(completed_weeks: int, expectancy: LifeExpectancy) -> int:
    """Rows spanned before trimming.

    At least up to the expectancy horizon and far enough to contain the
    current week, capped at 250 years.
    """
    rows_reached = completed_weeks // WEEKS_PER_YEAR + 1
    return min(MAX_LIFESPAN_YEARS, max(rows_reached, math.ceil(expectancy.years)))


def generate_grid(
    completed_weeks: int,
    current_progress: float,
    expectancy: LifeExpectancy,
    birth_date_set: bool = True,
) -> CalendarGrid:
    """Build the week grid.

    Args:
        completed_weeks: Whole weeks lived; also the index of the current week.
        current_progress: Fraction of the current week elapsed, in [0, 1].
        expectancy: Baseline life expectancy defining extra-life weeks.
        birth_date_set: False yields an empty grid.

    Returns:
        CalendarGrid with untouched extra-life cells and empty rows omitted.
    """
    if not birth_date_set:
        return EMPTY_GRID

    rows = []
    for row_index in range(count_grid_rows(completed_weeks, expectancy)):
        cells = []
        for col_index in range(WEEKS_PER_YEAR):
            week_number = row_index * WEEKS_PER_YEAR + col_index
            is_lived = week_number < completed_weeks
            is_current = week_number == completed_weeks
            is_extra_life = week_number >= expectancy.weeks

            if is_extra_life and not (is_lived or is_current):
                continue

            cells.append(
                WeekCell(
                    row_index=row_index,
                    col_index=col_index,
                    week_number=week_number,
                    is_lived=is_lived,
                    is_current=is_current,
                    is_extra_life=is_extra_life,
                    fill_fraction=current_progress if is_current else 0.0,
                )
            )

        if cells:
            rows.append(GridRow(row_index=row_index, cells=tuple(cells)))

    return CalendarGrid(rows=tuple(rows))
