"""Life Calendar service: composes the week calculator, resolvers and grid.

Handles the application layer for one recomputation pass:
- Parsing raw birth date / sex inputs
- Sampling "now" once so every cell is computed against the same instant
- Memoizing grids at week-state granularity
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..domain.errors import InvalidBirthDate, MissingTableEntry
from ..utils.lru_cache import LRUCache
from .life_expectancy import (
    LifeExpectancy,
    MortalityStats,
    resolve_life_expectancy,
    resolve_mortality_stats,
    total_life_expectancy,
)
from .life_weeks_domain import (
    LifeProgress,
    SexCategory,
    calculate_life_progress,
    parse_birth_date,
)
from .life_weeks_grid import CalendarGrid, generate_grid
from .mortality_table import MortalityTable

logger = logging.getLogger(__name__)

GridKey = Tuple[int, float, int, float]


@dataclass(frozen=True)
class LifeCalendarView:
    """Everything a renderer needs; no further date or stats math required."""

    birth_date: Optional[date]
    sex: SexCategory
    now: datetime
    progress: LifeProgress
    expectancy: LifeExpectancy
    stats: Optional[MortalityStats]
    grid: CalendarGrid

    @property
    def has_birth_date(self) -> bool:
        return self.birth_date is not None

    @property
    def total_life_expectancy(self) -> Optional[float]:
        """Age-year plus remaining expectancy, None when stats are unavailable."""
        if self.stats is None:
            return None
        return total_life_expectancy(self.progress.completed_years, self.stats)

    def to_dict(self, include_grid: bool = False) -> Dict[str, Any]:
        """Plain-data form of the view for JSON output."""
        data: Dict[str, Any] = {
            "birthDate": self.birth_date.isoformat() if self.birth_date else None,
            "sex": self.sex.value,
            "now": self.now.isoformat(),
            "completedWeeks": self.progress.completed_weeks,
            "currentProgress": self.progress.current_progress,
            "completedYears": self.progress.completed_years,
            "initialLifeExpectancyYears": self.expectancy.years,
            "initialLifeExpectancyWeeks": self.expectancy.weeks,
            "stats": None,
            "gridRows": len(self.grid),
            "gridCells": self.grid.cell_count,
        }
        if self.stats is not None:
            data["stats"] = {
                "deathProbPercent": self.stats.death_prob_percent,
                "remainingLifeExpectancy": self.stats.remaining_life_expectancy,
                "totalLifeExpectancy": self.total_life_expectancy,
            }
        if include_grid:
            data["grid"] = [
                [asdict(cell) for cell in row.cells] for row in self.grid.rows
            ]
        return data


class LifeCalendarService:
    """Computes LifeCalendarViews against a fixed mortality table."""

    def __init__(
        self,
        table: MortalityTable,
        clock: Callable[[], datetime] = datetime.now,
        cache_size: int = 128,
    ) -> None:
        self._table = table
        self._clock = clock
        self._grid_cache: LRUCache[GridKey, CalendarGrid] = LRUCache(cache_size)

    @property
    def table(self) -> MortalityTable:
        return self._table

    def validate_sex(self, sex: Union[SexCategory, str, None]) -> SexCategory:
        """Parse a sex token and check the table has rows for it."""
        category = SexCategory.parse(sex)
        if category is not SexCategory.UNKNOWN and not self._table.has_sex(
            category.value
        ):
            raise MissingTableEntry(category.value)
        return category

    def compute(
        self,
        birth_date: Union[date, str, None],
        sex: Union[SexCategory, str, None] = None,
        now: Optional[datetime] = None,
    ) -> LifeCalendarView:
        """Run one recomputation pass.

        An unparseable birth date is treated as "not set" (zero state,
        empty grid). An unknown sex token or a sex missing from the table
        propagates as a domain error.
        """
        category = self.validate_sex(sex)

        try:
            parsed = parse_birth_date(birth_date)
        except InvalidBirthDate as e:
            logger.warning("%s; treating birth date as unset", e)
            parsed = None

        if now is None:
            now = self._clock()

        progress = calculate_life_progress(parsed, now)
        expectancy = resolve_life_expectancy(category, self._table)
        stats = resolve_mortality_stats(
            progress.completed_years,
            category,
            self._table,
            birth_date_set=parsed is not None,
        )

        if parsed is None:
            grid = generate_grid(0, 0.0, expectancy, birth_date_set=False)
        else:
            key = (
                progress.completed_weeks,
                progress.current_progress,
                expectancy.weeks,
                expectancy.years,
            )
            grid = self._grid_cache.get_or_compute(
                key,
                lambda: generate_grid(
                    progress.completed_weeks, progress.current_progress, expectancy
                ),
            )

        logger.debug(
            "Computed life calendar: week=%d years=%d sex=%s rows=%d",
            progress.completed_weeks,
            progress.completed_years,
            category.value,
            len(grid),
        )

        return LifeCalendarView(
            birth_date=parsed,
            sex=category,
            now=now,
            progress=progress,
            expectancy=expectancy,
            stats=stats,
            grid=grid,
        )

    def needs_refresh(self, view: LifeCalendarView, now: Optional[datetime] = None) -> bool:
        """True once the calendar day has changed since the view was computed.

        Progress only moves in whole days, so a view stays exact for the rest
        of the day it was computed on.
        """
        if now is None:
            now = self._clock()
        return now.date() != view.now.date()
