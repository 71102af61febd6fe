"""Life expectancy and mortality statistics lookups.

Both resolvers are pure: they read the mortality table and never mutate it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..domain.errors import MissingTableEntry
from .life_weeks_domain import ASSUMED_LIFESPAN_YEARS, WEEKS_PER_YEAR, SexCategory
from .mortality_table import MortalityTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LifeExpectancy:
    """Baseline (at-birth) life expectancy used as the grid horizon."""

    years: float
    weeks: int

    @classmethod
    def from_years(cls, years: float) -> "LifeExpectancy":
        return cls(years=years, weeks=round(years * WEEKS_PER_YEAR))


DEFAULT_LIFE_EXPECTANCY = LifeExpectancy.from_years(ASSUMED_LIFESPAN_YEARS)


@dataclass(frozen=True)
class MortalityStats:
    """Display-ready statistics for the person's current age-year."""

    age_year: int
    death_prob: float
    life_expectancy: float

    @property
    def death_prob_percent(self) -> str:
        """One-year death probability in percent, 3 decimals."""
        return f"{self.death_prob * 100:.3f}"

    @property
    def remaining_life_expectancy(self) -> str:
        """Remaining life expectancy in years, 1 decimal."""
        return f"{self.life_expectancy:.1f}"


def resolve_life_expectancy(sex: SexCategory, table: MortalityTable) -> LifeExpectancy:
    """Return the at-birth life expectancy for a sex category.

    Args:
        sex: Sex category; UNKNOWN falls back to the assumed 80 years.
        table: Mortality table to read the age-0 record from.

    Returns:
        LifeExpectancy with years and week count (years * 52, rounded).

    Raises:
        MissingTableEntry: If a known sex has no rows in the table.
    """
    if sex is SexCategory.UNKNOWN:
        return DEFAULT_LIFE_EXPECTANCY

    rows = table.rows_for(sex.value)
    if not rows:
        logger.error("Mortality table has no rows for %s", sex.value)
        raise MissingTableEntry(sex.value)

    return LifeExpectancy.from_years(rows[0].life_expectancy)


def resolve_mortality_stats(
    completed_years: float,
    sex: SexCategory,
    table: MortalityTable,
    birth_date_set: bool = True,
) -> Optional[MortalityStats]:
    """Look up mortality statistics for the current age.

    Returns None (stats unavailable, not an error) when sex is unknown, no
    birth date is set, or the age lies beyond the table's coverage.
    """
    if sex is SexCategory.UNKNOWN or not birth_date_set:
        return None

    age_year = math.floor(completed_years)
    record = table.lookup(sex.value, age_year)
    if record is None:
        logger.debug("No mortality record for %s at age %d", sex.value, age_year)
        return None

    return MortalityStats(
        age_year=record.age_year,
        death_prob=record.death_prob,
        life_expectancy=record.life_expectancy,
    )


def total_life_expectancy(completed_years: int, stats: MortalityStats) -> float:
    """Age reached plus remaining expectancy, as shown next to the stats."""
    return completed_years + float(stats.remaining_life_expectancy)
