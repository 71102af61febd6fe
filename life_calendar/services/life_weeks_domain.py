"""Pure domain logic for the Life Weeks calculation.

No database, no I/O: only calendar arithmetic on a birth date and a
sampled "now".
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Union

from ..domain.errors import InvalidBirthDate, InvalidSexCategory

WEEKS_PER_YEAR = 52
DAYS_PER_WEEK = 7
MAX_LIFESPAN_YEARS = 250
MAX_LIFESPAN_WEEKS = MAX_LIFESPAN_YEARS * WEEKS_PER_YEAR
ASSUMED_LIFESPAN_YEARS = 80


class SexCategory(str, Enum):
    """Selects a row-set in the mortality table."""

    UNKNOWN = "unknown"
    MALE = "male"
    FEMALE = "female"

    @classmethod
    def parse(cls, value: Union["SexCategory", str, None]) -> "SexCategory":
        """Map an input token to a category; empty or missing means unknown."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNKNOWN
        token = str(value).strip().lower()
        if not token:
            return cls.UNKNOWN
        try:
            return cls(token)
        except ValueError:
            raise InvalidSexCategory(value) from None


@dataclass(frozen=True)
class LifeProgress:
    """Weeks and years lived, plus how far into the current week we are."""

    completed_weeks: int = 0
    current_progress: float = 0.0
    completed_years: int = 0


ZERO_PROGRESS = LifeProgress()


def parse_birth_date(value: Union[date, str, None]) -> Optional[date]:
    """Parse a YYYY-MM-DD birth date.

    Args:
        value: ISO date string, a date, or None/empty for "not set".

    Returns:
        The parsed date, or None when no birth date is set.

    Raises:
        InvalidBirthDate: If value is not a valid calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidBirthDate(value) from None


def add_years(start: date, years: int) -> date:
    """Advance a date by whole calendar years; Feb 29 falls back to Feb 28."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def complete_years_between(start: date, end: date) -> int:
    """Number of whole calendar years from start to end (0 if end < start).

    A Feb 29 birthday completes its year on Mar 1 in non-leap years.
    """
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return max(0, years)


def calculate_life_progress(
    birth_date: Optional[date], now: Optional[datetime] = None
) -> LifeProgress:
    """Compute completed weeks, current week progress and completed years.

    Whole years are counted on the calendar first and only the remainder is
    split into 7-day weeks, so week boundaries stay anchored to birthdays
    across leap years. Each year contributes exactly 52 weeks.

    Args:
        birth_date: Date of birth, or None if not set.
        now: The sampled current instant (defaults to datetime.now()).

    Returns:
        LifeProgress clamped to the 250-year horizon. A missing birth date
        or one after ``now`` yields the zero state.
    """
    if birth_date is None:
        return ZERO_PROGRESS

    if now is None:
        now = datetime.now()

    if birth_date > now.date():
        return ZERO_PROGRESS

    complete_years = complete_years_between(birth_date, now.date())
    after_complete_years = add_years(birth_date, complete_years)

    anniversary = datetime.combine(after_complete_years, time(), tzinfo=now.tzinfo)
    remaining_days = (now - anniversary).days
    remaining_weeks = remaining_days // DAYS_PER_WEEK

    completed_weeks = complete_years * WEEKS_PER_YEAR + remaining_weeks
    progress = remaining_days / DAYS_PER_WEEK - remaining_weeks

    # Roll over at an exact week boundary
    if progress >= 1:
        completed_weeks += 1
        progress = 0.0

    return LifeProgress(
        completed_weeks=max(0, min(completed_weeks, MAX_LIFESPAN_WEEKS)),
        current_progress=min(1.0, max(0.0, progress)),
        completed_years=max(0, min(complete_years, MAX_LIFESPAN_YEARS)),
    )


def format_life_week(progress: LifeProgress, expectancy_years: float) -> str:
    """Format life week info for display.

    Args:
        progress: Current life progress.
        expectancy_years: Initial life expectancy used as the horizon.

    Returns:
        Formatted string with week number, age, and share of expectancy lived.
    """
    total_weeks = round(expectancy_years * WEEKS_PER_YEAR)
    percentage = (progress.completed_weeks / total_weeks) * 100 if total_weeks else 0.0

    return (
        f"📅 Week {progress.completed_weeks:,} of your life "
        f"({progress.current_progress:.0%} through)\n"
        f"🎂 Age: {progress.completed_years} years\n"
        f"⏳ {percentage:.1f}% of ~{expectancy_years:.1f} years"
    )
