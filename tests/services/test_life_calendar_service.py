"""Tests for the LifeCalendarService composition layer."""

import logging
from datetime import date, datetime, timedelta

import pytest

from life_calendar.domain.errors import InvalidSexCategory, MissingTableEntry
from life_calendar.services.life_calendar_service import LifeCalendarService
from life_calendar.services.life_weeks_domain import ZERO_PROGRESS, SexCategory
from life_calendar.services.mortality_table import MortalityTable


@pytest.fixture
def service(mortality_table, now):
    return LifeCalendarService(mortality_table, clock=lambda: now)


class TestCompute:
    def test_thirty_year_old_male(self, service, birth_30y_10w):
        view = service.compute(birth_30y_10w.isoformat(), "male")

        assert view.birth_date == birth_30y_10w
        assert view.sex is SexCategory.MALE
        assert view.progress.completed_weeks == 1570
        assert view.progress.current_progress == 0.0
        assert view.progress.completed_years == 30
        assert view.stats.death_prob_percent == "0.200"
        assert view.stats.remaining_life_expectancy == "50.0"
        assert view.total_life_expectancy == 80.0
        assert view.expectancy.weeks == 3952
        assert view.grid.current_cell.week_number == 1570

    def test_unknown_sex_defaults(self, service, birth_30y_10w):
        view = service.compute(birth_30y_10w, None)
        assert view.sex is SexCategory.UNKNOWN
        assert view.expectancy.weeks == 4160
        assert view.stats is None
        assert view.total_life_expectancy is None
        assert len(view.grid) == 80

    def test_no_birth_date(self, service):
        view = service.compute("", "female")
        assert not view.has_birth_date
        assert view.progress == ZERO_PROGRESS
        assert view.stats is None
        assert len(view.grid) == 0
        assert view.expectancy.weeks == 4212

    def test_invalid_birth_date_is_treated_as_unset(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            view = service.compute("1990-02-30", "male")
        assert not view.has_birth_date
        assert view.progress == ZERO_PROGRESS
        assert len(view.grid) == 0
        assert "treating birth date as unset" in caplog.text

    def test_invalid_sex_token(self, service):
        with pytest.raises(InvalidSexCategory):
            service.compute("1990-05-15", "martian")

    def test_sex_missing_from_table(self, table_data, now):
        service = LifeCalendarService(
            MortalityTable.from_mapping({"male": table_data["male"]}), clock=lambda: now
        )
        with pytest.raises(MissingTableEntry):
            service.compute("1990-05-15", "female")

    def test_explicit_now_overrides_clock(self, service):
        later = datetime(2026, 10, 26, 12, 0)
        view = service.compute(date(2026, 10, 19), None, now=later)
        assert view.now == later
        assert view.progress.completed_weeks == 1

    def test_age_beyond_table_has_no_stats(self, service, now):
        view = service.compute(date(1950, 1, 1), "female")
        assert view.progress.completed_years == 76
        assert view.stats is None
        assert view.grid.current_cell is not None


class TestGridCache:
    def test_same_week_state_reuses_grid(self, mortality_table):
        service = LifeCalendarService(mortality_table)
        morning = service.compute("1990-05-15", "male", now=datetime(2026, 10, 19, 8))
        evening = service.compute("1990-05-15", "male", now=datetime(2026, 10, 19, 22))
        assert evening.grid is morning.grid

    def test_new_day_builds_new_grid(self, mortality_table):
        service = LifeCalendarService(mortality_table)
        today = service.compute("1990-05-15", "male", now=datetime(2026, 10, 19, 8))
        tomorrow = service.compute("1990-05-15", "male", now=datetime(2026, 10, 20, 8))
        assert tomorrow.grid is not today.grid
        assert tomorrow.grid.current_cell.fill_fraction > today.grid.current_cell.fill_fraction

    def test_cache_is_bounded(self, mortality_table):
        service = LifeCalendarService(mortality_table, cache_size=2)
        first = service.compute("1990-05-15", None, now=datetime(2026, 1, 1))
        for day in range(1, 4):
            service.compute("1990-05-15", None, now=datetime(2026, 1, 1) + timedelta(days=day))
        again = service.compute("1990-05-15", None, now=datetime(2026, 1, 1))
        assert again.grid is not first.grid
        assert again.grid == first.grid


class TestNeedsRefresh:
    def test_same_day(self, service, now):
        view = service.compute("1990-05-15", "male")
        assert not service.needs_refresh(view, now + timedelta(hours=6))

    def test_next_day(self, service, now):
        view = service.compute("1990-05-15", "male")
        assert service.needs_refresh(view, now + timedelta(days=1))

    def test_uses_clock_by_default(self, mortality_table):
        times = iter([datetime(2026, 10, 19, 9), datetime(2026, 10, 20, 9)])
        service = LifeCalendarService(mortality_table, clock=lambda: next(times))
        view = service.compute("1990-05-15", "male")
        assert service.needs_refresh(view)


class TestToDict:
    def test_summary_fields(self, service, birth_30y_10w):
        data = service.compute(birth_30y_10w, "male").to_dict()
        assert data["birthDate"] == "1996-08-10"
        assert data["sex"] == "male"
        assert data["completedWeeks"] == 1570
        assert data["initialLifeExpectancyWeeks"] == 3952
        assert data["stats"] == {
            "deathProbPercent": "0.200",
            "remainingLifeExpectancy": "50.0",
            "totalLifeExpectancy": 80.0,
        }
        assert "grid" not in data

    def test_with_grid(self, service):
        data = service.compute("2026-10-01", None).to_dict(include_grid=True)
        assert data["gridRows"] == len(data["grid"]) == 80
        first = data["grid"][0][0]
        assert first["week_number"] == 0
        assert first["is_lived"] is True
