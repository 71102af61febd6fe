import logging
import os
from datetime import date, datetime

import pytest

# Set test environment variables
os.environ["LIFE_CALENDAR_ENVIRONMENT"] = "test"
os.environ["LIFE_CALENDAR_LOG_LEVEL"] = "WARNING"
os.environ["LIFE_CALENDAR_LOG_TO_FILE"] = "false"

# Fixed "now" shared by tests: 2026-10-19 12:00 local
NOW = datetime(2026, 10, 19, 12, 0)


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so monkeypatched env vars take effect."""
    from life_calendar.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _records(expectancy_at_birth: float, ages: int = 41):
    rows = []
    for age in range(ages):
        rows.append(
            {
                "ageYear": age,
                "deathProb": 0.001 + age * 0.0001,
                "lifeExpectancy": round(expectancy_at_birth - age * 0.9, 2),
            }
        )
    return rows


@pytest.fixture
def table_data():
    """Small table covering ages 0-40; male age 30 is {0.002, 50.0}."""
    male = _records(76.0)
    male[30] = {"ageYear": 30, "deathProb": 0.002, "lifeExpectancy": 50.0}
    female = _records(81.0)
    return {"male": male, "female": female}


@pytest.fixture
def mortality_table(table_data):
    from life_calendar.services.mortality_table import MortalityTable

    return MortalityTable.from_mapping(table_data)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def birth_30y_10w():
    """Born 30 years and exactly 10 weeks before NOW."""
    return date(1996, 8, 10)
