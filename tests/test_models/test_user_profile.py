"""Tests for the UserProfile value object."""

from datetime import date

import pytest
from pydantic import ValidationError

from life_calendar.domain.errors import InvalidBirthDate, InvalidSexCategory
from life_calendar.models.user_profile import UserProfile
from life_calendar.services.life_weeks_domain import SexCategory


class TestUserProfile:
    def test_normalizes_inputs(self):
        profile = UserProfile(profile_id="me", birth_date=" 1990-05-15 ", sex="Female")
        assert profile.birth_date == "1990-05-15"
        assert profile.sex is SexCategory.FEMALE
        assert profile.parsed_birth_date() == date(1990, 5, 15)

    def test_defaults(self):
        profile = UserProfile(profile_id="me")
        assert profile.birth_date is None
        assert profile.sex is SexCategory.UNKNOWN
        assert profile.parsed_birth_date() is None

    def test_accepts_date_objects(self):
        profile = UserProfile(profile_id="me", birth_date=date(2000, 2, 29))
        assert profile.birth_date == "2000-02-29"

    def test_empty_values_mean_unset(self):
        profile = UserProfile(profile_id="me", birth_date="", sex="")
        assert profile.birth_date is None
        assert profile.sex is SexCategory.UNKNOWN

    def test_invalid_birth_date(self):
        with pytest.raises(InvalidBirthDate):
            UserProfile(profile_id="me", birth_date="15/05/1990")

    def test_invalid_sex(self):
        with pytest.raises(InvalidSexCategory):
            UserProfile(profile_id="me", sex="unicorn")

    def test_profile_id_required(self):
        with pytest.raises(ValidationError):
            UserProfile(profile_id="")

    def test_immutable(self):
        profile = UserProfile(profile_id="me")
        with pytest.raises(ValidationError):
            profile.sex = SexCategory.MALE
