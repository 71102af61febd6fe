"""UserProfile: validated, immutable calendar inputs passed between layers."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.life_weeks_domain import SexCategory, parse_birth_date


class UserProfile(BaseModel):
    """Birth date and sex for one profile; what the profile store persists."""

    model_config = ConfigDict(frozen=True)

    profile_id: str = Field(..., min_length=1, max_length=64)
    birth_date: Optional[str] = None
    sex: SexCategory = SexCategory.UNKNOWN

    @field_validator("birth_date", mode="before")
    @classmethod
    def birth_date_is_calendar_date(cls, v: object) -> Optional[str]:
        # InvalidBirthDate is not a ValueError, so pydantic re-raises it as is
        parsed = parse_birth_date(v)
        return parsed.isoformat() if parsed else None

    @field_validator("sex", mode="before")
    @classmethod
    def sex_token(cls, v: object) -> SexCategory:
        return SexCategory.parse(v)

    def parsed_birth_date(self) -> Optional[date]:
        return parse_birth_date(self.birth_date)
