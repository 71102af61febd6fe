"""SQLAlchemy implementation of ProfileRepository."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...models.life_calendar_profile import LifeCalendarProfile
from ...models.user_profile import UserProfile

logger = logging.getLogger(__name__)


class SqlAlchemyProfileRepository:
    """Concrete ProfileRepository backed by SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, profile_id: str) -> Optional[UserProfile]:
        """Look up a stored profile by ID."""
        result = await self._session.execute(
            select(LifeCalendarProfile).where(
                LifeCalendarProfile.profile_id == profile_id
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return UserProfile(
            profile_id=row.profile_id, birth_date=row.birth_date, sex=row.sex
        )

    async def save(self, profile: UserProfile) -> None:
        """Insert or update the profile row and commit."""
        row = await self._session.get(LifeCalendarProfile, profile.profile_id)
        if row is None:
            row = LifeCalendarProfile(profile_id=profile.profile_id)
            self._session.add(row)

        row.birth_date = profile.birth_date
        row.sex = profile.sex.value
        await self._session.commit()
        logger.info(
            "Saved life calendar profile %s (sex=%s)", profile.profile_id, row.sex
        )
