"""Life Calendar profile ORM model.

Stores the two user inputs that drive the calendar: birth date and sex.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class LifeCalendarProfile(Base, TimestampMixin):
    """Persisted inputs for one calendar owner."""

    __tablename__ = "life_calendar_profiles"

    profile_id: Mapped[str] = mapped_column(String(64), primary_key=True)

    birth_date: Mapped[Optional[str]] = mapped_column(
        String(10), nullable=True
    )  # YYYY-MM-DD format

    sex: Mapped[str] = mapped_column(
        String(10), default="unknown", nullable=False
    )  # unknown, male, female

    def __repr__(self) -> str:
        return (
            f"<LifeCalendarProfile(profile_id={self.profile_id!r}, "
            f"birth_date={self.birth_date!r}, sex={self.sex!r})>"
        )
