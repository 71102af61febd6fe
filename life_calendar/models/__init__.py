from .base import Base, TimestampMixin
from .life_calendar_profile import LifeCalendarProfile
from .user_profile import UserProfile

__all__ = [
    "Base",
    "TimestampMixin",
    "LifeCalendarProfile",
    "UserProfile",
]
