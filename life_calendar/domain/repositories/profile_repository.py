"""ProfileRepository protocol: defines the profile storage contract."""

from typing import Optional, Protocol, runtime_checkable

from ...models.user_profile import UserProfile


@runtime_checkable
class ProfileRepository(Protocol):
    """Storage adapter for calendar inputs (read-on-start, write-on-change)."""

    async def get(self, profile_id: str) -> Optional[UserProfile]:
        """Load a stored profile.

        Args:
            profile_id: Identifier of the calendar owner.

        Returns:
            The stored UserProfile, or None if nothing was saved yet.
        """
        ...

    async def save(self, profile: UserProfile) -> None:
        """Insert or replace the stored profile.

        Args:
            profile: Already validated profile to persist.
        """
        ...
