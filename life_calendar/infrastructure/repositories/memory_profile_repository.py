"""Dict-backed ProfileRepository for tests and one-shot use."""

from typing import Dict, Optional

from ...models.user_profile import UserProfile


class InMemoryProfileRepository:
    """ProfileRepository that forgets everything when the process exits."""

    def __init__(self) -> None:
        self._profiles: Dict[str, UserProfile] = {}

    async def get(self, profile_id: str) -> Optional[UserProfile]:
        return self._profiles.get(profile_id)

    async def save(self, profile: UserProfile) -> None:
        self._profiles[profile.profile_id] = profile
