"""
Pickup session repository interface.
"""

from typing import Optional

from ....domain.entities.pickup import PickupSession


class PickupSessionRepository:
    """Repository interface for pickup sessions."""

    async def get(self, session_id: str) -> Optional[PickupSession]:
        raise NotImplementedError

    async def add(self, session: PickupSession) -> PickupSession:
        raise NotImplementedError

    async def save(self, session: PickupSession, expected_version: int) -> PickupSession:
        """Compare-and-swap update."""
        raise NotImplementedError
