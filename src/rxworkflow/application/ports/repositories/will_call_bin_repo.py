"""
Will-call bin repository interface.
"""

from typing import List, Optional

from ....domain.entities.will_call import WillCallBin


class WillCallBinRepository:
    """Repository interface for will-call bins."""

    async def get(self, bin_id: str) -> Optional[WillCallBin]:
        raise NotImplementedError

    async def add(self, bin: WillCallBin) -> WillCallBin:
        raise NotImplementedError

    async def save(self, bin: WillCallBin, expected_version: int) -> WillCallBin:
        """Compare-and-swap update."""
        raise NotImplementedError

    async def list_active(self, limit: int = 1000) -> List[WillCallBin]:
        """Bins neither reversed nor picked up."""
        raise NotImplementedError

    async def list_awaiting_restock(self, limit: int = 1000) -> List[WillCallBin]:
        """Reversed bins whose prescription has not been returned to stock yet."""
        raise NotImplementedError

    async def find_by_prescription(self, prescription_id: str) -> Optional[WillCallBin]:
        raise NotImplementedError
