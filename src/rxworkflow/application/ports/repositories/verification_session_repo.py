"""
Verification session repository interface.
"""

from typing import List, Optional

from ....domain.entities.verification import VerificationSession


class VerificationSessionRepository:
    """Repository interface for verification sessions.

    At most one ``in_progress`` session may exist per fill; ``add`` raises
    VerificationInProgressError when another one is open.
    """

    async def get(self, session_id: str) -> Optional[VerificationSession]:
        raise NotImplementedError

    async def add(self, session: VerificationSession) -> VerificationSession:
        raise NotImplementedError

    async def save(self, session: VerificationSession, expected_version: int) -> VerificationSession:
        """Compare-and-swap update."""
        raise NotImplementedError

    async def find_in_progress_by_fill(self, fill_id: str) -> Optional[VerificationSession]:
        raise NotImplementedError

    async def find_by_prescription(self, prescription_id: str) -> List[VerificationSession]:
        raise NotImplementedError
