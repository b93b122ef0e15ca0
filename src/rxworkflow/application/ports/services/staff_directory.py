"""
Staff role lookup interface.
"""

from abc import ABC, abstractmethod


class StaffDirectory(ABC):
    @abstractmethod
    async def is_pharmacist(self, actor_id: str) -> bool:
        """True if the staff member holds pharmacist privileges."""
        pass
