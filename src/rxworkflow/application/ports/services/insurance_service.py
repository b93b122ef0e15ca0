"""
Claim adjudication status interface.
"""

from abc import ABC, abstractmethod


class InsuranceService(ABC):
    @abstractmethod
    async def is_rejected(self, prescription_id: str) -> bool:
        """True when the latest claim for the prescription was rejected."""
        pass
