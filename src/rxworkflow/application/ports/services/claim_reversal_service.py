"""
Insurance claim reversal interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ....domain.entities.will_call import WillCallBin


@dataclass(frozen=True)
class ReversalReceipt:
    transaction_id: Optional[str] = None


class ClaimReversalService(ABC):
    @abstractmethod
    async def reverse_claim(self, bin: WillCallBin) -> ReversalReceipt:
        """Reverse the paid claim for a prescription going back to stock.

        Raises:
            ExternalServiceError: the payer or switch rejected the reversal.
        """
        pass
