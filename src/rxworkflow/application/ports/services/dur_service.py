"""
DUR screening service interface.
"""

from abc import ABC, abstractmethod
from typing import List

from ....domain.entities.verification import DurAlert


class DurService(ABC):
    """Source of drug utilization review alerts for a prescription."""

    @abstractmethod
    async def get_alerts(self, prescription_id: str) -> List[DurAlert]:
        """Current DUR alerts, including ones already flagged overridden."""
        pass

    @abstractmethod
    async def get_override_alert_ids(self, prescription_id: str) -> List[str]:
        """IDs of alerts a pharmacist has overridden for this prescription."""
        pass
