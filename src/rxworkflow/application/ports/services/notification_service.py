"""
Patient messaging interface.
"""

from abc import ABC, abstractmethod

from ....domain.entities.will_call import WillCallBin


class NotificationSink(ABC):
    @abstractmethod
    async def send_pickup_reminder(self, bin: WillCallBin) -> None:
        """Tell the patient their prescription is about to be returned to stock.

        Raises:
            ExternalServiceError: the message could not be delivered.
        """
        pass
