"""
Local collaborators for pharmacies without a messaging or switch integration.

``LoggingNotificationSink`` writes the reminder to the log for staff to
phone the patient. ``ManualClaimReversalService`` records that the claim
must be reversed at the register and returns a receipt without a
transaction id.
"""

import logging

from ...application.ports.services.claim_reversal_service import ClaimReversalService, ReversalReceipt
from ...application.ports.services.notification_service import NotificationSink
from ...domain.entities.will_call import WillCallBin

logger = logging.getLogger("rxworkflow")


class LoggingNotificationSink(NotificationSink):
    def __init__(self, pharmacy_name: str = "Pharmacy") -> None:
        self._pharmacy_name = pharmacy_name

    def format_message(self, bin: WillCallBin) -> str:
        return (
            f"{self._pharmacy_name}: your prescription {bin.rx_number} ({bin.drug_name}) is ready. "
            f"Please pick it up within {bin.days_until_return} day(s) or it will be returned to stock."
        )

    async def send_pickup_reminder(self, bin: WillCallBin) -> None:
        logger.info(
            "Pickup reminder for patient %s bin %s: %s",
            bin.patient_id,
            bin.bin_id,
            self.format_message(bin),
        )


class ManualClaimReversalService(ClaimReversalService):
    async def reverse_claim(self, bin: WillCallBin) -> ReversalReceipt:
        logger.warning(
            "Manual claim reversal required for Rx %s (bin %s, location %s)",
            bin.rx_number,
            bin.bin_id,
            bin.bin_location,
        )
        return ReversalReceipt(transaction_id=None)
