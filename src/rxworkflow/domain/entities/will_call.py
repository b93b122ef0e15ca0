"""Will-call bin entity.

``days_in_bin`` and ``days_until_return`` are derived from ``placed_at`` and
``return_to_stock_date``; they are refreshed on read and never trusted as
ground truth. A bin leaves the active set once its claim is reversed
or the prescription is picked up.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class WillCallBin:
    bin_id: str
    bin_location: str  # e.g. "A-12", "REF-3" for refrigerator
    prescription_id: str
    rx_number: str
    patient_id: str
    patient_name: str
    drug_name: str
    quantity: float
    placed_at: datetime
    return_to_stock_date: datetime
    days_in_bin: int = 0
    days_until_return: int = 0
    organization_id: Optional[str] = None
    organization_name: Optional[str] = None
    group_code: Optional[str] = None
    is_refrigerated: bool = False
    is_controlled: bool = False
    signature_on_file: bool = False
    insurance_reversed: bool = False
    reversed_at: Optional[datetime] = None
    reversed_by: Optional[str] = None
    reversal_transaction_id: Optional[str] = None
    pickup_reminder_sent: bool = False
    reminder_sent_at: Optional[datetime] = None
    reminder_count: int = 0
    picked_up_at: Optional[datetime] = None
    picked_up_by: Optional[str] = None
    returned_to_stock_at: Optional[datetime] = None
    version: int = 0

    @property
    def is_active(self) -> bool:
        """Still waiting in the bin: neither reversed nor picked up."""
        return not self.insurance_reversed and self.picked_up_at is None

    def with_changes(self, **changes: Any) -> "WillCallBin":
        return replace(self, **changes)
