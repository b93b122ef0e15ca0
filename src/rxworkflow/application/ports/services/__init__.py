"""
External service interfaces.
"""

from .claim_reversal_service import ClaimReversalService, ReversalReceipt
from .dur_service import DurService
from .insurance_service import InsuranceService
from .notification_service import NotificationSink
from .staff_directory import StaffDirectory

__all__ = [
    "ClaimReversalService",
    "ReversalReceipt",
    "DurService",
    "InsuranceService",
    "NotificationSink",
    "StaffDirectory",
]
