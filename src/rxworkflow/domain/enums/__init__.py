"""
Domain enums package.
"""

from .pickup import (
    CounselingStatus,
    IdType,
    PaymentMethod,
    PickupSessionType,
    PickupStatus,
    SignatureFormat,
    SignatureReason,
)
from .verification import (
    BarcodeFormat,
    DurAlertType,
    DurSeverity,
    NdcMatchType,
    VerificationDecision,
    VerificationStatus,
)
from .workflow import QueueColor, WorkflowPriority, WorkflowState

__all__ = [
    "WorkflowState",
    "WorkflowPriority",
    "QueueColor",
    "VerificationStatus",
    "VerificationDecision",
    "DurSeverity",
    "DurAlertType",
    "NdcMatchType",
    "BarcodeFormat",
    "PickupSessionType",
    "PickupStatus",
    "SignatureReason",
    "SignatureFormat",
    "IdType",
    "CounselingStatus",
    "PaymentMethod",
]
