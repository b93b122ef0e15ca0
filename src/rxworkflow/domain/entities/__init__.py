"""
Domain entities package.
"""

from .pickup import (
    IdVerification,
    OrganizationPickupSearch,
    PatientMatch,
    PatientRecord,
    PickupAuditEntry,
    PickupPrescription,
    PickupSearch,
    PickupSession,
    RetailPickupSearch,
    SignatureCapture,
)
from .verification import (
    CONTROLLED_SUBSTANCE_FIELDS,
    DurAlert,
    DurOverrideRecord,
    VerificationChecklist,
    VerificationSession,
)
from .will_call import WillCallBin
from .workflow_item import WorkflowItem, WorkflowStateChange

__all__ = [
    "WorkflowItem",
    "WorkflowStateChange",
    "VerificationChecklist",
    "VerificationSession",
    "DurAlert",
    "DurOverrideRecord",
    "CONTROLLED_SUBSTANCE_FIELDS",
    "RetailPickupSearch",
    "OrganizationPickupSearch",
    "PickupSearch",
    "PatientRecord",
    "PatientMatch",
    "PickupPrescription",
    "SignatureCapture",
    "IdVerification",
    "PickupAuditEntry",
    "PickupSession",
    "WillCallBin",
]
