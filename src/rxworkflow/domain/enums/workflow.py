"""
Prescription workflow state and priority enums.
"""

from enum import Enum


class WorkflowState(str, Enum):
    """Prescription lifecycle states."""

    INTAKE = "INTAKE"                            # Received (e-Rx, fax, phone, walk-in)
    DATA_ENTRY = "DATA_ENTRY"                    # Being typed by a technician
    DATA_ENTRY_COMPLETE = "DATA_ENTRY_COMPLETE"
    INSURANCE_PENDING = "INSURANCE_PENDING"      # Claim submitted, awaiting adjudication
    INSURANCE_REJECTED = "INSURANCE_REJECTED"
    DUR_REVIEW = "DUR_REVIEW"                    # Pharmacist clinical review
    PRIOR_AUTH_PENDING = "PRIOR_AUTH_PENDING"
    PRIOR_AUTH_APPROVED = "PRIOR_AUTH_APPROVED"
    FILLING = "FILLING"
    VERIFICATION = "VERIFICATION"                # Pharmacist final check
    READY = "READY"                              # In the will-call bin
    SOLD = "SOLD"
    DELIVERED = "DELIVERED"
    RETURNED_TO_STOCK = "RETURNED_TO_STOCK"
    CANCELLED = "CANCELLED"


class WorkflowPriority(str, Enum):
    """Queue priority, most urgent first."""

    STAT = "STAT"
    URGENT = "URGENT"
    NORMAL = "NORMAL"
    LOW = "LOW"


class QueueColor(str, Enum):
    """SLA color shown on worklists."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
