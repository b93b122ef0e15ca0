"""Request and response DTOs for the workflow use cases."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from ...domain.entities.pickup import PickupSession
from ...domain.entities.verification import VerificationSession
from ...domain.entities.will_call import WillCallBin
from ...domain.entities.workflow_item import WorkflowItem, WorkflowStateChange
from ...domain.enums.verification import VerificationDecision
from ...domain.enums.workflow import WorkflowPriority, WorkflowState


@dataclass
class IntakePrescriptionRequest:
    """Request DTO for queueing a new prescription."""

    prescription_id: str
    rx_number: str
    patient_id: str
    patient_name: str
    drug_name: str
    quantity: float
    priority: WorkflowPriority = WorkflowPriority.NORMAL
    patient_dob: Optional[date] = None
    strength: Optional[str] = None
    days_supply: Optional[int] = None
    directions: Optional[str] = None
    is_controlled: bool = False
    dea_schedule: Optional[int] = None
    requires_counseling: bool = False


@dataclass
class TransitionPrescriptionRequest:
    """Request DTO for moving a workflow item to another state."""

    item_id: str
    to_state: WorkflowState
    actor_id: str
    actor_name: str
    reason: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class TransitionPrescriptionResponse:
    success: bool
    item: WorkflowItem
    state_change: Optional[WorkflowStateChange] = None
    error: Optional[str] = None


@dataclass
class CompleteVerificationRequest:
    """Request DTO for the pharmacist's final verification decision."""

    session_id: str
    decision: VerificationDecision
    pharmacist_name: str
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    skip_pdmp: bool = False


@dataclass
class CompleteVerificationResponse:
    success: bool
    session: VerificationSession
    item: Optional[WorkflowItem] = None
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass
class CompletePickupRequest:
    session_id: str
    user_id: str
    user_name: str


@dataclass
class CompletePickupResponse:
    success: bool
    session: PickupSession
    items: List[WorkflowItem] = field(default_factory=list)
    retired_bins: List[WillCallBin] = field(default_factory=list)
    errors: Tuple[str, ...] = ()


@dataclass
class WillCallFailure:
    """One bin the sweep could not finish; retried on the next run."""

    bin_id: str
    action: str
    error: str


@dataclass
class ProcessWillCallExpirationResponse:
    reversed: List[WillCallBin] = field(default_factory=list)
    reminded: List[WillCallBin] = field(default_factory=list)
    returned_items: List[WorkflowItem] = field(default_factory=list)
    retired: List[WillCallBin] = field(default_factory=list)
    skipped: List[WillCallBin] = field(default_factory=list)
    errors: List[WillCallFailure] = field(default_factory=list)
