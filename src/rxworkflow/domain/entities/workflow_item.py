"""WorkflowItem domain entity: one prescription in flight through the pharmacy.

Items are immutable. Every change produces a new item; the state history is
an append-only log and ``state`` always equals the last logged target state.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Optional, Tuple

from ...core.utils.datetime_utils import resolve_now
from ...core.utils.string_utils import generate_prefixed_id
from ..enums.workflow import WorkflowPriority, WorkflowState


@dataclass(frozen=True)
class WorkflowStateChange:
    """Audit record for one state transition. Never mutated or deleted."""

    id: str
    prescription_id: str
    from_state: Optional[WorkflowState]
    to_state: WorkflowState
    changed_by_id: str
    changed_by_name: str
    changed_at: datetime
    reason: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class WorkflowItem:
    """Queue entry for a prescription."""

    id: str
    prescription_id: str
    rx_number: str
    patient_id: str
    patient_name: str
    drug_name: str
    quantity: float
    state: WorkflowState
    priority: WorkflowPriority
    created_at: datetime
    updated_at: datetime
    patient_dob: Optional[date] = None
    strength: Optional[str] = None
    days_supply: Optional[int] = None
    directions: Optional[str] = None
    promise_time: Optional[datetime] = None
    assigned_to_id: Optional[str] = None
    assigned_to_name: Optional[str] = None
    is_on_hold: bool = False
    hold_reason: Optional[str] = None
    is_controlled: bool = False
    dea_schedule: Optional[int] = None
    requires_counseling: bool = False
    dur_alert_count: int = 0
    has_insurance_issue: bool = False
    initial_state: Optional[WorkflowState] = None
    version: int = 0
    state_history: Tuple[WorkflowStateChange, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.initial_state is None:
            object.__setattr__(self, "initial_state", self.state)
        if not isinstance(self.state_history, tuple):
            object.__setattr__(self, "state_history", tuple(self.state_history))

    @classmethod
    def create(
        cls,
        prescription_id: str,
        rx_number: str,
        patient_id: str,
        patient_name: str,
        drug_name: str,
        quantity: float,
        priority: WorkflowPriority = WorkflowPriority.NORMAL,
        state: WorkflowState = WorkflowState.INTAKE,
        now: Optional[datetime] = None,
        **attributes: Any,
    ) -> "WorkflowItem":
        """Create a new item with an empty history."""
        now = resolve_now(now)
        return cls(
            id=attributes.pop("id", None) or generate_prefixed_id("WF"),
            prescription_id=prescription_id,
            rx_number=rx_number,
            patient_id=patient_id,
            patient_name=patient_name,
            drug_name=drug_name,
            quantity=quantity,
            state=state,
            priority=priority,
            created_at=now,
            updated_at=now,
            **attributes,
        )

    def with_changes(self, **changes: Any) -> "WorkflowItem":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def current_state_from_history(self) -> WorkflowState:
        """Fold the audit log into the current state."""
        if not self.state_history:
            return self.initial_state
        return self.state_history[-1].to_state

    @property
    def transition_count(self) -> int:
        return len(self.state_history)
