"""
Guarded validation of workflow state transitions.

Validation is pure. Building the audit record is separate so the caller can
append it and update ``state`` in a single write.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ...core.utils.datetime_utils import resolve_now
from ...core.utils.string_utils import generate_prefixed_id
from ...domain.entities.verification import DurAlert
from ...domain.entities.workflow_item import WorkflowStateChange
from ...domain.enums.workflow import WorkflowState
from ..verification.dur_review import check_dur_alerts_resolved
from .state_machine import is_valid_transition, requires_pharmacist

# Sources from which a stale insurance rejection does not block filling.
INSURANCE_OVERRIDE_SOURCES = frozenset({WorkflowState.DUR_REVIEW, WorkflowState.PRIOR_AUTH_APPROVED})


@dataclass(frozen=True)
class TransitionGuards:
    """Facts the caller gathered before asking for a transition."""

    is_pharmacist: bool = False
    has_unresolved_dur: bool = False
    has_insurance_reject: bool = False


@dataclass(frozen=True)
class StateTransitionResult:
    success: bool
    from_state: WorkflowState
    to_state: WorkflowState
    error: Optional[str] = None


def validate_state_transition(
    current: WorkflowState,
    target: WorkflowState,
    guards: Optional[TransitionGuards] = None,
) -> StateTransitionResult:
    """Check a transition against adjacency, role, DUR and insurance rules.

    Rules are applied in order and the first failure wins. Rejections are
    returned, never raised.
    """
    guards = guards or TransitionGuards()

    def reject(error: str) -> StateTransitionResult:
        return StateTransitionResult(success=False, from_state=current, to_state=target, error=error)

    if not is_valid_transition(current, target):
        return reject(f"Invalid transition from {current.value} to {target.value}")

    if requires_pharmacist(target) and not guards.is_pharmacist:
        return reject(f"State {target.value} requires pharmacist access")

    if target == WorkflowState.FILLING:
        if guards.has_unresolved_dur:
            return reject("Cannot proceed to filling with unresolved DUR alerts")
        if guards.has_insurance_reject and current not in INSURANCE_OVERRIDE_SOURCES:
            return reject("Cannot proceed to filling with unresolved insurance rejection")

    return StateTransitionResult(success=True, from_state=current, to_state=target)


def create_state_change(
    prescription_id: str,
    from_state: Optional[WorkflowState],
    to_state: WorkflowState,
    actor_id: str,
    actor_name: str,
    reason: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> WorkflowStateChange:
    """Build the immutable audit record for a transition."""
    return WorkflowStateChange(
        id=generate_prefixed_id("SC", random_length=9),
        prescription_id=prescription_id,
        from_state=from_state,
        to_state=to_state,
        changed_by_id=actor_id,
        changed_by_name=actor_name,
        changed_at=resolve_now(now),
        reason=reason,
        notes=notes,
    )


def build_guards(
    is_pharmacist: bool,
    dur_alerts: Iterable[DurAlert] = (),
    dur_overrides: Iterable[str] = (),
    insurance_rejected: bool = False,
) -> TransitionGuards:
    """Derive guard facts from collaborator data.

    Only unresolved high-severity alerts count as blocking DUR.
    """
    dur_status = check_dur_alerts_resolved(list(dur_alerts), list(dur_overrides))
    return TransitionGuards(
        is_pharmacist=is_pharmacist,
        has_unresolved_dur=not dur_status.can_proceed,
        has_insurance_reject=insurance_rejected,
    )
