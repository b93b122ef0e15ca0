"""
Prescription workflow state machine.

Static adjacency of the dispensing workflow:
Intake -> Data Entry -> Claim -> Fill -> Verify -> Dispense.
"""

from typing import Dict, FrozenSet, List, Optional

from ...domain.enums.workflow import WorkflowPriority, WorkflowState

S = WorkflowState

VALID_STATE_TRANSITIONS: Dict[WorkflowState, FrozenSet[WorkflowState]] = {
    S.INTAKE: frozenset({S.DATA_ENTRY, S.CANCELLED}),
    S.DATA_ENTRY: frozenset({S.DATA_ENTRY_COMPLETE, S.INTAKE, S.CANCELLED}),
    S.DATA_ENTRY_COMPLETE: frozenset({S.INSURANCE_PENDING, S.FILLING, S.DUR_REVIEW, S.CANCELLED}),
    S.INSURANCE_PENDING: frozenset(
        {S.INSURANCE_REJECTED, S.DUR_REVIEW, S.FILLING, S.PRIOR_AUTH_PENDING, S.CANCELLED}
    ),
    S.INSURANCE_REJECTED: frozenset(
        {S.DATA_ENTRY, S.INSURANCE_PENDING, S.PRIOR_AUTH_PENDING, S.CANCELLED}
    ),
    S.DUR_REVIEW: frozenset({S.FILLING, S.CANCELLED}),
    S.PRIOR_AUTH_PENDING: frozenset({S.PRIOR_AUTH_APPROVED, S.INSURANCE_REJECTED, S.CANCELLED}),
    S.PRIOR_AUTH_APPROVED: frozenset({S.FILLING, S.CANCELLED}),
    S.FILLING: frozenset({S.VERIFICATION, S.DATA_ENTRY, S.CANCELLED}),
    S.VERIFICATION: frozenset({S.READY, S.FILLING, S.CANCELLED}),
    S.READY: frozenset({S.SOLD, S.DELIVERED, S.RETURNED_TO_STOCK}),
    S.SOLD: frozenset(),
    S.DELIVERED: frozenset(),
    S.RETURNED_TO_STOCK: frozenset({S.DATA_ENTRY}),  # only re-entry path
    S.CANCELLED: frozenset(),
}

TERMINAL_STATES: FrozenSet[WorkflowState] = frozenset({S.SOLD, S.DELIVERED, S.CANCELLED})

PHARMACIST_REQUIRED_STATES: FrozenSet[WorkflowState] = frozenset({S.DUR_REVIEW, S.VERIFICATION})

TECH_ACCESSIBLE_STATES: FrozenSet[WorkflowState] = frozenset(
    state
    for state in WorkflowState
    if state not in TERMINAL_STATES
    and state not in PHARMACIST_REQUIRED_STATES
    and state != S.RETURNED_TO_STOCK
)

WORKFLOW_STATE_DISPLAY: Dict[WorkflowState, str] = {
    S.INTAKE: "Intake",
    S.DATA_ENTRY: "Data Entry",
    S.DATA_ENTRY_COMPLETE: "Data Entry Complete",
    S.INSURANCE_PENDING: "Insurance Pending",
    S.INSURANCE_REJECTED: "Insurance Rejected",
    S.DUR_REVIEW: "DUR Review",
    S.PRIOR_AUTH_PENDING: "Prior Auth Pending",
    S.PRIOR_AUTH_APPROVED: "Prior Auth Approved",
    S.FILLING: "Filling",
    S.VERIFICATION: "Verification",
    S.READY: "Ready for Pickup",
    S.SOLD: "Sold",
    S.DELIVERED: "Delivered",
    S.RETURNED_TO_STOCK: "Returned to Stock",
    S.CANCELLED: "Cancelled",
}

PRIORITY_DISPLAY: Dict[WorkflowPriority, str] = {
    WorkflowPriority.STAT: "STAT",
    WorkflowPriority.URGENT: "Urgent",
    WorkflowPriority.NORMAL: "Normal",
    WorkflowPriority.LOW: "Low Priority",
}

PRIORITY_ORDER: Dict[WorkflowPriority, int] = {
    WorkflowPriority.STAT: 0,
    WorkflowPriority.URGENT: 1,
    WorkflowPriority.NORMAL: 2,
    WorkflowPriority.LOW: 3,
}


def _check_tables() -> None:
    for table_name, table, members in (
        ("VALID_STATE_TRANSITIONS", VALID_STATE_TRANSITIONS, WorkflowState),
        ("WORKFLOW_STATE_DISPLAY", WORKFLOW_STATE_DISPLAY, WorkflowState),
        ("PRIORITY_DISPLAY", PRIORITY_DISPLAY, WorkflowPriority),
        ("PRIORITY_ORDER", PRIORITY_ORDER, WorkflowPriority),
    ):
        missing = [member.value for member in members if member not in table]
        if missing:
            raise RuntimeError(f"{table_name} is missing entries for: {', '.join(missing)}")
    for state in TERMINAL_STATES:
        if VALID_STATE_TRANSITIONS[state]:
            raise RuntimeError(f"Terminal state {state.value} must not have outgoing transitions")


_check_tables()


def is_valid_transition(from_state: WorkflowState, to_state: WorkflowState) -> bool:
    """Check if a state transition is structurally allowed."""
    return to_state in VALID_STATE_TRANSITIONS[from_state]


def get_valid_next_states(state: WorkflowState) -> List[WorkflowState]:
    """Valid next states, in declaration order. Callers may mutate the list."""
    allowed = VALID_STATE_TRANSITIONS[state]
    return [candidate for candidate in WorkflowState if candidate in allowed]


def is_terminal_state(state: WorkflowState) -> bool:
    return state in TERMINAL_STATES


def requires_pharmacist(state: WorkflowState) -> bool:
    return state in PHARMACIST_REQUIRED_STATES


def is_tech_accessible(state: WorkflowState) -> bool:
    return state in TECH_ACCESSIBLE_STATES


def get_expected_next_state(
    state: WorkflowState,
    has_dur_alerts: bool = False,
    has_insurance: bool = False,
    insurance_approved: Optional[bool] = None,
    needs_prior_auth: bool = False,
) -> Optional[WorkflowState]:
    """Suggest the usual next step for a worklist "advance" button.

    Cash prescriptions skip adjudication. ``insurance_approved=None`` means the
    claim has not come back yet and is treated as approved.
    """
    if state == S.DATA_ENTRY_COMPLETE:
        if not has_insurance:
            return S.DUR_REVIEW if has_dur_alerts else S.FILLING
        return S.INSURANCE_PENDING

    if state == S.INSURANCE_PENDING:
        if needs_prior_auth:
            return S.PRIOR_AUTH_PENDING
        if insurance_approved is False:
            return S.INSURANCE_REJECTED
        return S.DUR_REVIEW if has_dur_alerts else S.FILLING

    return _HAPPY_PATH.get(state)


_HAPPY_PATH: Dict[WorkflowState, WorkflowState] = {
    S.INTAKE: S.DATA_ENTRY,
    S.DATA_ENTRY: S.DATA_ENTRY_COMPLETE,
    S.INSURANCE_REJECTED: S.DATA_ENTRY,  # re-entry or switch to cash
    S.DUR_REVIEW: S.FILLING,
    S.PRIOR_AUTH_PENDING: S.PRIOR_AUTH_APPROVED,
    S.PRIOR_AUTH_APPROVED: S.FILLING,
    S.FILLING: S.VERIFICATION,
    S.VERIFICATION: S.READY,
    S.READY: S.SOLD,
    S.RETURNED_TO_STOCK: S.DATA_ENTRY,
}
