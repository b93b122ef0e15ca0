"""
Verification session operations.

A session moves from ``in_progress`` to one terminal status exactly once.
Every operation returns a new session; completed sessions cannot be edited.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Tuple

from ...core.utils.datetime_utils import resolve_now
from ...core.utils.string_utils import generate_prefixed_id
from ...domain.entities.verification import DurAlert, VerificationSession
from ...domain.enums.verification import VerificationDecision, VerificationStatus
from ...domain.enums.workflow import WorkflowState
from ...domain.errors import (
    InvalidDurOverrideError,
    RejectionReasonRequiredError,
    VerificationAlreadyCompletedError,
)
from ...domain.value_objects.ndc import normalize_ndc
from .barcode import NdcVerificationResult, parse_ndc_from_barcode, verify_ndc_match
from .checklist import (
    checklist_progress,
    create_verification_checklist,
    is_checklist_complete,
    update_checklist,
)
from .dur_review import check_dur_alerts_resolved, create_dur_override

logger = logging.getLogger("rxworkflow")

DECISION_STATUS = {
    VerificationDecision.APPROVED: VerificationStatus.APPROVED,
    VerificationDecision.REJECTED: VerificationStatus.REJECTED,
    VerificationDecision.RETURNED_FOR_REWORK: VerificationStatus.RETURNED,
}

DECISION_WORKFLOW_TARGET = {
    VerificationDecision.APPROVED: WorkflowState.READY,
    VerificationDecision.REJECTED: WorkflowState.FILLING,
    VerificationDecision.RETURNED_FOR_REWORK: WorkflowState.FILLING,
}


@dataclass(frozen=True)
class ChecklistProgress:
    completed: int
    total: int
    percentage: int


@dataclass(frozen=True)
class VerificationValidation:
    can_complete: bool
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]
    checklist_progress: ChecklistProgress


@dataclass(frozen=True)
class NdcScanOutcome:
    """Session after a scan plus what the scan found."""

    session: VerificationSession
    success: bool
    verification: Optional[NdcVerificationResult] = None
    error: Optional[str] = None


def _ensure_open(session: VerificationSession) -> None:
    if session.is_completed:
        raise VerificationAlreadyCompletedError(session.id, session.status.value)


def start_verification(
    prescription_id: str,
    fill_id: str,
    pharmacist_id: str,
    is_controlled: bool = False,
    expected_ndc: Optional[str] = None,
    now: Optional[datetime] = None,
) -> VerificationSession:
    """Open a verification session with a blank checklist."""
    return VerificationSession(
        id=generate_prefixed_id("VER"),
        prescription_id=prescription_id,
        fill_id=fill_id,
        pharmacist_id=pharmacist_id,
        started_at=resolve_now(now),
        checklist=create_verification_checklist(is_controlled),
        expected_ndc=normalize_ndc(expected_ndc) if expected_ndc else None,
    )


def update_session_checklist(session: VerificationSession, **marks: bool) -> VerificationSession:
    _ensure_open(session)
    return session.with_changes(checklist=update_checklist(session.checklist, **marks))


def record_ndc_scan(
    session: VerificationSession,
    raw_barcode: str,
    allow_package_variant: bool = False,
    now: Optional[datetime] = None,
) -> NdcScanOutcome:
    """Parse a product scan and compare it with the expected NDC.

    A matching scan marks the session and the checklist NDC item verified. A
    mismatch or unreadable barcode leaves the session unverified.
    """
    _ensure_open(session)
    if not session.expected_ndc:
        raise ValueError(f"Verification session {session.id} has no expected NDC")

    parsed = parse_ndc_from_barcode(raw_barcode)
    if not parsed.success:
        return NdcScanOutcome(session=session, success=False, error=parsed.error)

    match = verify_ndc_match(parsed.ndc, session.expected_ndc, allow_package_variant)
    checklist = session.checklist
    if match.matches:
        checklist = update_checklist(checklist, ndc_verified=True)
    else:
        logger.info(
            "NDC mismatch on session %s: scanned %s, expected %s (%s)",
            session.id,
            match.scanned_ndc,
            match.expected_ndc,
            match.match_type.value,
        )

    updated = session.with_changes(
        ndc_scanned=parsed.ndc,
        ndc_verified=match.matches,
        ndc_match_type=match.match_type,
        scan_timestamp=resolve_now(now),
        checklist=checklist,
    )
    return NdcScanOutcome(session=updated, success=match.matches, verification=match, error=match.error)


def add_dur_override(
    session: VerificationSession,
    alert: DurAlert,
    code: str,
    reason: str,
    pharmacist_name: str,
    pharmacist_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> VerificationSession:
    """Append an override; an alert can be overridden once per session."""
    _ensure_open(session)
    if any(override.dur_alert_id == alert.id for override in session.dur_overrides):
        raise InvalidDurOverrideError(alert.id, "alert already overridden in this session")
    override = create_dur_override(
        alert,
        code,
        reason,
        pharmacist_id or session.pharmacist_id,
        pharmacist_name,
        now=now,
    )
    return session.with_changes(dur_overrides=session.dur_overrides + (override,))


def mark_dur_reviewed(session: VerificationSession, alerts: Iterable[DurAlert]) -> VerificationSession:
    """Mark DUR reviewed once no high-severity alert is left unresolved.

    Returns the session unchanged when blocking alerts remain.
    """
    _ensure_open(session)
    status = check_dur_alerts_resolved(alerts, session.dur_overrides)
    if not status.can_proceed:
        return session
    return session.with_changes(
        dur_alerts_reviewed=True,
        checklist=update_checklist(session.checklist, dur_alerts_reviewed=True),
    )


def validate_verification_complete(
    session: VerificationSession, skip_pdmp: bool = False
) -> VerificationValidation:
    """Everything a pharmacist still has to do before approving."""
    checklist_result = is_checklist_complete(session.checklist, skip_pdmp=skip_pdmp)
    errors = list(checklist_result.errors)
    if not session.ndc_verified:
        errors.append("NDC barcode must be scanned and verified")
    if not session.dur_alerts_reviewed:
        errors.append("DUR alerts must be reviewed")

    completed, total, percentage = checklist_progress(checklist_result)
    return VerificationValidation(
        can_complete=not errors,
        errors=tuple(errors),
        warnings=checklist_result.warnings,
        checklist_progress=ChecklistProgress(completed=completed, total=total, percentage=percentage),
    )


def complete_verification(
    session: VerificationSession,
    decision: VerificationDecision,
    notes: Optional[str] = None,
    rejection_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> VerificationSession:
    """Record the final decision.

    Raises:
        RejectionReasonRequiredError: rejecting without a reason.
        VerificationAlreadyCompletedError: the session already has a decision.
    """
    _ensure_open(session)
    if decision == VerificationDecision.REJECTED and not (rejection_reason or "").strip():
        raise RejectionReasonRequiredError(session.id)

    return session.with_changes(
        status=DECISION_STATUS[decision],
        decision=decision,
        notes=notes,
        rejection_reason=rejection_reason,
        checklist_completed=True,
        completed_at=resolve_now(now),
    )


def workflow_target_for_decision(decision: VerificationDecision) -> WorkflowState:
    """Where the workflow item goes after the pharmacist decides."""
    return DECISION_WORKFLOW_TARGET[decision]
