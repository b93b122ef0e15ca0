"""
Verification session lifecycle tests.
"""

import pytest

from rxworkflow.application.verification.checklist import REQUIRED_CHECKLIST_FIELDS
from rxworkflow.application.verification.session import (
    add_dur_override,
    complete_verification,
    mark_dur_reviewed,
    record_ndc_scan,
    start_verification,
    update_session_checklist,
    validate_verification_complete,
    workflow_target_for_decision,
)
from rxworkflow.domain.enums.verification import (
    DurSeverity,
    NdcMatchType,
    VerificationDecision,
    VerificationStatus,
)
from rxworkflow.domain.enums.workflow import WorkflowState
from rxworkflow.domain.errors import (
    InvalidDurOverrideError,
    InvalidNdcError,
    RejectionReasonRequiredError,
    VerificationAlreadyCompletedError,
)

from factories import NOW, make_alert


@pytest.fixture
def session():
    return start_verification("RX-1001", "FILL-1", "RPH-1", expected_ndc="0071-0155-23", now=NOW)


def _ready_to_approve(session):
    session = update_session_checklist(session, **{name: True for name in REQUIRED_CHECKLIST_FIELDS})
    session = record_ndc_scan(session, "00071015523", now=NOW).session
    return mark_dur_reviewed(session, [])


def test_start_verification(session):
    assert session.id.startswith("VER-")
    assert session.status == VerificationStatus.IN_PROGRESS
    assert session.expected_ndc == "00071015523"
    assert session.started_at == NOW
    assert not session.checklist.is_controlled


def test_matching_scan_marks_ndc_verified(session):
    outcome = record_ndc_scan(session, "0071-0155-23", now=NOW)
    assert outcome.success
    assert outcome.session.ndc_verified
    assert outcome.session.checklist.ndc_verified
    assert outcome.session.ndc_match_type == NdcMatchType.EXACT
    assert outcome.session.scan_timestamp == NOW


def test_mismatched_scan_leaves_session_unverified(session):
    outcome = record_ndc_scan(session, "12345678901", now=NOW)
    assert not outcome.success
    assert outcome.error == "Different manufacturers"
    assert not outcome.session.ndc_verified
    assert outcome.session.ndc_scanned == "12345678901"


def test_unreadable_scan_keeps_session(session):
    outcome = record_ndc_scan(session, "garbage")
    assert not outcome.success
    assert outcome.session is session
    assert outcome.error == "Unable to parse barcode data"


def test_scan_without_expected_ndc_is_a_contract_violation():
    session = start_verification("RX-1", "FILL-1", "RPH-1")
    with pytest.raises(ValueError):
        record_ndc_scan(session, "00071015523")


@pytest.mark.parametrize("placeholder", ["pending", "N/A"])
def test_placeholder_expected_ndc_is_rejected(placeholder):
    with pytest.raises(InvalidNdcError):
        start_verification("RX-1", "FILL-1", "RPH-1", expected_ndc=placeholder)


def test_dur_review_waits_for_high_alerts(session):
    alert = make_alert("A1", DurSeverity.HIGH)
    assert mark_dur_reviewed(session, [alert]) is session

    overridden = add_dur_override(session, alert, "M0", "Prescriber confirmed dose", "Pat Pharm", now=NOW)
    reviewed = mark_dur_reviewed(overridden, [alert])
    assert reviewed.dur_alerts_reviewed
    assert reviewed.checklist.dur_alerts_reviewed
    assert reviewed.dur_overrides[0].pharmacist_id == "RPH-1"


def test_alert_can_be_overridden_once(session):
    alert = make_alert("A1")
    session = add_dur_override(session, alert, "M0", "Prescriber confirmed dose", "Pat Pharm")
    with pytest.raises(InvalidDurOverrideError):
        add_dur_override(session, alert, "P0", "Patient counseled again", "Pat Pharm")


def test_validation_lists_scan_and_dur_blockers(session):
    validation = validate_verification_complete(session)
    assert not validation.can_complete
    assert "NDC barcode must be scanned and verified" in validation.errors
    assert "DUR alerts must be reviewed" in validation.errors
    assert validation.checklist_progress.completed == 0


def test_ready_session_can_complete(session):
    validation = validate_verification_complete(_ready_to_approve(session))
    assert validation.can_complete
    assert validation.errors == ()
    assert len(validation.warnings) == 2


def test_approve(session):
    completed = complete_verification(_ready_to_approve(session), VerificationDecision.APPROVED, now=NOW)
    assert completed.status == VerificationStatus.APPROVED
    assert completed.decision == VerificationDecision.APPROVED
    assert completed.completed_at == NOW
    assert completed.checklist_completed


def test_reject_requires_reason(session):
    with pytest.raises(RejectionReasonRequiredError):
        complete_verification(session, VerificationDecision.REJECTED, rejection_reason="  ")

    rejected = complete_verification(session, VerificationDecision.REJECTED, rejection_reason="Wrong strength")
    assert rejected.status == VerificationStatus.REJECTED
    assert rejected.rejection_reason == "Wrong strength"


def test_completed_session_is_frozen(session):
    completed = complete_verification(session, VerificationDecision.RETURNED_FOR_REWORK)
    assert completed.status == VerificationStatus.RETURNED
    with pytest.raises(VerificationAlreadyCompletedError):
        complete_verification(completed, VerificationDecision.APPROVED)
    with pytest.raises(VerificationAlreadyCompletedError):
        update_session_checklist(completed, drug_correct=True)


def test_workflow_targets():
    assert workflow_target_for_decision(VerificationDecision.APPROVED) == WorkflowState.READY
    assert workflow_target_for_decision(VerificationDecision.REJECTED) == WorkflowState.FILLING
    assert workflow_target_for_decision(VerificationDecision.RETURNED_FOR_REWORK) == WorkflowState.FILLING
