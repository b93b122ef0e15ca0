"""
Guarded transition validation tests.
"""

from rxworkflow.application.workflow.transition_validator import (
    TransitionGuards,
    build_guards,
    create_state_change,
    validate_state_transition,
)
from rxworkflow.domain.enums.verification import DurSeverity
from rxworkflow.domain.enums.workflow import WorkflowState

from factories import NOW, make_alert

S = WorkflowState
PHARMACIST = TransitionGuards(is_pharmacist=True)


def test_structural_rejection_message():
    result = validate_state_transition(S.INTAKE, S.READY, PHARMACIST)
    assert not result.success
    assert result.error == "Invalid transition from INTAKE to READY"
    assert result.from_state == S.INTAKE
    assert result.to_state == S.READY


def test_technician_cannot_enter_pharmacist_states():
    result = validate_state_transition(S.FILLING, S.VERIFICATION)
    assert not result.success
    assert result.error == "State VERIFICATION requires pharmacist access"

    assert validate_state_transition(S.FILLING, S.VERIFICATION, PHARMACIST).success


def test_unresolved_dur_blocks_filling():
    guards = TransitionGuards(is_pharmacist=True, has_unresolved_dur=True)
    result = validate_state_transition(S.DUR_REVIEW, S.FILLING, guards)
    assert result.error == "Cannot proceed to filling with unresolved DUR alerts"


def test_insurance_reject_blocks_filling_except_from_override_sources():
    guards = TransitionGuards(has_insurance_reject=True)
    blocked = validate_state_transition(S.INSURANCE_PENDING, S.FILLING, guards)
    assert blocked.error == "Cannot proceed to filling with unresolved insurance rejection"

    assert validate_state_transition(S.DUR_REVIEW, S.FILLING, guards).success
    assert validate_state_transition(S.PRIOR_AUTH_APPROVED, S.FILLING, guards).success


def test_structural_check_wins_over_role_check():
    result = validate_state_transition(S.INTAKE, S.VERIFICATION)
    assert result.error == "Invalid transition from INTAKE to VERIFICATION"


def test_build_guards_only_counts_unresolved_high_alerts():
    alerts = [make_alert("A1", DurSeverity.HIGH), make_alert("A2", DurSeverity.MODERATE)]
    assert build_guards(True, alerts).has_unresolved_dur
    assert not build_guards(True, alerts, dur_overrides=["A1"]).has_unresolved_dur
    assert not build_guards(False, [make_alert("A3", DurSeverity.HIGH, is_overridden=True)]).has_unresolved_dur


def test_build_guards_carries_role_and_insurance():
    guards = build_guards(is_pharmacist=False, insurance_rejected=True)
    assert guards == TransitionGuards(is_pharmacist=False, has_unresolved_dur=False, has_insurance_reject=True)


def test_create_state_change_records_actor_and_time():
    change = create_state_change("RX-1", S.INTAKE, S.DATA_ENTRY, "TECH-1", "Tom Tech", reason="Typed", now=NOW)
    assert change.id.startswith("SC-")
    assert change.prescription_id == "RX-1"
    assert change.from_state == S.INTAKE
    assert change.to_state == S.DATA_ENTRY
    assert change.changed_by_id == "TECH-1"
    assert change.changed_by_name == "Tom Tech"
    assert change.changed_at == NOW
    assert change.reason == "Typed"
