"""
Workflow state graph tests.
"""

import pytest

from rxworkflow.application.workflow.state_machine import (
    PHARMACIST_REQUIRED_STATES,
    PRIORITY_DISPLAY,
    TERMINAL_STATES,
    VALID_STATE_TRANSITIONS,
    WORKFLOW_STATE_DISPLAY,
    get_expected_next_state,
    get_valid_next_states,
    is_tech_accessible,
    is_terminal_state,
    is_valid_transition,
    requires_pharmacist,
)
from rxworkflow.domain.enums.workflow import WorkflowPriority, WorkflowState

S = WorkflowState


def test_every_state_has_a_transition_entry_and_display_name():
    for state in WorkflowState:
        assert state in VALID_STATE_TRANSITIONS
        assert WORKFLOW_STATE_DISPLAY[state]
    for priority in WorkflowPriority:
        assert PRIORITY_DISPLAY[priority]


@pytest.mark.parametrize("state", [S.SOLD, S.DELIVERED, S.CANCELLED])
def test_terminal_states_have_no_outgoing_edges(state):
    assert is_terminal_state(state)
    assert get_valid_next_states(state) == []


def test_returned_to_stock_is_not_terminal_and_reenters_data_entry():
    assert not is_terminal_state(S.RETURNED_TO_STOCK)
    assert get_valid_next_states(S.RETURNED_TO_STOCK) == [S.DATA_ENTRY]


def test_happy_path_edges_are_valid():
    path = [S.INTAKE, S.DATA_ENTRY, S.DATA_ENTRY_COMPLETE, S.INSURANCE_PENDING, S.FILLING, S.VERIFICATION, S.READY, S.SOLD]
    for current, target in zip(path, path[1:]):
        assert is_valid_transition(current, target), f"{current} -> {target}"


def test_skipping_verification_is_not_allowed():
    assert not is_valid_transition(S.FILLING, S.READY)
    assert not is_valid_transition(S.INTAKE, S.FILLING)


def test_ready_cannot_be_cancelled():
    assert not is_valid_transition(S.READY, S.CANCELLED)


def test_valid_next_states_returns_a_fresh_list():
    first = get_valid_next_states(S.INTAKE)
    first.append(S.SOLD)
    assert get_valid_next_states(S.INTAKE) == [S.DATA_ENTRY, S.CANCELLED]


def test_pharmacist_and_tech_access():
    assert PHARMACIST_REQUIRED_STATES == {S.DUR_REVIEW, S.VERIFICATION}
    assert requires_pharmacist(S.VERIFICATION)
    assert not requires_pharmacist(S.FILLING)
    assert is_tech_accessible(S.FILLING)
    assert not is_tech_accessible(S.DUR_REVIEW)
    for state in TERMINAL_STATES:
        assert not is_tech_accessible(state)


def test_display_names():
    assert WORKFLOW_STATE_DISPLAY[S.READY] == "Ready for Pickup"
    assert PRIORITY_DISPLAY[WorkflowPriority.LOW] == "Low Priority"


class TestExpectedNextState:
    def test_cash_prescription_skips_adjudication(self):
        assert get_expected_next_state(S.DATA_ENTRY_COMPLETE) == S.FILLING
        assert get_expected_next_state(S.DATA_ENTRY_COMPLETE, has_dur_alerts=True) == S.DUR_REVIEW

    def test_insured_prescription_goes_to_insurance(self):
        assert get_expected_next_state(S.DATA_ENTRY_COMPLETE, has_insurance=True) == S.INSURANCE_PENDING

    def test_insurance_outcomes(self):
        assert get_expected_next_state(S.INSURANCE_PENDING, needs_prior_auth=True) == S.PRIOR_AUTH_PENDING
        assert get_expected_next_state(S.INSURANCE_PENDING, insurance_approved=False) == S.INSURANCE_REJECTED
        assert get_expected_next_state(S.INSURANCE_PENDING, insurance_approved=True) == S.FILLING
        assert get_expected_next_state(S.INSURANCE_PENDING, has_dur_alerts=True) == S.DUR_REVIEW

    def test_terminal_states_have_no_suggestion(self):
        assert get_expected_next_state(S.SOLD) is None
        assert get_expected_next_state(S.CANCELLED) is None

    def test_suggestions_are_always_valid_edges(self):
        for state in WorkflowState:
            suggestion = get_expected_next_state(state, has_insurance=True)
            if suggestion is not None:
                assert is_valid_transition(state, suggestion)
