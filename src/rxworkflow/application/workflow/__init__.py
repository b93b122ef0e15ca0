"""
Prescription workflow: state machine, transition validation and queue engine.
"""

from .queue import (
    QueueThresholds,
    TransitionResult,
    WaitTimeStats,
    WorkflowItemFilter,
    WorkflowQueueSummary,
    assign_item,
    calculate_promise_time,
    calculate_queue_summary,
    calculate_wait_time_stats,
    filter_by_assignee,
    filter_by_state,
    filter_workflow_items,
    get_queue_color,
    is_overdue,
    place_on_hold,
    release_hold,
    sort_workflow_items,
    transition_state,
)
from .state_machine import (
    PHARMACIST_REQUIRED_STATES,
    PRIORITY_DISPLAY,
    PRIORITY_ORDER,
    TECH_ACCESSIBLE_STATES,
    TERMINAL_STATES,
    VALID_STATE_TRANSITIONS,
    WORKFLOW_STATE_DISPLAY,
    get_expected_next_state,
    get_valid_next_states,
    is_terminal_state,
    is_tech_accessible,
    is_valid_transition,
    requires_pharmacist,
)
from .transition_validator import (
    StateTransitionResult,
    TransitionGuards,
    build_guards,
    create_state_change,
    validate_state_transition,
)

__all__ = [
    "QueueThresholds",
    "TransitionResult",
    "WaitTimeStats",
    "WorkflowItemFilter",
    "WorkflowQueueSummary",
    "assign_item",
    "calculate_promise_time",
    "calculate_queue_summary",
    "calculate_wait_time_stats",
    "filter_by_assignee",
    "filter_by_state",
    "filter_workflow_items",
    "get_queue_color",
    "is_overdue",
    "place_on_hold",
    "release_hold",
    "sort_workflow_items",
    "transition_state",
    "PHARMACIST_REQUIRED_STATES",
    "PRIORITY_DISPLAY",
    "PRIORITY_ORDER",
    "TECH_ACCESSIBLE_STATES",
    "TERMINAL_STATES",
    "VALID_STATE_TRANSITIONS",
    "WORKFLOW_STATE_DISPLAY",
    "get_expected_next_state",
    "get_valid_next_states",
    "is_terminal_state",
    "is_tech_accessible",
    "is_valid_transition",
    "requires_pharmacist",
    "StateTransitionResult",
    "TransitionGuards",
    "build_guards",
    "create_state_change",
    "validate_state_transition",
]
