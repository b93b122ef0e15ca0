"""
Workflow queue engine tests.
"""

from datetime import timedelta

import pytest

from rxworkflow.application.workflow.queue import (
    QueueThresholds,
    WorkflowItemFilter,
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
from rxworkflow.domain.enums.workflow import QueueColor, WorkflowPriority, WorkflowState

from factories import NOW, make_item

S = WorkflowState
P = WorkflowPriority


class TestTransitionState:
    def test_success_appends_history_and_keeps_state_in_sync(self):
        item = make_item(S.INTAKE)
        result = transition_state(item, S.DATA_ENTRY, "TECH-1", "Tom Tech", reason="Start typing", now=NOW)

        assert result.success
        assert result.item.state == S.DATA_ENTRY
        assert result.item.transition_count == 1
        assert result.item.state_history[-1] == result.state_change
        assert result.item.current_state_from_history() == S.DATA_ENTRY
        assert result.item.updated_at == NOW

    def test_original_item_is_untouched(self):
        item = make_item(S.INTAKE)
        transition_state(item, S.DATA_ENTRY, "TECH-1", "Tom Tech", now=NOW)
        assert item.state == S.INTAKE
        assert item.state_history == ()

    def test_version_is_left_to_the_repository(self):
        item = make_item(S.INTAKE)
        result = transition_state(item, S.DATA_ENTRY, "TECH-1", "Tom Tech", now=NOW)
        assert result.item.version == item.version

    def test_invalid_transition_returns_error_without_raising(self):
        item = make_item(S.INTAKE)
        result = transition_state(item, S.SOLD, "TECH-1", "Tom Tech", now=NOW)
        assert not result.success
        assert result.item is item
        assert result.state_change is None
        assert result.error == "Invalid transition from INTAKE to SOLD"

    def test_transition_clears_hold(self):
        item = place_on_hold(make_item(S.DATA_ENTRY), "Waiting on prescriber", now=NOW)
        result = transition_state(item, S.DATA_ENTRY_COMPLETE, "TECH-1", "Tom Tech", now=NOW)
        assert not result.item.is_on_hold
        assert result.item.hold_reason is None

    def test_history_folds_to_current_state(self):
        item = make_item(S.INTAKE)
        for target in (S.DATA_ENTRY, S.DATA_ENTRY_COMPLETE, S.FILLING):
            item = transition_state(item, target, "TECH-1", "Tom Tech", now=NOW).item
        assert item.transition_count == 3
        assert item.current_state_from_history() == item.state == S.FILLING


class TestQueueSummary:
    def test_counts(self):
        items = [
            make_item(S.INTAKE, P.STAT),
            make_item(S.FILLING, P.URGENT, promise_time=NOW - timedelta(minutes=5)),
            make_item(S.FILLING).with_changes(is_on_hold=True, hold_reason="OOS"),
            make_item(S.SOLD, P.STAT, promise_time=NOW - timedelta(hours=1)),
            make_item(S.RETURNED_TO_STOCK),
        ]
        summary = calculate_queue_summary(items, now=NOW)

        assert summary.total == 4
        assert summary.intake == 1
        assert summary.filling == 2
        assert summary.count_for(S.FILLING) == 2
        assert summary.stat_count == 2
        assert summary.urgent_count == 1
        assert summary.overdue_count == 1
        assert summary.on_hold_count == 1

    def test_empty_queue(self):
        summary = calculate_queue_summary([], now=NOW)
        assert summary.total == 0
        assert summary.overdue_count == 0


def test_is_overdue_ignores_terminal_and_missing_promise():
    assert is_overdue(make_item(S.FILLING, promise_time=NOW - timedelta(minutes=1)), now=NOW)
    assert not is_overdue(make_item(S.FILLING, promise_time=NOW), now=NOW)
    assert not is_overdue(make_item(S.DELIVERED, promise_time=NOW - timedelta(days=1)), now=NOW)
    assert not is_overdue(make_item(S.FILLING), now=NOW)


def test_sort_orders_by_priority_then_promise_then_age():
    low = make_item(priority=P.LOW, id="low")
    normal_late = make_item(priority=P.NORMAL, promise_time=NOW + timedelta(hours=2), id="normal-late")
    normal_soon = make_item(priority=P.NORMAL, promise_time=NOW + timedelta(minutes=10), id="normal-soon")
    normal_none_old = make_item(priority=P.NORMAL, created_at=NOW - timedelta(hours=1), id="none-old")
    normal_none_new = make_item(priority=P.NORMAL, id="none-new")
    stat = make_item(priority=P.STAT, id="stat")

    items = [low, normal_none_new, normal_late, stat, normal_none_old, normal_soon]
    ordered = sort_workflow_items(items)

    assert [item.id for item in ordered] == ["stat", "normal-soon", "normal-late", "none-old", "none-new", "low"]
    assert [item.id for item in items][0] == "low"


@pytest.mark.parametrize(
    "priorities",
    [
        [P.LOW, P.STAT, P.NORMAL, P.URGENT],
        [P.NORMAL, P.NORMAL, P.STAT, P.NORMAL],
        [P.URGENT],
    ],
)
def test_sort_is_idempotent(priorities):
    items = [
        make_item(priority=priority, promise_time=NOW + timedelta(minutes=15 * index), id=f"item-{index}")
        for index, priority in enumerate(priorities)
    ]
    ordered = sort_workflow_items(items)
    assert sort_workflow_items(ordered) == ordered


@pytest.mark.parametrize("count", [2, 5])
def test_sort_is_stable_on_equal_keys(count):
    items = [make_item(priority=P.NORMAL, promise_time=NOW, id=f"twin-{index}") for index in range(count)]
    assert [item.id for item in sort_workflow_items(items)] == [item.id for item in items]
    assert [item.id for item in sort_workflow_items(list(reversed(items)))] == [
        item.id for item in reversed(items)
    ]


def test_filters():
    mine = assign_item(make_item(S.FILLING, id="a"), "TECH-1", "Tom Tech", now=NOW)
    other = make_item(S.DATA_ENTRY, id="b", is_controlled=True)
    items = [mine, other]

    assert filter_by_state(items, [S.FILLING]) == [mine]
    assert filter_by_assignee(items, "TECH-1") == [mine]
    assert filter_workflow_items(items, WorkflowItemFilter(is_controlled=True), now=NOW) == [other]
    assert filter_workflow_items(items, WorkflowItemFilter(), now=NOW) == items
    assert filter_workflow_items(items, WorkflowItemFilter(overdue_only=True), now=NOW) == []


@pytest.mark.parametrize(
    "minutes_left, expected",
    [
        (60, QueueColor.GREEN),
        (16, QueueColor.GREEN),
        (15, QueueColor.YELLOW),
        (0, QueueColor.YELLOW),
        (-1, QueueColor.RED),
    ],
)
def test_queue_color(minutes_left, expected):
    item = make_item(S.FILLING, promise_time=NOW + timedelta(minutes=minutes_left))
    assert get_queue_color(item, now=NOW) == expected


def test_queue_color_without_promise_is_green():
    assert get_queue_color(make_item(), QueueThresholds(yellow=30, red=5), now=NOW) == QueueColor.GREEN


@pytest.mark.parametrize(
    "priority, state, minutes",
    [
        (P.STAT, S.INTAKE, 23),  # 22.5 rounds half up
        (P.NORMAL, S.INTAKE, 90),
        (P.URGENT, S.DATA_ENTRY, 39),
        (P.LOW, S.VERIFICATION, 60),
        (P.NORMAL, S.READY, 60),
    ],
)
def test_calculate_promise_time(priority, state, minutes):
    assert calculate_promise_time(priority, state, from_time=NOW) == NOW + timedelta(minutes=minutes)


def test_calculate_promise_time_with_configured_base():
    promise = calculate_promise_time(P.NORMAL, S.FILLING, from_time=NOW, base_minutes={P.NORMAL: 45})
    assert promise == NOW + timedelta(minutes=45)


class TestHoldAndAssignment:
    def test_place_and_release_hold(self):
        held = place_on_hold(make_item(S.FILLING), "  Out of stock ", now=NOW)
        assert held.is_on_hold
        assert held.hold_reason == "Out of stock"
        assert held.state == S.FILLING

        released = release_hold(held, now=NOW)
        assert not released.is_on_hold
        assert released.hold_reason is None

    def test_hold_requires_reason(self):
        with pytest.raises(ValueError):
            place_on_hold(make_item(), "   ")

    def test_terminal_items_cannot_be_held(self):
        with pytest.raises(ValueError):
            place_on_hold(make_item(S.SOLD), "Too late")

    def test_unassign(self):
        assigned = assign_item(make_item(), "TECH-1", "Tom Tech", now=NOW)
        unassigned = assign_item(assigned, None, "ignored", now=NOW)
        assert unassigned.assigned_to_id is None
        assert unassigned.assigned_to_name is None


def test_wait_time_stats():
    items = [
        make_item(created_at=NOW - timedelta(minutes=10)),
        make_item(created_at=NOW - timedelta(minutes=20)),
        make_item(created_at=NOW - timedelta(minutes=60)),
        make_item(S.SOLD, created_at=NOW - timedelta(days=1)),
    ]
    stats = calculate_wait_time_stats(items, now=NOW)
    assert stats.count == 3
    assert stats.average_minutes == pytest.approx(30)
    assert stats.median_minutes == pytest.approx(20)
    assert stats.max_minutes == pytest.approx(60)
    assert stats.min_minutes == pytest.approx(10)


def test_wait_time_stats_empty():
    assert calculate_wait_time_stats([], now=NOW).count == 0
