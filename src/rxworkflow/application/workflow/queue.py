"""
Workflow queue engine: summaries, ordering, filtering, SLA colors and
transitions for workflow items.

All functions are pure and return new items; inputs are never mutated.
"""

import logging
import math
import statistics
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from ...core.utils.datetime_utils import ensure_aware, minutes_between, resolve_now
from ...domain.entities.workflow_item import WorkflowItem, WorkflowStateChange
from ...domain.enums.workflow import QueueColor, WorkflowPriority, WorkflowState
from .state_machine import PRIORITY_ORDER, is_terminal_state
from .transition_validator import create_state_change, validate_state_transition

logger = logging.getLogger("rxworkflow")

BASE_PROMISE_MINUTES: Dict[WorkflowPriority, int] = {
    WorkflowPriority.STAT: 15,
    WorkflowPriority.URGENT: 30,
    WorkflowPriority.NORMAL: 60,
    WorkflowPriority.LOW: 120,
}

# Work remaining from each state; unlisted states use 1.0.
STATE_PROMISE_FACTORS: Dict[WorkflowState, float] = {
    WorkflowState.INTAKE: 1.5,
    WorkflowState.DATA_ENTRY: 1.3,
    WorkflowState.DATA_ENTRY_COMPLETE: 1.2,
    WorkflowState.INSURANCE_PENDING: 1.1,
    WorkflowState.FILLING: 1.0,
    WorkflowState.VERIFICATION: 0.5,
}


@dataclass(frozen=True)
class QueueThresholds:
    """Minutes before promise time at which an item turns yellow / red."""

    yellow: int = 15
    red: int = 0


@dataclass(frozen=True)
class WorkflowQueueSummary:
    intake: int = 0
    data_entry: int = 0
    data_entry_complete: int = 0
    insurance_pending: int = 0
    insurance_rejected: int = 0
    dur_review: int = 0
    prior_auth_pending: int = 0
    prior_auth_approved: int = 0
    filling: int = 0
    verification: int = 0
    ready: int = 0
    total: int = 0
    stat_count: int = 0
    urgent_count: int = 0
    overdue_count: int = 0
    on_hold_count: int = 0

    def count_for(self, state: WorkflowState) -> int:
        return getattr(self, state.value.lower(), 0)


@dataclass(frozen=True)
class WorkflowItemFilter:
    """Worklist filter; ``None`` fields do not filter."""

    states: Optional[FrozenSet[WorkflowState]] = None
    priorities: Optional[FrozenSet[WorkflowPriority]] = None
    assigned_to_id: Optional[str] = None
    is_controlled: Optional[bool] = None
    is_on_hold: Optional[bool] = None
    has_insurance_issue: Optional[bool] = None
    overdue_only: bool = False


@dataclass(frozen=True)
class TransitionResult:
    success: bool
    item: WorkflowItem
    state_change: Optional[WorkflowStateChange] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class WaitTimeStats:
    """Minutes since creation for the active items."""

    count: int
    average_minutes: float
    median_minutes: float
    max_minutes: float
    min_minutes: float


def is_overdue(item: WorkflowItem, now: Optional[datetime] = None) -> bool:
    """Promise time has passed and the item is still in flight."""
    if item.promise_time is None or is_terminal_state(item.state):
        return False
    return ensure_aware(item.promise_time) < resolve_now(now)


def calculate_queue_summary(
    items: Iterable[WorkflowItem], now: Optional[datetime] = None
) -> WorkflowQueueSummary:
    """Single pass over the items producing the worklist counters."""
    now = resolve_now(now)
    counts: Dict[str, int] = {}
    total = stat_count = urgent_count = overdue_count = on_hold_count = 0

    for item in items:
        if not is_terminal_state(item.state):
            total += 1
            if item.state != WorkflowState.RETURNED_TO_STOCK:
                key = item.state.value.lower()
                counts[key] = counts.get(key, 0) + 1

        if item.priority == WorkflowPriority.STAT:
            stat_count += 1
        elif item.priority == WorkflowPriority.URGENT:
            urgent_count += 1

        if is_overdue(item, now):
            overdue_count += 1
        if item.is_on_hold:
            on_hold_count += 1

    return WorkflowQueueSummary(
        total=total,
        stat_count=stat_count,
        urgent_count=urgent_count,
        overdue_count=overdue_count,
        on_hold_count=on_hold_count,
        **counts,
    )


def _sort_key(item: WorkflowItem):
    promise = item.promise_time
    return (
        PRIORITY_ORDER[item.priority],
        promise is None,
        ensure_aware(promise) if promise is not None else datetime.min,
        ensure_aware(item.created_at),
    )


def sort_workflow_items(items: Iterable[WorkflowItem]) -> List[WorkflowItem]:
    """Priority first, then earliest promise time (none last), then oldest."""
    return sorted(items, key=_sort_key)


def filter_by_state(items: Iterable[WorkflowItem], states: Iterable[WorkflowState]) -> List[WorkflowItem]:
    wanted = frozenset(states)
    return [item for item in items if item.state in wanted]


def filter_by_assignee(items: Iterable[WorkflowItem], user_id: str) -> List[WorkflowItem]:
    return [item for item in items if item.assigned_to_id == user_id]


def filter_workflow_items(
    items: Iterable[WorkflowItem],
    criteria: WorkflowItemFilter,
    now: Optional[datetime] = None,
) -> List[WorkflowItem]:
    """Apply every set criterion of a worklist filter."""
    now = resolve_now(now)
    result = []
    for item in items:
        if criteria.states is not None and item.state not in criteria.states:
            continue
        if criteria.priorities is not None and item.priority not in criteria.priorities:
            continue
        if criteria.assigned_to_id is not None and item.assigned_to_id != criteria.assigned_to_id:
            continue
        if criteria.is_controlled is not None and item.is_controlled != criteria.is_controlled:
            continue
        if criteria.is_on_hold is not None and item.is_on_hold != criteria.is_on_hold:
            continue
        if (
            criteria.has_insurance_issue is not None
            and item.has_insurance_issue != criteria.has_insurance_issue
        ):
            continue
        if criteria.overdue_only and not is_overdue(item, now):
            continue
        result.append(item)
    return result


def get_queue_color(
    item: WorkflowItem,
    thresholds: QueueThresholds = QueueThresholds(),
    now: Optional[datetime] = None,
) -> QueueColor:
    """SLA color from minutes remaining until the promise time."""
    if item.promise_time is None:
        return QueueColor.GREEN
    remaining = minutes_between(resolve_now(now), item.promise_time)
    if remaining < thresholds.red:
        return QueueColor.RED
    if remaining <= thresholds.yellow:
        return QueueColor.YELLOW
    return QueueColor.GREEN


def calculate_promise_time(
    priority: WorkflowPriority,
    state: WorkflowState,
    from_time: Optional[datetime] = None,
    base_minutes: Optional[Mapping[WorkflowPriority, int]] = None,
) -> datetime:
    """Promise time from priority SLA scaled by the work left in ``state``."""
    base = (base_minutes or BASE_PROMISE_MINUTES)[priority]
    factor = STATE_PROMISE_FACTORS.get(state, 1.0)
    minutes = math.floor(base * factor + 0.5)
    return resolve_now(from_time) + timedelta(minutes=minutes)


def transition_state(
    item: WorkflowItem,
    to_state: WorkflowState,
    actor_id: str,
    actor_name: str,
    reason: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """Move an item to ``to_state`` if the graph allows it.

    Only the structural rule is checked here; callers apply role and clinical
    guards through the validator before calling. A failed transition returns
    the original item with an error.
    """
    validation = validate_state_transition(item.state, to_state)
    if not validation.success:
        logger.debug("Transition rejected for %s: %s", item.id, validation.error)
        return TransitionResult(success=False, item=item, error=validation.error)

    now = resolve_now(now)
    state_change = create_state_change(
        prescription_id=item.prescription_id,
        from_state=item.state,
        to_state=to_state,
        actor_id=actor_id,
        actor_name=actor_name,
        reason=reason,
        notes=notes,
        now=now,
    )
    updated = item.with_changes(
        state=to_state,
        state_history=item.state_history + (state_change,),
        is_on_hold=False,
        hold_reason=None,
        updated_at=now,
    )
    return TransitionResult(success=True, item=updated, state_change=state_change)


def place_on_hold(item: WorkflowItem, reason: str, now: Optional[datetime] = None) -> WorkflowItem:
    """Flag an item as on hold. The state does not change."""
    if not reason or not reason.strip():
        raise ValueError("Hold reason is required")
    if is_terminal_state(item.state):
        raise ValueError(f"Cannot hold item in terminal state {item.state.value}")
    return item.with_changes(
        is_on_hold=True,
        hold_reason=reason.strip(),
        updated_at=resolve_now(now),
    )


def release_hold(item: WorkflowItem, now: Optional[datetime] = None) -> WorkflowItem:
    if not item.is_on_hold:
        return item
    return item.with_changes(
        is_on_hold=False,
        hold_reason=None,
        updated_at=resolve_now(now),
    )


def assign_item(
    item: WorkflowItem,
    user_id: Optional[str],
    user_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> WorkflowItem:
    """Assign to a staff member; ``user_id=None`` unassigns."""
    return item.with_changes(
        assigned_to_id=user_id,
        assigned_to_name=user_name if user_id else None,
        updated_at=resolve_now(now),
    )


def calculate_wait_time_stats(
    items: Sequence[WorkflowItem], now: Optional[datetime] = None
) -> WaitTimeStats:
    now = resolve_now(now)
    waits = [
        minutes_between(item.created_at, now) for item in items if not is_terminal_state(item.state)
    ]
    if not waits:
        return WaitTimeStats(count=0, average_minutes=0.0, median_minutes=0.0, max_minutes=0.0, min_minutes=0.0)
    return WaitTimeStats(
        count=len(waits),
        average_minutes=sum(waits) / len(waits),
        median_minutes=float(statistics.median(waits)),
        max_minutes=max(waits),
        min_minutes=min(waits),
    )
