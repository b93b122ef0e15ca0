"""
Will-call bin lifecycle.
"""

from .bins import (
    DEFAULT_REMINDER_DAYS_BEFORE,
    DEFAULT_RETURN_DAYS,
    WillCallExpirationResult,
    calculate_return_date,
    create_will_call_bin,
    get_expiring_soon,
    get_ready_for_return,
    mark_reminder_sent,
    mark_returned_to_stock,
    mark_will_call_picked_up,
    mark_will_call_reversed,
    process_will_call_expiration,
    update_will_call_days,
)

__all__ = [
    "DEFAULT_REMINDER_DAYS_BEFORE",
    "DEFAULT_RETURN_DAYS",
    "WillCallExpirationResult",
    "calculate_return_date",
    "create_will_call_bin",
    "get_expiring_soon",
    "get_ready_for_return",
    "mark_reminder_sent",
    "mark_returned_to_stock",
    "mark_will_call_picked_up",
    "mark_will_call_reversed",
    "process_will_call_expiration",
    "update_will_call_days",
]
