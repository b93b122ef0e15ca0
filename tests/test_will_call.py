"""
Will-call bin lifecycle tests.
"""

from datetime import timedelta

import pytest

from rxworkflow.application.will_call.bins import (
    calculate_return_date,
    get_expiring_soon,
    get_ready_for_return,
    mark_reminder_sent,
    mark_returned_to_stock,
    mark_will_call_picked_up,
    mark_will_call_reversed,
    process_will_call_expiration,
    update_will_call_days,
)
from rxworkflow.domain.errors import WillCallAlreadyReversedError

from factories import NOW, make_bin, make_prescription


def test_new_bin():
    bin = make_bin()
    assert bin.bin_id.startswith("WC-")
    assert bin.return_to_stock_date == NOW + timedelta(days=10)
    assert bin.days_until_return == 10
    assert bin.days_in_bin == 0
    assert calculate_return_date(NOW, 14) == NOW + timedelta(days=14)


def test_return_days_must_be_positive():
    from rxworkflow.application.will_call.bins import create_will_call_bin

    with pytest.raises(ValueError):
        create_will_call_bin(make_prescription(), "PAT-1", "Jane Smith", "A-1", return_days=0)


def test_day_counters():
    bin = update_will_call_days(make_bin(), now=NOW + timedelta(days=3, hours=6))
    assert bin.days_in_bin == 3
    assert bin.days_until_return == 7  # 6.75 days left rounds up

    overdue = update_will_call_days(make_bin(), now=NOW + timedelta(days=12))
    assert overdue.days_until_return == 0


def test_unchanged_counters_return_same_bin():
    bin = make_bin()
    assert update_will_call_days(bin, now=NOW) is bin


def test_expired_bins_are_selected_for_reversal():
    due = make_bin(placed_at=NOW - timedelta(days=10), prescription_id="RX-1")
    fresh = make_bin(placed_at=NOW - timedelta(days=2), prescription_id="RX-2")
    done = mark_will_call_reversed(make_bin(placed_at=NOW - timedelta(days=20), prescription_id="RX-3"), "SYS", now=NOW)

    result = process_will_call_expiration([due, fresh, done], now=NOW)
    assert [bin.prescription_id for bin in result.to_reverse] == ["RX-1"]
    assert result.to_reverse[0].days_until_return == 0
    assert result.to_notify == ()


def test_reminders_on_the_exact_day():
    on_day = make_bin(placed_at=NOW - timedelta(days=7), prescription_id="RX-1")
    inside = make_bin(placed_at=NOW - timedelta(days=8), prescription_id="RX-2")
    already = mark_reminder_sent(make_bin(placed_at=NOW - timedelta(days=7), prescription_id="RX-3"), NOW)

    result = process_will_call_expiration([on_day, inside, already], send_reminders=True, now=NOW)
    assert [bin.prescription_id for bin in result.to_notify] == ["RX-1"]

    caught_up = process_will_call_expiration(
        [on_day, inside, already], send_reminders=True, reminder_catch_up=True, now=NOW
    )
    assert [bin.prescription_id for bin in caught_up.to_notify] == ["RX-1", "RX-2"]


def test_reminders_off_by_default():
    on_day = make_bin(placed_at=NOW - timedelta(days=7))
    assert process_will_call_expiration([on_day], now=NOW).to_notify == ()


def test_reversal_happens_once():
    reversed_bin = mark_will_call_reversed(make_bin(), "TECH-1", transaction_id="TX-9", now=NOW)
    assert reversed_bin.insurance_reversed
    assert reversed_bin.reversed_by == "TECH-1"
    assert reversed_bin.reversal_transaction_id == "TX-9"
    assert reversed_bin.reversed_at == NOW
    with pytest.raises(WillCallAlreadyReversedError):
        mark_will_call_reversed(reversed_bin, "TECH-2")


def test_reminder_counter():
    bin = mark_reminder_sent(mark_reminder_sent(make_bin(), NOW), NOW)
    assert bin.pickup_reminder_sent
    assert bin.reminder_count == 2
    assert bin.reminder_sent_at == NOW


def test_ready_for_return_and_expiring_soon():
    due = make_bin(placed_at=NOW - timedelta(days=11), prescription_id="RX-1")
    soon = make_bin(placed_at=NOW - timedelta(days=8), prescription_id="RX-2")
    later = make_bin(placed_at=NOW, prescription_id="RX-3")
    bins = [due, soon, later]

    assert [b.prescription_id for b in get_ready_for_return(bins, now=NOW)] == ["RX-1"]
    assert [b.prescription_id for b in get_expiring_soon(bins, now=NOW)] == ["RX-2"]


def test_picked_up_bin_leaves_the_active_set():
    bin = mark_will_call_picked_up(make_bin(), "TECH-1", now=NOW)
    assert bin.picked_up_at == NOW
    assert bin.picked_up_by == "TECH-1"
    assert not bin.is_active
    assert mark_will_call_picked_up(bin, "TECH-2", now=NOW + timedelta(hours=1)) is bin

    later = NOW + timedelta(days=10)
    result = process_will_call_expiration([bin], send_reminders=True, reminder_catch_up=True, now=later)
    assert result.to_reverse == ()
    assert result.to_notify == ()
    assert get_ready_for_return([bin], now=later) == []


def test_reversed_bin_cannot_be_picked_up():
    reversed_bin = mark_will_call_reversed(make_bin(), "SWEEPER", now=NOW)
    with pytest.raises(WillCallAlreadyReversedError):
        mark_will_call_picked_up(reversed_bin, "TECH-1", now=NOW)


def test_return_to_stock_is_stamped():
    bin = mark_returned_to_stock(mark_will_call_reversed(make_bin(), "SWEEPER", now=NOW), now=NOW)
    assert bin.returned_to_stock_at == NOW
