"""
Will-call bin lifecycle: placement, aging, reminders and return to stock.

Classification here is pure. Reversing claims and messaging patients are
done by the caller with the bins this module selects.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ...core.utils.datetime_utils import add_days, days_between, ensure_aware, resolve_now
from ...core.utils.string_utils import generate_prefixed_id
from ...domain.entities.pickup import PickupPrescription
from ...domain.entities.will_call import WillCallBin
from ...domain.errors import WillCallAlreadyReversedError

DEFAULT_RETURN_DAYS = 10
DEFAULT_REMINDER_DAYS_BEFORE = 3


@dataclass(frozen=True)
class WillCallExpirationResult:
    to_reverse: Tuple[WillCallBin, ...] = ()
    to_notify: Tuple[WillCallBin, ...] = ()


def calculate_return_date(placed_at: datetime, return_days: int = DEFAULT_RETURN_DAYS) -> datetime:
    return add_days(ensure_aware(placed_at), return_days)


def create_will_call_bin(
    prescription: PickupPrescription,
    patient_id: str,
    patient_name: str,
    bin_location: str,
    organization_id: Optional[str] = None,
    organization_name: Optional[str] = None,
    group_code: Optional[str] = None,
    return_days: int = DEFAULT_RETURN_DAYS,
    now: Optional[datetime] = None,
) -> WillCallBin:
    """Place a filled prescription in a bin."""
    if return_days <= 0:
        raise ValueError("return_days must be positive")
    now = resolve_now(now)
    return WillCallBin(
        bin_id=generate_prefixed_id("WC"),
        bin_location=bin_location,
        prescription_id=prescription.prescription_id,
        rx_number=prescription.rx_number,
        patient_id=patient_id,
        patient_name=patient_name,
        drug_name=prescription.drug_name,
        quantity=prescription.quantity,
        placed_at=now,
        return_to_stock_date=calculate_return_date(now, return_days),
        days_in_bin=0,
        days_until_return=return_days,
        organization_id=organization_id,
        organization_name=organization_name,
        group_code=group_code,
        is_refrigerated=prescription.is_refrigerated,
        is_controlled=prescription.is_controlled,
    )


def update_will_call_days(bin: WillCallBin, now: Optional[datetime] = None) -> WillCallBin:
    """Recompute the derived day counters from the stored timestamps."""
    now = resolve_now(now)
    days_in_bin = math.floor(days_between(bin.placed_at, now))
    days_until_return = max(0, math.ceil(days_between(now, bin.return_to_stock_date)))
    if days_in_bin == bin.days_in_bin and days_until_return == bin.days_until_return:
        return bin
    return bin.with_changes(days_in_bin=days_in_bin, days_until_return=days_until_return)


def process_will_call_expiration(
    bins: Iterable[WillCallBin],
    send_reminders: bool = False,
    reminder_days_before: int = DEFAULT_REMINDER_DAYS_BEFORE,
    reminder_catch_up: bool = False,
    now: Optional[datetime] = None,
) -> WillCallExpirationResult:
    """Pick the bins due for claim reversal and the ones due for a reminder.

    A bin is due for reversal once no days remain and it has not been
    reversed. Picked-up bins are ignored. A reminder is due on the day exactly ``reminder_days_before``
    days remain; with ``reminder_catch_up`` any bin inside that window that
    never got one is included, so a missed sweep day does not skip it.
    """
    now = resolve_now(now)
    to_reverse = []
    to_notify = []

    for bin in bins:
        if bin.picked_up_at is not None:
            continue
        current = update_will_call_days(bin, now)

        if current.days_until_return == 0 and not current.insurance_reversed:
            to_reverse.append(current)

        if send_reminders and not current.pickup_reminder_sent and not current.insurance_reversed:
            if reminder_catch_up:
                due = 0 < current.days_until_return <= reminder_days_before
            else:
                due = current.days_until_return == reminder_days_before
            if due:
                to_notify.append(current)

    return WillCallExpirationResult(to_reverse=tuple(to_reverse), to_notify=tuple(to_notify))


def mark_will_call_reversed(
    bin: WillCallBin,
    user_id: str,
    transaction_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> WillCallBin:
    """Record the claim reversal. A bin is reversed at most once."""
    if bin.insurance_reversed:
        raise WillCallAlreadyReversedError(bin.bin_id)
    return bin.with_changes(
        insurance_reversed=True,
        reversed_at=resolve_now(now),
        reversed_by=user_id,
        reversal_transaction_id=transaction_id,
    )


def mark_will_call_picked_up(
    bin: WillCallBin,
    user_id: str,
    now: Optional[datetime] = None,
) -> WillCallBin:
    """Retire a bin whose prescription left the counter with the patient."""
    if bin.insurance_reversed:
        raise WillCallAlreadyReversedError(bin.bin_id)
    if bin.picked_up_at is not None:
        return bin
    return bin.with_changes(picked_up_at=resolve_now(now), picked_up_by=user_id)


def mark_returned_to_stock(bin: WillCallBin, now: Optional[datetime] = None) -> WillCallBin:
    return bin.with_changes(returned_to_stock_at=resolve_now(now))


def mark_reminder_sent(bin: WillCallBin, now: Optional[datetime] = None) -> WillCallBin:
    return bin.with_changes(
        pickup_reminder_sent=True,
        reminder_sent_at=resolve_now(now),
        reminder_count=bin.reminder_count + 1,
    )


def get_ready_for_return(bins: Iterable[WillCallBin], now: Optional[datetime] = None) -> List[WillCallBin]:
    now = resolve_now(now)
    return [
        bin
        for bin in bins
        if ensure_aware(bin.return_to_stock_date) <= now and bin.is_active
    ]


def get_expiring_soon(
    bins: Iterable[WillCallBin],
    days_threshold: int = DEFAULT_REMINDER_DAYS_BEFORE,
    now: Optional[datetime] = None,
) -> List[WillCallBin]:
    """Bins with 1..``days_threshold`` days left and no reversal yet."""
    now = resolve_now(now)
    refreshed = (update_will_call_days(bin, now) for bin in bins)
    return [
        bin
        for bin in refreshed
        if 0 < bin.days_until_return <= days_threshold and bin.is_active
    ]
