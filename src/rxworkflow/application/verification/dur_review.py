"""
Drug utilization review (DUR) overrides and resolution status.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Union

from ...core.utils.datetime_utils import resolve_now
from ...domain.entities.verification import DurAlert, DurOverrideRecord
from ...domain.enums.verification import DurSeverity
from ...domain.errors import InvalidDurOverrideError

MIN_OVERRIDE_REASON_LENGTH = 10


@dataclass(frozen=True)
class DurOverrideCode:
    code: str
    description: str


# NCPDP professional service codes accepted as DUR overrides.
DUR_OVERRIDE_CODES: Dict[str, DurOverrideCode] = {
    "PRESCRIBER_CONSULTED": DurOverrideCode("M0", "Prescriber was consulted"),
    "PATIENT_CONSULTED": DurOverrideCode("P0", "Patient was consulted"),
    "PRESCRIBER_AUTHORIZED": DurOverrideCode("1A", "Filled as prescribed - prescriber aware of conflict"),
    "PRESCRIBER_APPROVAL": DurOverrideCode("2A", "Prescriber authorization obtained"),
    "THERAPY_UNCHANGED": DurOverrideCode("3A", "Drug therapy unchanged"),
    "PATIENT_MONITORING": DurOverrideCode("4A", "Patient will be monitored"),
    "CLINICAL_JUDGMENT": DurOverrideCode("5A", "Therapy is appropriate per clinical judgment"),
    "LITERATURE_SUPPORT": DurOverrideCode("6A", "Therapy is appropriate per literature"),
    "CONDITION_SPECIFIC": DurOverrideCode("7A", "Condition specific - therapy appropriate"),
    "OTHER": DurOverrideCode("99", "Other - see notes"),
}

_CODES_BY_VALUE = {entry.code: entry for entry in DUR_OVERRIDE_CODES.values()}


@dataclass(frozen=True)
class UnresolvedDurCount:
    high: int = 0
    moderate: int = 0
    low: int = 0


@dataclass(frozen=True)
class DurReviewStatus:
    all_resolved: bool
    can_proceed: bool
    unresolved_count: UnresolvedDurCount
    message: str


def resolve_override_code(code: str) -> Optional[DurOverrideCode]:
    """Look up an override by its NCPDP code (``"M0"``) or its name."""
    if code in _CODES_BY_VALUE:
        return _CODES_BY_VALUE[code]
    return DUR_OVERRIDE_CODES.get(code)


def create_dur_override(
    alert: DurAlert,
    code: str,
    reason: str,
    pharmacist_id: str,
    pharmacist_name: str,
    now: Optional[datetime] = None,
) -> DurOverrideRecord:
    """Record a pharmacist override of one alert."""
    override_code = resolve_override_code(code)
    if override_code is None:
        raise InvalidDurOverrideError(alert.id, f"unknown override code '{code}'")
    reason = (reason or "").strip()
    if len(reason) < MIN_OVERRIDE_REASON_LENGTH:
        raise InvalidDurOverrideError(
            alert.id, f"reason must be at least {MIN_OVERRIDE_REASON_LENGTH} characters"
        )
    return DurOverrideRecord(
        dur_alert_id=alert.id,
        alert_type=alert.alert_type,
        severity=alert.severity,
        alert_message=alert.message,
        override_code=override_code.code,
        override_reason=reason,
        overridden_at=resolve_now(now),
        pharmacist_id=pharmacist_id,
        pharmacist_name=pharmacist_name,
    )


def check_dur_alerts_resolved(
    alerts: Iterable[DurAlert],
    overrides: Iterable[Union[DurOverrideRecord, str]] = (),
) -> DurReviewStatus:
    """Summarize which alerts are still open.

    An alert is resolved when it is flagged overridden or an override names
    its id. Only unresolved high-severity alerts block filling.
    """
    overridden_ids = {
        override if isinstance(override, str) else override.dur_alert_id for override in overrides
    }
    unresolved = {severity: 0 for severity in DurSeverity}
    for alert in alerts:
        if alert.is_overridden or alert.id in overridden_ids:
            continue
        unresolved[alert.severity] += 1

    high = unresolved[DurSeverity.HIGH]
    moderate = unresolved[DurSeverity.MODERATE]
    low = unresolved[DurSeverity.LOW]

    if high:
        message = "High severity DUR alerts must be resolved before proceeding"
    elif moderate:
        message = "Moderate severity DUR alerts should be reviewed"
    else:
        message = "All DUR alerts resolved"

    return DurReviewStatus(
        all_resolved=not (high or moderate or low),
        can_proceed=not high,
        unresolved_count=UnresolvedDurCount(high=high, moderate=moderate, low=low),
        message=message,
    )
