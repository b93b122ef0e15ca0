"""
Pickup session lifecycle.

searching -> patient_selected -> [signature_required] -> [id_verification]
-> [counseling] -> prescriptions_scanned -> completed, with cancelled
reachable from any open status. Bracketed steps are skipped when not
required. Every operation returns a new session with an audit entry.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from ...core.utils.datetime_utils import ensure_aware, resolve_now
from ...core.utils.string_utils import generate_prefixed_id
from ...domain.entities.pickup import (
    PatientMatch,
    PickupAuditEntry,
    PickupPrescription,
    PickupSearch,
    PickupSession,
)
from ...domain.enums.pickup import (
    CounselingStatus,
    PaymentMethod,
    PickupSessionType,
    PickupStatus,
    SignatureReason,
)
from ...domain.errors import PickupSessionClosedError

logger = logging.getLogger("rxworkflow")

RESOLVED_COUNSELING_STATUSES = frozenset(
    {CounselingStatus.COMPLETED, CounselingStatus.DECLINED, CounselingStatus.WAIVED}
)

COUNSELING_OUTCOMES = frozenset(
    {
        CounselingStatus.ACCEPTED,
        CounselingStatus.DECLINED,
        CounselingStatus.COMPLETED,
        CounselingStatus.WAIVED,
    }
)


@dataclass(frozen=True)
class ScanResult:
    session: PickupSession
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class PickupCompletionResult:
    session: PickupSession
    success: bool
    errors: Tuple[str, ...] = ()


def generate_session_id() -> str:
    return generate_prefixed_id("PU")


def ensure_open(session: PickupSession) -> None:
    if session.is_closed:
        raise PickupSessionClosedError(session.id, session.status.value)


def with_audit(
    session: PickupSession,
    action: str,
    user_id: str,
    now: datetime,
    details: Optional[str] = None,
    prescription_id: Optional[str] = None,
    **changes,
) -> PickupSession:
    """Apply ``changes`` and append one audit entry."""
    entry = PickupAuditEntry(
        timestamp=now,
        action=action,
        user_id=user_id,
        details=details,
        prescription_id=prescription_id,
    )
    return session.with_changes(audit_trail=session.audit_trail + (entry,), **changes)


def next_gate_after_scan(session: PickupSession) -> PickupStatus:
    """First outstanding gate once every prescription is scanned."""
    if session.signature_required and session.signature is None:
        return PickupStatus.SIGNATURE_REQUIRED
    if session.id_verification_required and not (
        session.id_verification and session.id_verification.id_valid
    ):
        return PickupStatus.ID_VERIFICATION
    if session.counseling_required and session.counseling_status not in RESOLVED_COUNSELING_STATUSES:
        return PickupStatus.COUNSELING
    return PickupStatus.PRESCRIPTIONS_SCANNED


def create_pickup_session(
    session_type: PickupSessionType,
    search_criteria: PickupSearch,
    user_id: str,
    station_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PickupSession:
    now = resolve_now(now)
    session = PickupSession(
        id=generate_session_id(),
        session_type=session_type,
        search_criteria=search_criteria,
        started_at=now,
        started_by=user_id,
        station_id=station_id,
    )
    return with_audit(
        session,
        "session_started",
        user_id,
        now,
        details=f"Pickup session started ({session_type.value})",
    )


def record_matches(session: PickupSession, matches: Iterable[PatientMatch]) -> PickupSession:
    """Attach search results to the session."""
    ensure_open(session)
    return session.with_changes(matched_patients=tuple(matches))


def _signature_reasons(
    patient: PatientMatch, prescriptions: Tuple[PickupPrescription, ...], now: datetime
) -> Tuple[SignatureReason, ...]:
    reasons = []
    if patient.signature_required:
        if patient.last_pickup_date is None:
            reasons.append(SignatureReason.NEW_PATIENT)
        elif patient.signature_expired_at is not None and ensure_aware(patient.signature_expired_at) < now:
            reasons.append(SignatureReason.SIX_MONTHS_EXPIRED)
        else:
            reasons.append(SignatureReason.HIPAA_ACKNOWLEDGMENT)
    if any(rx.is_controlled for rx in prescriptions):
        reasons.append(SignatureReason.CONTROLLED_SUBSTANCE)
    return tuple(reasons)


def select_patient(
    session: PickupSession,
    patient: PatientMatch,
    prescriptions: Iterable[PickupPrescription],
    user_id: str,
    now: Optional[datetime] = None,
) -> PickupSession:
    """Bind the session to a patient and the prescriptions waiting for them.

    Works out which gates the pickup needs: signature (new patient, expired
    signature, controlled substance), ID check, counseling and copay.
    """
    ensure_open(session)
    now = resolve_now(now)
    prescriptions = tuple(prescriptions)
    reasons = _signature_reasons(patient, prescriptions, now)
    total_copay = sum((rx.copay_amount for rx in prescriptions), Decimal("0"))

    return with_audit(
        session,
        "patient_selected",
        user_id,
        now,
        details=f"Selected patient: {patient.full_name} ({len(prescriptions)} prescriptions)",
        status=PickupStatus.PATIENT_SELECTED,
        selected_patient_id=patient.patient_id,
        selected_patient_name=patient.full_name,
        prescriptions=prescriptions,
        scanned_barcodes=(),
        all_scanned=False,
        signature_required=bool(reasons),
        signature_reasons=reasons,
        id_verification_required=any(rx.requires_id for rx in prescriptions),
        counseling_required=any(rx.requires_counseling for rx in prescriptions),
        counseling_status=CounselingStatus.REQUIRED,
        total_copay=total_copay,
    )


def scan_prescription(
    session: PickupSession,
    barcode: str,
    user_id: str,
    now: Optional[datetime] = None,
) -> ScanResult:
    """Scan a bag label. Unknown and repeated barcodes are rejected.

    The final scan moves the session to the first outstanding gate.
    """
    ensure_open(session)
    index = next((i for i, rx in enumerate(session.prescriptions) if rx.barcode == barcode), None)
    if index is None:
        return ScanResult(
            session=session, success=False, error="Barcode does not match any prescription in this pickup"
        )

    rx = session.prescriptions[index]
    if rx.scanned:
        return ScanResult(session=session, success=False, error="Prescription already scanned")

    now = resolve_now(now)
    scanned_rx = replace(rx, scanned=True, scanned_at=now, scanned_by=user_id)
    prescriptions = session.prescriptions[:index] + (scanned_rx,) + session.prescriptions[index + 1:]
    all_scanned = all(p.scanned for p in prescriptions)

    updated = with_audit(
        session,
        "prescription_scanned",
        user_id,
        now,
        details=f"Scanned: {rx.rx_number} - {rx.drug_name}",
        prescription_id=rx.prescription_id,
        prescriptions=prescriptions,
        scanned_barcodes=session.scanned_barcodes + (barcode,),
        all_scanned=all_scanned,
    )
    if all_scanned:
        updated = updated.with_changes(status=next_gate_after_scan(updated))
    return ScanResult(session=updated, success=True)


def complete_counseling(
    session: PickupSession,
    status: CounselingStatus,
    pharmacist_id: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PickupSession:
    ensure_open(session)
    if status not in COUNSELING_OUTCOMES:
        raise ValueError(f"Counseling cannot be recorded as {status.value}")
    now = resolve_now(now)
    changes = dict(counseling_status=status, counseling_notes=notes, pharmacist_id=pharmacist_id)
    if session.status == PickupStatus.COUNSELING and status in RESOLVED_COUNSELING_STATUSES:
        changes["status"] = PickupStatus.PRESCRIPTIONS_SCANNED
    return with_audit(
        session,
        f"counseling_{status.value}",
        pharmacist_id,
        now,
        details=notes or f"Counseling {status.value}",
        **changes,
    )


def record_payment(
    session: PickupSession,
    amount: Decimal,
    method: PaymentMethod,
    receipt_number: str,
    user_id: str,
    now: Optional[datetime] = None,
) -> PickupSession:
    ensure_open(session)
    amount = Decimal(amount)
    if amount < 0:
        raise ValueError("Payment amount cannot be negative")
    return with_audit(
        session,
        "payment_recorded",
        user_id,
        resolve_now(now),
        details=f"Payment: ${amount:.2f} via {method.value}. Receipt: {receipt_number}",
        payment_collected=True,
        payment_amount=amount,
        payment_method=method,
        receipt_number=receipt_number,
    )


def complete_pickup(
    session: PickupSession, user_id: str, now: Optional[datetime] = None
) -> PickupCompletionResult:
    """Close the pickup, or report every outstanding blocker at once."""
    ensure_open(session)
    errors = []

    if not session.all_scanned:
        errors.append("Not all prescriptions have been scanned")
    if session.signature_required and session.signature is None:
        errors.append("Signature is required but not captured")
    if session.id_verification_required and not (
        session.id_verification and session.id_verification.id_valid
    ):
        errors.append("ID verification is required but not completed")
    if session.counseling_required and session.counseling_status not in RESOLVED_COUNSELING_STATUSES:
        errors.append("Counseling status must be resolved")
    if session.total_copay > 0 and not session.payment_collected:
        errors.append("Payment has not been collected")

    if errors:
        return PickupCompletionResult(session=session, success=False, errors=tuple(errors))

    now = resolve_now(now)
    completed = with_audit(
        session,
        "pickup_completed",
        user_id,
        now,
        details=f"Pickup completed. {len(session.prescriptions)} prescriptions dispensed.",
        status=PickupStatus.COMPLETED,
        completed_at=now,
        completed_by=user_id,
    )
    logger.info("Pickup %s completed by %s", session.id, user_id)
    return PickupCompletionResult(session=completed, success=True)


def cancel_pickup(
    session: PickupSession, reason: str, user_id: str, now: Optional[datetime] = None
) -> PickupSession:
    ensure_open(session)
    now = resolve_now(now)
    return with_audit(
        session,
        "pickup_cancelled",
        user_id,
        now,
        details=f"Pickup cancelled: {reason}",
        status=PickupStatus.CANCELLED,
        completed_at=now,
        completed_by=user_id,
        cancel_reason=reason,
    )


def format_pickup_summary(session: PickupSession) -> str:
    """Plain-text summary printed at the register."""
    rule = "=" * 50
    lines = [rule, "PICKUP SUMMARY", rule, ""]
    lines.append(f"Session ID: {session.id}")
    lines.append(f"Type: {session.session_type.value.upper()}")
    lines.append(f"Status: {session.status.value.upper()}")
    lines.append("")

    if session.selected_patient_name:
        lines.append(f"Patient: {session.selected_patient_name}")

    lines.extend(["", "PRESCRIPTIONS", "-" * 30])
    for rx in session.prescriptions:
        box = "[X]" if rx.scanned else "[ ]"
        controlled = " (CS)" if rx.is_controlled else ""
        lines.append(f"{box} {rx.rx_number}: {rx.drug_name}{controlled}")
    lines.append("")

    if session.total_copay > 0:
        lines.append(f"Total Copay: ${session.total_copay:.2f}")
        lines.append(f"Payment Collected: {'YES' if session.payment_collected else 'NO'}")

    lines.append("")
    lines.append(f"Signature Required: {'YES' if session.signature_required else 'NO'}")
    lines.append(f"ID Verification: {'YES' if session.id_verification_required else 'NO'}")
    lines.append(f"Counseling: {session.counseling_status.value.upper()}")
    lines.append("")

    if session.completed_at:
        lines.append(f"Completed At: {session.completed_at.isoformat()}")
    if session.completed_by:
        lines.append(f"Completed By: {session.completed_by}")
    lines.extend(["", rule])
    return "\n".join(lines)
