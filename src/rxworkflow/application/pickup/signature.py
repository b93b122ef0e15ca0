"""
Signature capture and government ID checks at pickup.
"""

from datetime import date, datetime
from typing import Dict, Optional

from ...core.utils.datetime_utils import add_months, ensure_aware, resolve_now
from ...core.utils.string_utils import generate_prefixed_id, mask_id_number
from ...domain.entities.pickup import IdVerification, PickupSession, SignatureCapture
from ...domain.enums.pickup import (
    CounselingStatus,
    IdType,
    PickupStatus,
    SignatureFormat,
    SignatureReason,
)
from ...domain.errors import PatientNotSelectedError
from .session import RESOLVED_COUNSELING_STATUSES, ensure_open, with_audit

# HIPAA acknowledgment lifetime
SIGNATURE_EXPIRY_MONTHS = 6

SIGNATURE_REASONS_DISPLAY: Dict[SignatureReason, str] = {
    SignatureReason.NEW_PATIENT: "New Patient - Initial HIPAA acknowledgment",
    SignatureReason.SIX_MONTHS_EXPIRED: "Signature expired (over 6 months)",
    SignatureReason.CONTROLLED_SUBSTANCE: "Controlled substance acknowledgment",
    SignatureReason.HIPAA_ACKNOWLEDGMENT: "HIPAA Notice acknowledgment",
    SignatureReason.COUNSELING_DECLINED: "Counseling declined documentation",
    SignatureReason.DELIVERY_RECEIPT: "Delivery receipt",
}

ID_TYPE_NAMES: Dict[IdType, str] = {
    IdType.DRIVERS_LICENSE: "Driver's License",
    IdType.STATE_ID: "State ID Card",
    IdType.PASSPORT: "Passport",
    IdType.MILITARY_ID: "Military ID",
    IdType.TRIBAL_ID: "Tribal ID",
    IdType.OTHER: "Other Government ID",
}


def generate_signature_id() -> str:
    return generate_prefixed_id("SIG", random_length=4)


def generate_id_verification_id() -> str:
    return generate_prefixed_id("IDV", random_length=4)


def calculate_signature_expiration(
    signed_at: datetime, expiry_months: int = SIGNATURE_EXPIRY_MONTHS
) -> datetime:
    return add_months(ensure_aware(signed_at), expiry_months)


def is_signature_valid(
    signed_at: Optional[datetime],
    expiry_months: int = SIGNATURE_EXPIRY_MONTHS,
    now: Optional[datetime] = None,
) -> bool:
    """True while ``now`` is before the signature's expiration."""
    if signed_at is None:
        return False
    return resolve_now(now) < calculate_signature_expiration(signed_at, expiry_months)


def _require_patient(session: PickupSession) -> str:
    if not session.selected_patient_id:
        raise PatientNotSelectedError(session.id)
    return session.selected_patient_id


def capture_signature(
    session: PickupSession,
    signature_image: str,
    user_id: str,
    hipaa_acknowledged: bool,
    counseling_offered: bool,
    counseling_accepted: bool,
    signature_format: SignatureFormat = SignatureFormat.GENERIC,
    controlled_acknowledged: Optional[bool] = None,
    device_id: Optional[str] = None,
    device_model: Optional[str] = None,
    station_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    hipaa_version: Optional[str] = None,
    expiry_months: int = SIGNATURE_EXPIRY_MONTHS,
    now: Optional[datetime] = None,
) -> PickupSession:
    """Store a signature on the pad and move to the next gate.

    The signature is always valid at capture; expiry is judged later with
    ``is_signature_valid``.
    """
    ensure_open(session)
    patient_id = _require_patient(session)
    now = resolve_now(now)

    signature = SignatureCapture(
        id=generate_signature_id(),
        patient_id=patient_id,
        session_id=session.id,
        signature_image=signature_image,
        signature_format=signature_format,
        captured_at=now,
        captured_by=user_id,
        reason=session.signature_reasons[0] if session.signature_reasons else SignatureReason.HIPAA_ACKNOWLEDGMENT,
        hipaa_acknowledged=hipaa_acknowledged,
        counseling_offered=counseling_offered,
        counseling_accepted=counseling_accepted,
        expires_at=calculate_signature_expiration(now, expiry_months),
        is_valid=True,
        controlled_substance_acknowledged=controlled_acknowledged,
        hipaa_version=hipaa_version,
        device_id=device_id,
        device_model=device_model,
        station_id=station_id or session.station_id,
        ip_address=ip_address,
    )

    if session.id_verification_required:
        next_status = PickupStatus.ID_VERIFICATION
    elif session.counseling_required and not counseling_accepted:
        next_status = PickupStatus.COUNSELING
    else:
        next_status = PickupStatus.SIGNATURE_CAPTURED

    return with_audit(
        session,
        "signature_captured",
        user_id,
        now,
        details=(
            f"Signature captured. HIPAA: {hipaa_acknowledged}, "
            f"Counseling: {'Accepted' if counseling_accepted else 'Declined'}"
        ),
        status=next_status,
        signature=signature,
        counseling_status=CounselingStatus.ACCEPTED if counseling_accepted else CounselingStatus.OFFERED,
    )


def verify_patient_id(
    session: PickupSession,
    id_type: IdType,
    id_number: str,
    user_id: str,
    photo_matches: bool,
    name_matches: bool,
    dob_matches: bool = True,
    id_valid: bool = True,
    expiration_date: Optional[date] = None,
    id_state: Optional[str] = None,
    id_country: Optional[str] = None,
    scanned_data: Optional[str] = None,
    scanner_device_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PickupSession:
    """Record an ID check. Only the last four characters of the number are kept.

    An expired ID is never valid. A valid ID with matching photo and name
    advances to counseling (if still open) or to ``prescriptions_scanned``;
    otherwise the session stays at ``id_verification``.
    """
    ensure_open(session)
    patient_id = _require_patient(session)
    now = resolve_now(now)

    is_expired = expiration_date is not None and expiration_date < now.date()
    verification = IdVerification(
        id=generate_id_verification_id(),
        session_id=session.id,
        patient_id=patient_id,
        verified_at=now,
        verified_by=user_id,
        id_type=id_type,
        id_number=mask_id_number(id_number),
        photo_matches=photo_matches,
        name_matches=name_matches,
        dob_matches=dob_matches,
        is_expired=is_expired,
        id_valid=id_valid and not is_expired,
        id_state=id_state,
        id_country=id_country,
        expiration_date=expiration_date,
        scanned_data=scanned_data,
        scanner_device_id=scanner_device_id,
    )

    next_status = PickupStatus.ID_VERIFICATION
    if verification.id_valid and photo_matches and name_matches:
        if session.counseling_required and session.counseling_status not in RESOLVED_COUNSELING_STATUSES:
            next_status = PickupStatus.COUNSELING
        else:
            next_status = PickupStatus.PRESCRIPTIONS_SCANNED

    return with_audit(
        session,
        "id_verified",
        user_id,
        now,
        details=f"ID verified: {ID_TYPE_NAMES[id_type]} ending in {id_number[-4:]}",
        status=next_status,
        id_verification=verification,
    )
