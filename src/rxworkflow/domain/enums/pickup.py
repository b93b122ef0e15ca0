"""
Pickup counter enums.
"""

from enum import Enum


class PickupSessionType(str, Enum):
    RETAIL = "retail"
    ORGANIZATION = "organization"
    DELIVERY = "delivery"
    DRIVE_THRU = "drive_thru"


class PickupStatus(str, Enum):
    """Pickup session status.

    Steps between ``patient_selected`` and ``prescriptions_scanned`` are
    skipped when not required.
    """

    SEARCHING = "searching"
    PATIENT_SELECTED = "patient_selected"
    SIGNATURE_REQUIRED = "signature_required"
    SIGNATURE_CAPTURED = "signature_captured"
    ID_VERIFICATION = "id_verification"
    COUNSELING = "counseling"
    PRESCRIPTIONS_SCANNED = "prescriptions_scanned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SignatureReason(str, Enum):
    NEW_PATIENT = "new_patient"
    SIX_MONTHS_EXPIRED = "six_months_expired"
    CONTROLLED_SUBSTANCE = "controlled_substance"
    HIPAA_ACKNOWLEDGMENT = "hipaa_acknowledgment"
    COUNSELING_DECLINED = "counseling_declined"
    DELIVERY_RECEIPT = "delivery_receipt"


class SignatureFormat(str, Enum):
    TOPAZ = "topaz"
    EPADLINK = "epadlink"
    SCRIPTPRO = "scriptpro"
    GENERIC = "generic"


class IdType(str, Enum):
    DRIVERS_LICENSE = "drivers_license"
    STATE_ID = "state_id"
    PASSPORT = "passport"
    MILITARY_ID = "military_id"
    TRIBAL_ID = "tribal_id"
    OTHER = "other"


class CounselingStatus(str, Enum):
    REQUIRED = "required"
    OFFERED = "offered"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"
    WAIVED = "waived"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    CHECK = "check"
    ACCOUNT = "account"
