"""
Pickup counter: patient lookup, bag scanning, signature, ID and payment.
"""

from .search import (
    MIN_SEARCH_CHARS,
    SearchValidation,
    match_organization,
    match_patients,
    validate_retail_search,
)
from .session import (
    PickupCompletionResult,
    ScanResult,
    cancel_pickup,
    complete_counseling,
    complete_pickup,
    create_pickup_session,
    format_pickup_summary,
    generate_session_id,
    record_matches,
    record_payment,
    scan_prescription,
    select_patient,
)
from .signature import (
    ID_TYPE_NAMES,
    SIGNATURE_EXPIRY_MONTHS,
    SIGNATURE_REASONS_DISPLAY,
    calculate_signature_expiration,
    capture_signature,
    generate_id_verification_id,
    generate_signature_id,
    is_signature_valid,
    verify_patient_id,
)

__all__ = [
    "MIN_SEARCH_CHARS",
    "SearchValidation",
    "match_organization",
    "match_patients",
    "validate_retail_search",
    "PickupCompletionResult",
    "ScanResult",
    "cancel_pickup",
    "complete_counseling",
    "complete_pickup",
    "create_pickup_session",
    "format_pickup_summary",
    "generate_session_id",
    "record_matches",
    "record_payment",
    "scan_prescription",
    "select_patient",
    "ID_TYPE_NAMES",
    "SIGNATURE_EXPIRY_MONTHS",
    "SIGNATURE_REASONS_DISPLAY",
    "calculate_signature_expiration",
    "capture_signature",
    "generate_id_verification_id",
    "generate_signature_id",
    "is_signature_valid",
    "verify_patient_id",
]
