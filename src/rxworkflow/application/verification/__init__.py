"""
Pharmacist verification: checklist, NDC scanning, DUR review and sign-off.
"""

from .barcode import BarcodeParseResult, NdcVerificationResult, parse_ndc_from_barcode, verify_ndc_match
from .checklist import (
    ChecklistValidation,
    create_verification_checklist,
    is_checklist_complete,
    update_checklist,
)
from .dur_review import (
    DUR_OVERRIDE_CODES,
    DurReviewStatus,
    check_dur_alerts_resolved,
    create_dur_override,
)
from .session import (
    NdcScanOutcome,
    VerificationValidation,
    add_dur_override,
    complete_verification,
    mark_dur_reviewed,
    record_ndc_scan,
    start_verification,
    update_session_checklist,
    validate_verification_complete,
    workflow_target_for_decision,
)

__all__ = [
    "BarcodeParseResult",
    "NdcVerificationResult",
    "parse_ndc_from_barcode",
    "verify_ndc_match",
    "ChecklistValidation",
    "create_verification_checklist",
    "is_checklist_complete",
    "update_checklist",
    "DUR_OVERRIDE_CODES",
    "DurReviewStatus",
    "check_dur_alerts_resolved",
    "create_dur_override",
    "NdcScanOutcome",
    "VerificationValidation",
    "add_dur_override",
    "complete_verification",
    "mark_dur_reviewed",
    "record_ndc_scan",
    "start_verification",
    "update_session_checklist",
    "validate_verification_complete",
    "workflow_target_for_decision",
]
