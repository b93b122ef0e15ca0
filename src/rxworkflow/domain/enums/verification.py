"""
Pharmacist verification enums.
"""

from enum import Enum


class VerificationStatus(str, Enum):
    """Verification session status."""

    IN_PROGRESS = "in_progress"
    APPROVED = "approved"
    REJECTED = "rejected"
    RETURNED = "returned"


class VerificationDecision(str, Enum):
    """Final pharmacist decision on a fill."""

    APPROVED = "approved"
    REJECTED = "rejected"
    RETURNED_FOR_REWORK = "returned_for_rework"


class DurSeverity(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class DurAlertType(str, Enum):
    DRUG_INTERACTION = "drug_interaction"
    ALLERGY = "allergy"
    CONTRAINDICATION = "contraindication"
    DUPLICATE_THERAPY = "duplicate_therapy"
    DOSING_ALERT = "dosing_alert"
    AGE_ALERT = "age_alert"
    PREGNANCY_ALERT = "pregnancy_alert"
    RENAL_ALERT = "renal_alert"
    HEPATIC_ALERT = "hepatic_alert"
    MONITORING_REQUIRED = "monitoring_required"


class NdcMatchType(str, Enum):
    """How closely a scanned NDC matches the expected one, most specific first."""

    EXACT = "exact"
    PACKAGE_VARIANT = "package_variant"
    LABELER_ONLY = "labeler_only"
    NONE = "none"


class BarcodeFormat(str, Enum):
    UPC_A = "UPC-A"
    NDC = "NDC"
    NDC_FORMATTED = "NDC-formatted"
    GS1_GTIN = "GS1-GTIN"
