"""Pharmacist verification entities.

The checklist uses ``Optional[bool]`` for the controlled-substance checks:
``None`` means not applicable, ``False`` pending, ``True`` done.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Optional, Tuple

from ..enums.verification import (
    DurAlertType,
    DurSeverity,
    NdcMatchType,
    VerificationDecision,
    VerificationStatus,
)


@dataclass(frozen=True)
class VerificationChecklist:
    """Final-check items a pharmacist signs off on."""

    # Patient
    patient_name_correct: bool = False
    patient_dob_correct: bool = False
    patient_address_correct: bool = False
    patient_allergies_reviewed: bool = False

    # Prescription
    prescriber_correct: bool = False
    drug_correct: bool = False
    strength_correct: bool = False
    dosage_form_correct: bool = False
    quantity_correct: bool = False
    days_supply_correct: bool = False
    directions_correct: bool = False
    refills_correct: bool = False
    daw_code_correct: bool = False

    # Clinical
    dur_alerts_reviewed: bool = False
    interactions_cleared: bool = False
    allergies_cleared: bool = False
    dosage_appropriate: bool = False
    duplicate_therapy_cleared: bool = False

    # Dispensing
    ndc_verified: bool = False
    lot_number_recorded: bool = False
    expiration_valid: bool = False
    quantity_in_vial_correct: bool = False
    label_correct: bool = False
    auxiliary_labels_correct: bool = False
    packaging_appropriate: bool = False
    appearance_correct: bool = False

    # Controlled substance, None when not applicable
    dea_schedule_verified: Optional[bool] = None
    pdmp_reviewed: Optional[bool] = None
    id_requirement_noted: Optional[bool] = None

    @property
    def is_controlled(self) -> bool:
        return self.dea_schedule_verified is not None

    def items(self) -> Tuple[Tuple[str, Optional[bool]], ...]:
        """Field name and value pairs in declaration order."""
        return tuple((f.name, getattr(self, f.name)) for f in fields(self))

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


CONTROLLED_SUBSTANCE_FIELDS = ("dea_schedule_verified", "pdmp_reviewed", "id_requirement_noted")


@dataclass(frozen=True)
class DurAlert:
    """DUR alert as reported by the DUR service."""

    id: str
    severity: DurSeverity
    is_overridden: bool = False
    alert_type: Optional[DurAlertType] = None
    message: str = ""


@dataclass(frozen=True)
class DurOverrideRecord:
    """Pharmacist override of a DUR alert, with NCPDP professional service code."""

    dur_alert_id: str
    alert_type: Optional[DurAlertType]
    severity: DurSeverity
    alert_message: str
    override_code: str
    override_reason: str
    overridden_at: datetime
    pharmacist_id: str
    pharmacist_name: str


@dataclass(frozen=True)
class VerificationSession:
    """One pharmacist final check of one fill."""

    id: str
    prescription_id: str
    fill_id: str
    pharmacist_id: str
    started_at: datetime
    checklist: VerificationChecklist
    status: VerificationStatus = VerificationStatus.IN_PROGRESS
    expected_ndc: Optional[str] = None
    ndc_scanned: Optional[str] = None
    ndc_verified: bool = False
    ndc_match_type: Optional[NdcMatchType] = None
    scan_timestamp: Optional[datetime] = None
    dur_alerts_reviewed: bool = False
    dur_overrides: Tuple[DurOverrideRecord, ...] = field(default_factory=tuple)
    checklist_completed: bool = False
    decision: Optional[VerificationDecision] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.dur_overrides, tuple):
            object.__setattr__(self, "dur_overrides", tuple(self.dur_overrides))

    @property
    def is_completed(self) -> bool:
        return self.status != VerificationStatus.IN_PROGRESS

    def with_changes(self, **changes: Any) -> "VerificationSession":
        return replace(self, **changes)
