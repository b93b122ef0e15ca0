"""Pickup counter entities: search criteria, matches, and the pickup session."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Tuple, Union

from ..enums.pickup import (
    CounselingStatus,
    IdType,
    PaymentMethod,
    PickupSessionType,
    PickupStatus,
    SignatureFormat,
    SignatureReason,
)


@dataclass(frozen=True)
class RetailPickupSearch:
    """Standard retail lookup: 2 chars of first + 2 chars of last name + DOB."""

    first_name_chars: str
    last_name_chars: str
    date_of_birth: str  # MM/DD/YYYY
    single_letter_first_name: bool = False  # for names like "O" or "U"
    single_letter_last_name: bool = False
    full_first_name: Optional[str] = None
    full_last_name: Optional[str] = None
    phone_number: Optional[str] = None
    rx_number: Optional[str] = None


@dataclass(frozen=True)
class OrganizationPickupSearch:
    """Facility pickup lookup (LTC homes, group homes, clinics)."""

    organization_name: str
    phone_number: Optional[str] = None
    facility_code: Optional[str] = None
    pickup_person_name: Optional[str] = None
    delivery_route_id: Optional[str] = None


PickupSearch = Union[RetailPickupSearch, OrganizationPickupSearch]


@dataclass(frozen=True)
class PatientRecord:
    """Patient candidate supplied by the patient directory."""

    id: str
    first_name: str
    last_name: str
    date_of_birth: Union[date, datetime]
    phone: Optional[str] = None
    address: Optional[str] = None
    organization_name: Optional[str] = None
    facility_code: Optional[str] = None


@dataclass(frozen=True)
class PatientMatch:
    patient_id: str
    first_name: str
    last_name: str
    date_of_birth: date
    match_score: int
    phone: Optional[str] = None
    address: Optional[str] = None
    prescriptions_ready: int = 0
    has_controlled: bool = False
    signature_required: bool = False
    signature_expired_at: Optional[datetime] = None
    last_pickup_date: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def with_changes(self, **changes: Any) -> "PatientMatch":
        return replace(self, **changes)


@dataclass(frozen=True)
class PickupPrescription:
    """Filled prescription waiting in will-call for this patient."""

    prescription_id: str
    rx_number: str
    drug_name: str
    quantity: float
    barcode: str
    strength: str = ""
    bin_location: str = ""
    is_controlled: bool = False
    dea_schedule: Optional[str] = None
    requires_id: bool = False
    requires_counseling: bool = False
    is_refrigerated: bool = False
    copay_amount: Decimal = Decimal("0")
    dispensed_at: Optional[datetime] = None
    partial_fill: bool = False
    scanned: bool = False
    scanned_at: Optional[datetime] = None
    scanned_by: Optional[str] = None


@dataclass(frozen=True)
class SignatureCapture:
    """Signature record (21 CFR Part 11 fields)."""

    id: str
    patient_id: str
    session_id: str
    signature_image: str
    signature_format: SignatureFormat
    captured_at: datetime
    captured_by: str
    reason: SignatureReason
    hipaa_acknowledged: bool
    counseling_offered: bool
    counseling_accepted: bool
    expires_at: datetime
    is_valid: bool = True
    controlled_substance_acknowledged: Optional[bool] = None
    hipaa_version: Optional[str] = None
    device_id: Optional[str] = None
    device_model: Optional[str] = None
    station_id: Optional[str] = None
    ip_address: Optional[str] = None


@dataclass(frozen=True)
class IdVerification:
    """Government ID check; only the masked tail of the ID number is kept."""

    id: str
    session_id: str
    patient_id: str
    verified_at: datetime
    verified_by: str
    id_type: IdType
    id_number: str
    photo_matches: bool
    name_matches: bool
    dob_matches: bool
    is_expired: bool
    id_valid: bool
    id_state: Optional[str] = None
    id_country: Optional[str] = None
    expiration_date: Optional[date] = None
    scanned_data: Optional[str] = None
    scanner_device_id: Optional[str] = None


@dataclass(frozen=True)
class PickupAuditEntry:
    timestamp: datetime
    action: str
    user_id: str
    details: Optional[str] = None
    prescription_id: Optional[str] = None


@dataclass(frozen=True)
class PickupSession:
    id: str
    session_type: PickupSessionType
    search_criteria: PickupSearch
    started_at: datetime
    started_by: str
    status: PickupStatus = PickupStatus.SEARCHING
    matched_patients: Tuple[PatientMatch, ...] = field(default_factory=tuple)
    selected_patient_id: Optional[str] = None
    selected_patient_name: Optional[str] = None
    prescriptions: Tuple[PickupPrescription, ...] = field(default_factory=tuple)
    scanned_barcodes: Tuple[str, ...] = field(default_factory=tuple)
    all_scanned: bool = False
    total_copay: Decimal = Decimal("0")
    signature_required: bool = False
    signature_reasons: Tuple[SignatureReason, ...] = field(default_factory=tuple)
    signature: Optional[SignatureCapture] = None
    id_verification_required: bool = False
    id_verification: Optional[IdVerification] = None
    counseling_required: bool = False
    counseling_status: CounselingStatus = CounselingStatus.REQUIRED
    counseling_notes: Optional[str] = None
    pharmacist_id: Optional[str] = None
    payment_collected: bool = False
    payment_amount: Optional[Decimal] = None
    payment_method: Optional[PaymentMethod] = None
    receipt_number: Optional[str] = None
    station_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    cancel_reason: Optional[str] = None
    audit_trail: Tuple[PickupAuditEntry, ...] = field(default_factory=tuple)
    version: int = 0

    @property
    def is_closed(self) -> bool:
        return self.status in (PickupStatus.COMPLETED, PickupStatus.CANCELLED)

    def with_changes(self, **changes: Any) -> "PickupSession":
        return replace(self, **changes)
