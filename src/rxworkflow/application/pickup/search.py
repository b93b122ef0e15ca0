"""
Patient lookup at the pickup counter.

Retail lookups use the 2+2+DOB convention: the first two letters of the
first and last name plus the exact date of birth.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ...core.utils.datetime_utils import as_date, parse_us_date
from ...core.utils.string_utils import digits_only
from ...domain.entities.pickup import (
    OrganizationPickupSearch,
    PatientMatch,
    PatientRecord,
    RetailPickupSearch,
)

MIN_SEARCH_CHARS = 2
MAX_MATCH_SCORE = 100

_DOB_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/(0[1-9]|[12]\d|3[01])/\d{4}$")


@dataclass(frozen=True)
class SearchValidation:
    valid: bool
    errors: Tuple[str, ...]


def validate_retail_search(
    search: RetailPickupSearch, min_chars: int = MIN_SEARCH_CHARS
) -> SearchValidation:
    """Check name prefixes and DOB format.

    Single-letter names (e.g. "O") need the explicit override flag.
    """
    errors = []

    min_first = 1 if search.single_letter_first_name else min_chars
    if len(search.first_name_chars.strip()) < min_first:
        errors.append(f"First name must be at least {min_first} character(s)")

    min_last = 1 if search.single_letter_last_name else min_chars
    if len(search.last_name_chars.strip()) < min_last:
        errors.append(f"Last name must be at least {min_last} character(s)")

    if not _DOB_PATTERN.match(search.date_of_birth or "") or parse_us_date(search.date_of_birth) is None:
        errors.append("Date of birth must be in MM/DD/YYYY format")

    return SearchValidation(valid=not errors, errors=tuple(errors))


def _phones_match(searched: Optional[str], on_file: Optional[str]) -> bool:
    searched_digits = digits_only(searched or "")
    file_digits = digits_only(on_file or "")
    if not searched_digits or not file_digits:
        return False
    return searched_digits in file_digits or file_digits in searched_digits


def _to_match(patient: PatientRecord, score: int) -> PatientMatch:
    return PatientMatch(
        patient_id=patient.id,
        first_name=patient.first_name,
        last_name=patient.last_name,
        date_of_birth=as_date(patient.date_of_birth),
        match_score=min(MAX_MATCH_SCORE, score),
        phone=patient.phone,
        address=patient.address,
    )


def match_patients(patients: Iterable[PatientRecord], search: RetailPickupSearch) -> List[PatientMatch]:
    """Score patients against a retail search, best match first.

    DOB must match exactly (time of day ignored) and both name prefixes must
    match case-insensitively. Score: 50 for DOB, +10 per prefix character,
    +15 for each exact full name, +20 for a phone match; capped at 100.
    Prescription counts and signature flags are left for the caller.
    """
    search_dob = parse_us_date(search.date_of_birth)
    if search_dob is None:
        return []

    first_prefix = search.first_name_chars.strip().lower()
    last_prefix = search.last_name_chars.strip().lower()
    matches = []

    for patient in patients:
        if as_date(patient.date_of_birth) != search_dob:
            continue
        if not patient.first_name.lower().startswith(first_prefix):
            continue
        if not patient.last_name.lower().startswith(last_prefix):
            continue

        score = 50 + 10 * len(first_prefix) + 10 * len(last_prefix)
        if search.full_first_name and patient.first_name.lower() == search.full_first_name.strip().lower():
            score += 15
        if search.full_last_name and patient.last_name.lower() == search.full_last_name.strip().lower():
            score += 15
        if _phones_match(search.phone_number, patient.phone):
            score += 20

        matches.append(_to_match(patient, score))

    # sorted() is stable, so equal scores keep directory order
    return sorted(matches, key=lambda match: match.match_score, reverse=True)


def match_organization(
    patients: Iterable[PatientRecord], search: OrganizationPickupSearch
) -> List[PatientMatch]:
    """Residents of a facility whose pickup is being collected.

    Organization name matches case-insensitively on containment. A matching
    facility code adds 30 and a matching phone adds 20 to the base of 50.
    """
    wanted = search.organization_name.strip().lower()
    if not wanted:
        return []

    matches = []
    for patient in patients:
        organization = (patient.organization_name or "").lower()
        if wanted not in organization:
            continue
        score = 50
        if search.facility_code and patient.facility_code == search.facility_code:
            score += 30
        if _phones_match(search.phone_number, patient.phone):
            score += 20
        matches.append(_to_match(patient, score))

    return sorted(matches, key=lambda match: match.match_score, reverse=True)
