"""
Pickup counter patient lookup tests.
"""

from datetime import date, datetime

from rxworkflow.application.pickup.search import (
    match_organization,
    match_patients,
    validate_retail_search,
)
from rxworkflow.domain.entities.pickup import (
    OrganizationPickupSearch,
    PatientRecord,
    RetailPickupSearch,
)

PATIENTS = [
    PatientRecord("P1", "Jane", "Smith", date(1980, 5, 17), phone="(555) 123-4567"),
    PatientRecord("P2", "Janet", "Smithers", datetime(1980, 5, 17, 8, 30)),
    PatientRecord("P3", "Jane", "Smith", date(1981, 5, 17)),
    PatientRecord("P4", "Bob", "Smith", date(1980, 5, 17)),
]


def test_validate_retail_search():
    ok = RetailPickupSearch("Ja", "Sm", "05/17/1980")
    assert validate_retail_search(ok).valid

    bad = RetailPickupSearch("J", "", "1980-05-17")
    result = validate_retail_search(bad)
    assert not result.valid
    assert result.errors == (
        "First name must be at least 2 character(s)",
        "Last name must be at least 2 character(s)",
        "Date of birth must be in MM/DD/YYYY format",
    )


def test_single_letter_override():
    search = RetailPickupSearch("O", "Li", "02/29/1984", single_letter_first_name=True)
    assert validate_retail_search(search).valid


def test_impossible_date_is_rejected():
    assert not validate_retail_search(RetailPickupSearch("Ja", "Sm", "02/30/1980")).valid


def test_match_requires_exact_dob_and_prefixes():
    matches = match_patients(PATIENTS, RetailPickupSearch("ja", "SM", "05/17/1980"))
    assert [m.patient_id for m in matches] == ["P1", "P2"]
    assert all(m.match_score == 90 for m in matches)
    assert matches[1].date_of_birth == date(1980, 5, 17)


def test_full_name_and_phone_raise_the_score():
    search = RetailPickupSearch(
        "Ja", "Sm", "05/17/1980", full_first_name="Jane", full_last_name="smith", phone_number="5551234567"
    )
    matches = match_patients(PATIENTS, search)
    assert matches[0].patient_id == "P1"
    assert matches[0].match_score == 100
    assert matches[1].match_score == 90


def test_invalid_dob_matches_nobody():
    assert match_patients(PATIENTS, RetailPickupSearch("Ja", "Sm", "13/01/1980")) == []


def test_organization_match():
    residents = [
        PatientRecord("R1", "Ann", "Lee", date(1940, 1, 1), organization_name="Sunrise Senior Living", facility_code="SSL"),
        PatientRecord(
            "R2", "Ed", "Kim", date(1938, 2, 2), phone="555-000-1111",
            organization_name="Sunrise Senior Living", facility_code="OTHER",
        ),
        PatientRecord("R3", "Al", "Day", date(1945, 3, 3), organization_name="Maple Care"),
    ]
    matches = match_organization(residents, OrganizationPickupSearch("sunrise", facility_code="SSL"))
    assert [(m.patient_id, m.match_score) for m in matches] == [("R1", 80), ("R2", 50)]

    by_phone = match_organization(residents, OrganizationPickupSearch("Sunrise", phone_number="5550001111"))
    assert by_phone[0].patient_id == "R2"
    assert by_phone[0].match_score == 70

    assert match_organization(residents, OrganizationPickupSearch("  ")) == []
