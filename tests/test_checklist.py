"""
Verification checklist tests.
"""

import pytest

from rxworkflow.application.verification.checklist import (
    OPTIONAL_CHECKLIST_FIELDS,
    REQUIRED_CHECKLIST_FIELDS,
    checklist_progress,
    create_verification_checklist,
    is_checklist_complete,
    update_checklist,
)
from rxworkflow.domain.errors import InvalidChecklistFieldError


def _all_required(is_controlled=False):
    checklist = create_verification_checklist(is_controlled)
    return update_checklist(checklist, **{name: True for name in REQUIRED_CHECKLIST_FIELDS})


def test_blank_checklist_lists_every_required_item():
    result = is_checklist_complete(create_verification_checklist())
    assert not result.is_complete
    assert len(result.errors) == len(REQUIRED_CHECKLIST_FIELDS)
    assert "Patient Name must be verified" in result.errors
    assert "Patient Dob must be verified" in result.errors
    assert result.completed_count == 0
    assert result.total_count == 26


def test_optional_items_only_warn():
    result = is_checklist_complete(_all_required())
    assert result.is_complete
    assert result.errors == ()
    assert result.warnings == ("Lot Number Recorded should be verified", "Auxiliary Labels should be verified")
    assert set(OPTIONAL_CHECKLIST_FIELDS).isdisjoint(REQUIRED_CHECKLIST_FIELDS)


def test_controlled_substance_rules():
    result = is_checklist_complete(_all_required(is_controlled=True))
    assert not result.is_complete
    assert result.errors == (
        "DEA schedule must be verified for controlled substances",
        "PDMP must be reviewed for controlled substances",
    )
    assert "ID requirement should be noted for controlled substances" in result.warnings
    assert result.total_count == 29


def test_pdmp_can_be_skipped():
    checklist = update_checklist(_all_required(is_controlled=True), dea_schedule_verified=True)
    assert is_checklist_complete(checklist, skip_pdmp=True).is_complete
    assert not is_checklist_complete(checklist).is_complete


def test_non_controlled_checklist_ignores_controlled_items():
    checklist = create_verification_checklist()
    assert checklist.dea_schedule_verified is None
    assert not checklist.is_controlled
    with pytest.raises(InvalidChecklistFieldError):
        update_checklist(checklist, pdmp_reviewed=True)


def test_update_rejects_unknown_fields_and_non_bool_values():
    checklist = create_verification_checklist()
    with pytest.raises(InvalidChecklistFieldError):
        update_checklist(checklist, not_a_field=True)
    with pytest.raises(InvalidChecklistFieldError):
        update_checklist(checklist, drug_correct="yes")


def test_update_returns_new_checklist():
    checklist = create_verification_checklist()
    updated = update_checklist(checklist, drug_correct=True)
    assert updated.drug_correct
    assert not checklist.drug_correct


def test_progress_percentage_rounds():
    checklist = update_checklist(create_verification_checklist(), drug_correct=True)
    completed, total, percentage = checklist_progress(is_checklist_complete(checklist))
    assert (completed, total) == (1, 26)
    assert percentage == 4
