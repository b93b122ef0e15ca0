"""
Pharmacist verification checklist rules.
"""

from dataclasses import dataclass, replace
from typing import FrozenSet, Tuple

from ...core.utils.string_utils import humanize_field_name
from ...domain.entities.verification import CONTROLLED_SUBSTANCE_FIELDS, VerificationChecklist
from ...domain.errors import InvalidChecklistFieldError

# Unchecked items here warn instead of blocking.
OPTIONAL_CHECKLIST_FIELDS: FrozenSet[str] = frozenset({"lot_number_recorded", "auxiliary_labels_correct"})

REQUIRED_CHECKLIST_FIELDS: Tuple[str, ...] = tuple(
    name
    for name in VerificationChecklist.field_names()
    if name not in OPTIONAL_CHECKLIST_FIELDS and name not in CONTROLLED_SUBSTANCE_FIELDS
)


@dataclass(frozen=True)
class ChecklistValidation:
    is_complete: bool
    errors: Tuple[str, ...]
    warnings: Tuple[str, ...]
    completed_count: int
    total_count: int


def create_verification_checklist(is_controlled: bool = False) -> VerificationChecklist:
    """Blank checklist; controlled-substance items are N/A unless controlled."""
    if is_controlled:
        return VerificationChecklist(
            dea_schedule_verified=False,
            pdmp_reviewed=False,
            id_requirement_noted=False,
        )
    return VerificationChecklist()


def update_checklist(checklist: VerificationChecklist, **marks: bool) -> VerificationChecklist:
    """Return a checklist with the given items marked.

    Raises InvalidChecklistFieldError for unknown items, non-boolean values, and
    controlled-substance items on a non-controlled checklist.
    """
    known = set(VerificationChecklist.field_names())
    for name, value in marks.items():
        if name not in known:
            raise InvalidChecklistFieldError(name, "unknown checklist item")
        if not isinstance(value, bool):
            raise InvalidChecklistFieldError(name, "value must be a boolean")
        if name in CONTROLLED_SUBSTANCE_FIELDS and getattr(checklist, name) is None:
            raise InvalidChecklistFieldError(name, "not applicable to a non-controlled prescription")
    return replace(checklist, **marks)


def is_checklist_complete(checklist: VerificationChecklist, skip_pdmp: bool = False) -> ChecklistValidation:
    """Validate a checklist.

    Required items produce errors, optional items warnings. For controlled
    substances the DEA schedule and PDMP checks are hard errors (PDMP can be
    skipped when the state database is unavailable) and the ID requirement is a
    warning. ``None`` items are not applicable and never count.
    """
    errors = []
    warnings = []

    for name in REQUIRED_CHECKLIST_FIELDS:
        if getattr(checklist, name) is not True:
            errors.append(f"{humanize_field_name(name)} must be verified")

    for name in sorted(OPTIONAL_CHECKLIST_FIELDS, key=VerificationChecklist.field_names().index):
        if getattr(checklist, name) is not True:
            warnings.append(f"{humanize_field_name(name)} should be verified")

    if checklist.is_controlled:
        if checklist.dea_schedule_verified is not True:
            errors.append("DEA schedule must be verified for controlled substances")
        if checklist.pdmp_reviewed is False and not skip_pdmp:
            errors.append("PDMP must be reviewed for controlled substances")
        if checklist.id_requirement_noted is False:
            warnings.append("ID requirement should be noted for controlled substances")

    values = [value for _, value in checklist.items() if value is not None]
    return ChecklistValidation(
        is_complete=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        completed_count=sum(1 for value in values if value is True),
        total_count=len(values),
    )


def checklist_progress(validation: ChecklistValidation) -> Tuple[int, int, int]:
    """Completed, total and rounded percentage for progress bars."""
    total = validation.total_count
    percentage = int(validation.completed_count * 100 / total + 0.5) if total else 0
    return validation.completed_count, total, percentage
