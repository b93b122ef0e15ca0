"""
Domain-specific error types for contract violations.

Expected business outcomes (invalid transitions, blocked pickups, unresolved
DUR alerts) are returned as result objects. These exceptions are reserved for
calls that should never have been made.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class WorkflowItemNotFoundError(DomainError):
    """Workflow item not found."""

    def __init__(self, item_id: str) -> None:
        message = f"Workflow item with ID '{item_id}' not found"
        super().__init__(message, "WORKFLOW_ITEM_NOT_FOUND", {"item_id": item_id})


class VerificationSessionNotFoundError(DomainError):
    """Verification session not found."""

    def __init__(self, session_id: str) -> None:
        message = f"Verification session with ID '{session_id}' not found"
        super().__init__(message, "VERIFICATION_SESSION_NOT_FOUND", {"session_id": session_id})


class PickupSessionNotFoundError(DomainError):
    """Pickup session not found."""

    def __init__(self, session_id: str) -> None:
        message = f"Pickup session with ID '{session_id}' not found"
        super().__init__(message, "PICKUP_SESSION_NOT_FOUND", {"session_id": session_id})


class WillCallBinNotFoundError(DomainError):
    """Will-call bin not found."""

    def __init__(self, bin_id: str) -> None:
        message = f"Will-call bin with ID '{bin_id}' not found"
        super().__init__(message, "WILL_CALL_BIN_NOT_FOUND", {"bin_id": bin_id})


class DuplicateEntityError(DomainError):
    """Entity with the same identity already stored."""

    def __init__(self, entity_type: str, entity_id: str) -> None:
        message = f"{entity_type} with ID '{entity_id}' already exists"
        super().__init__(
            message, "DUPLICATE_ENTITY", {"entity_type": entity_type, "entity_id": entity_id}
        )


class VerificationInProgressError(DomainError):
    """A fill already has an open verification session."""

    def __init__(self, fill_id: str, session_id: str) -> None:
        message = f"Fill '{fill_id}' already has verification session '{session_id}' in progress"
        super().__init__(
            message, "VERIFICATION_IN_PROGRESS", {"fill_id": fill_id, "session_id": session_id}
        )


class RejectionReasonRequiredError(DomainError):
    """Rejecting a verification without a reason."""

    def __init__(self, session_id: str) -> None:
        message = "Rejection reason is required when rejecting verification"
        super().__init__(message, "REJECTION_REASON_REQUIRED", {"session_id": session_id})


class VerificationAlreadyCompletedError(DomainError):
    """Completing or editing a verification session twice."""

    def __init__(self, session_id: str, status: str) -> None:
        message = f"Verification session '{session_id}' is already {status}"
        super().__init__(
            message, "VERIFICATION_ALREADY_COMPLETED", {"session_id": session_id, "status": status}
        )


class InvalidChecklistFieldError(DomainError):
    """Unknown checklist key, or a not-applicable field being marked."""

    def __init__(self, field: str, reason: str) -> None:
        message = f"Invalid checklist field '{field}': {reason}"
        super().__init__(message, "INVALID_CHECKLIST_FIELD", {"field": field, "reason": reason})


class InvalidDurOverrideError(DomainError):
    """DUR override with an unknown code or a too-short reason."""

    def __init__(self, alert_id: str, reason: str) -> None:
        message = f"Invalid DUR override for alert '{alert_id}': {reason}"
        super().__init__(message, "INVALID_DUR_OVERRIDE", {"alert_id": alert_id, "reason": reason})


class PickupSessionClosedError(DomainError):
    """Mutating a completed or cancelled pickup session."""

    def __init__(self, session_id: str, status: str) -> None:
        message = f"Pickup session '{session_id}' is {status} and cannot be changed"
        super().__init__(message, "PICKUP_SESSION_CLOSED", {"session_id": session_id, "status": status})


class PatientNotSelectedError(DomainError):
    """Capturing patient-bound data before a patient is selected."""

    def __init__(self, session_id: str) -> None:
        message = f"No patient selected for pickup session '{session_id}'"
        super().__init__(message, "PATIENT_NOT_SELECTED", {"session_id": session_id})


class WillCallAlreadyReversedError(DomainError):
    """Reversing the claim for a bin that was already reversed."""

    def __init__(self, bin_id: str) -> None:
        message = f"Insurance for will-call bin '{bin_id}' was already reversed"
        super().__init__(message, "WILL_CALL_ALREADY_REVERSED", {"bin_id": bin_id})


class InvalidNdcError(DomainError):
    """Value that cannot be read as an 11-digit NDC."""

    def __init__(self, value: str) -> None:
        message = f"Invalid NDC: '{value}'"
        super().__init__(message, "INVALID_NDC", {"value": value})
