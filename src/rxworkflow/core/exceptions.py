"""
Exception handling for the RxWorkflow library.

This module provides custom exception classes for the infrastructure
and configuration layers. Business-rule rejections are never raised;
they travel as result objects. Contract violations live in
``rxworkflow.domain.errors``.
"""

from typing import Any, Dict, Optional


class RxWorkflowException(Exception):
    """Base exception class for the RxWorkflow library."""

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


class ConfigurationError(RxWorkflowException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class ValidationError(RxWorkflowException):
    """Raised when input data has the wrong shape."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", details)


class InfrastructureError(RxWorkflowException):
    """Raised when a collaborator outside the engine fails.

    The engine never retries these; retry policy belongs to the caller.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "INFRASTRUCTURE_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, error_code, details)


class ExternalServiceError(InfrastructureError):
    """Raised when there's an external service error."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)


class PersistenceError(InfrastructureError):
    """Raised when there's a database operation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "PERSISTENCE_ERROR", details)


class ConcurrentModificationError(RxWorkflowException):
    """Raised when a compare-and-swap write finds a newer stored version.

    Callers should re-fetch the entity and retry; this is not a rule violation.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        expected_version: int,
        actual_version: Optional[int] = None,
    ) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        message = (
            f"{entity_type} '{entity_id}' was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        super().__init__(
            message,
            "CONCURRENT_MODIFICATION",
            {
                "entity_type": entity_type,
                "entity_id": entity_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )
