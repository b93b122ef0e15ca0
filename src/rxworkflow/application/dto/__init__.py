"""
Data transfer objects for the use case layer.
"""

from .workflow_dto import (
    CompletePickupRequest,
    CompletePickupResponse,
    CompleteVerificationRequest,
    CompleteVerificationResponse,
    IntakePrescriptionRequest,
    ProcessWillCallExpirationResponse,
    TransitionPrescriptionRequest,
    TransitionPrescriptionResponse,
    WillCallFailure,
)

__all__ = [
    "CompletePickupRequest",
    "CompletePickupResponse",
    "CompleteVerificationRequest",
    "CompleteVerificationResponse",
    "IntakePrescriptionRequest",
    "ProcessWillCallExpirationResponse",
    "TransitionPrescriptionRequest",
    "TransitionPrescriptionResponse",
    "WillCallFailure",
]
