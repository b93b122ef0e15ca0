"""
Async use cases orchestrating load, validate, apply and save.
"""

from .complete_pickup import CompletePickupUseCase
from .complete_verification import CompleteVerificationUseCase
from .intake_prescription import IntakePrescriptionUseCase
from .process_will_call_expiration import ProcessWillCallExpirationUseCase
from .transition_prescription import TransitionPrescriptionUseCase

__all__ = [
    "CompletePickupUseCase",
    "CompleteVerificationUseCase",
    "IntakePrescriptionUseCase",
    "ProcessWillCallExpirationUseCase",
    "TransitionPrescriptionUseCase",
]
