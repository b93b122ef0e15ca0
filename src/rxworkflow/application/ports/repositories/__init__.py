"""
Repository interfaces.
"""

from .pickup_session_repo import PickupSessionRepository
from .verification_session_repo import VerificationSessionRepository
from .will_call_bin_repo import WillCallBinRepository
from .workflow_item_repo import WorkflowItemRepository

__all__ = [
    "WorkflowItemRepository",
    "VerificationSessionRepository",
    "PickupSessionRepository",
    "WillCallBinRepository",
]
