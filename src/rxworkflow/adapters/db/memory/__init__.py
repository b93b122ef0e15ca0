"""
In-memory repositories with compare-and-swap semantics.
"""

from .repositories import (
    InMemoryPickupSessionRepository,
    InMemoryVerificationSessionRepository,
    InMemoryWillCallBinRepository,
    InMemoryWorkflowItemRepository,
)

__all__ = [
    "InMemoryWorkflowItemRepository",
    "InMemoryVerificationSessionRepository",
    "InMemoryPickupSessionRepository",
    "InMemoryWillCallBinRepository",
]
