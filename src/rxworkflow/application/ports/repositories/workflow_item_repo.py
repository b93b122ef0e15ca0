"""
Workflow item repository interface.
"""

from typing import List, Optional

from ....domain.entities.workflow_item import WorkflowItem
from ....domain.enums.workflow import WorkflowState


class WorkflowItemRepository:
    """Repository interface for workflow items.

    ``save`` is a compare-and-swap: the write only happens if the stored
    version still equals ``expected_version``, otherwise it raises
    ConcurrentModificationError. The stored item comes back with its version
    advanced by one.
    """

    async def get(self, item_id: str) -> Optional[WorkflowItem]:
        """Find a workflow item by ID."""
        raise NotImplementedError

    async def get_by_prescription_id(self, prescription_id: str) -> Optional[WorkflowItem]:
        """Find the in-flight item for a prescription."""
        raise NotImplementedError

    async def add(self, item: WorkflowItem) -> WorkflowItem:
        """Store a new item; raises DuplicateEntityError if the ID exists."""
        raise NotImplementedError

    async def save(self, item: WorkflowItem, expected_version: int) -> WorkflowItem:
        """Compare-and-swap update."""
        raise NotImplementedError

    async def find_by_states(self, states: List[WorkflowState], limit: int = 500) -> List[WorkflowItem]:
        """Items currently in any of the given states."""
        raise NotImplementedError
