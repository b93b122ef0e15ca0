"""
In-memory implementations of the repository ports.

Used by tests and single-process deployments. Entities are immutable, so the
store hands out the stored objects directly. An asyncio lock makes each
compare-and-swap atomic with respect to other coroutines.
"""

import asyncio
import logging
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from ....application.ports.repositories.pickup_session_repo import PickupSessionRepository
from ....application.ports.repositories.verification_session_repo import (
    VerificationSessionRepository,
)
from ....application.ports.repositories.will_call_bin_repo import WillCallBinRepository
from ....application.ports.repositories.workflow_item_repo import WorkflowItemRepository
from ....core.exceptions import ConcurrentModificationError
from ....domain.entities.pickup import PickupSession
from ....domain.entities.verification import VerificationSession
from ....domain.entities.will_call import WillCallBin
from ....domain.entities.workflow_item import WorkflowItem
from ....domain.enums.verification import VerificationStatus
from ....domain.enums.workflow import WorkflowState
from ....domain.errors import DuplicateEntityError, VerificationInProgressError

logger = logging.getLogger("rxworkflow")

T = TypeVar("T")


class _VersionedStore(Generic[T]):
    """Dict of entities keyed by id with versioned writes."""

    def __init__(self, entity_type: str, key: Callable[[T], str]) -> None:
        self._entity_type = entity_type
        self._key = key
        self._items: Dict[str, T] = {}
        self.lock = asyncio.Lock()

    def get(self, entity_id: str) -> Optional[T]:
        return self._items.get(entity_id)

    def values(self) -> List[T]:
        return list(self._items.values())

    def insert(self, entity: T) -> T:
        entity_id = self._key(entity)
        if entity_id in self._items:
            raise DuplicateEntityError(self._entity_type, entity_id)
        stored = entity.with_changes(version=0)
        self._items[entity_id] = stored
        return stored

    def compare_and_swap(self, entity: T, expected_version: int) -> T:
        entity_id = self._key(entity)
        current = self._items.get(entity_id)
        actual = current.version if current is not None else None
        if actual != expected_version:
            logger.warning(
                "CAS conflict on %s %s: expected %s, found %s",
                self._entity_type,
                entity_id,
                expected_version,
                actual,
            )
            raise ConcurrentModificationError(self._entity_type, entity_id, expected_version, actual)
        stored = entity.with_changes(version=expected_version + 1)
        self._items[entity_id] = stored
        return stored


class InMemoryWorkflowItemRepository(WorkflowItemRepository):
    def __init__(self) -> None:
        self._store: _VersionedStore[WorkflowItem] = _VersionedStore("WorkflowItem", lambda item: item.id)

    async def get(self, item_id: str) -> Optional[WorkflowItem]:
        return self._store.get(item_id)

    async def get_by_prescription_id(self, prescription_id: str) -> Optional[WorkflowItem]:
        for item in self._store.values():
            if item.prescription_id == prescription_id:
                return item
        return None

    async def add(self, item: WorkflowItem) -> WorkflowItem:
        async with self._store.lock:
            return self._store.insert(item)

    async def save(self, item: WorkflowItem, expected_version: int) -> WorkflowItem:
        async with self._store.lock:
            return self._store.compare_and_swap(item, expected_version)

    async def find_by_states(self, states: List[WorkflowState], limit: int = 500) -> List[WorkflowItem]:
        wanted = set(states)
        return [item for item in self._store.values() if item.state in wanted][:limit]


class InMemoryVerificationSessionRepository(VerificationSessionRepository):
    def __init__(self) -> None:
        self._store: _VersionedStore[VerificationSession] = _VersionedStore(
            "VerificationSession", lambda session: session.id
        )

    def _open_session_for_fill(self, fill_id: str) -> Optional[VerificationSession]:
        for session in self._store.values():
            if session.fill_id == fill_id and session.status == VerificationStatus.IN_PROGRESS:
                return session
        return None

    async def get(self, session_id: str) -> Optional[VerificationSession]:
        return self._store.get(session_id)

    async def add(self, session: VerificationSession) -> VerificationSession:
        async with self._store.lock:
            if session.status == VerificationStatus.IN_PROGRESS:
                existing = self._open_session_for_fill(session.fill_id)
                if existing is not None:
                    raise VerificationInProgressError(session.fill_id, existing.id)
            return self._store.insert(session)

    async def save(self, session: VerificationSession, expected_version: int) -> VerificationSession:
        async with self._store.lock:
            return self._store.compare_and_swap(session, expected_version)

    async def find_in_progress_by_fill(self, fill_id: str) -> Optional[VerificationSession]:
        return self._open_session_for_fill(fill_id)

    async def find_by_prescription(self, prescription_id: str) -> List[VerificationSession]:
        return [s for s in self._store.values() if s.prescription_id == prescription_id]


class InMemoryPickupSessionRepository(PickupSessionRepository):
    def __init__(self) -> None:
        self._store: _VersionedStore[PickupSession] = _VersionedStore(
            "PickupSession", lambda session: session.id
        )

    async def get(self, session_id: str) -> Optional[PickupSession]:
        return self._store.get(session_id)

    async def add(self, session: PickupSession) -> PickupSession:
        async with self._store.lock:
            return self._store.insert(session)

    async def save(self, session: PickupSession, expected_version: int) -> PickupSession:
        async with self._store.lock:
            return self._store.compare_and_swap(session, expected_version)


class InMemoryWillCallBinRepository(WillCallBinRepository):
    def __init__(self) -> None:
        self._store: _VersionedStore[WillCallBin] = _VersionedStore("WillCallBin", lambda bin: bin.bin_id)

    async def get(self, bin_id: str) -> Optional[WillCallBin]:
        return self._store.get(bin_id)

    async def add(self, bin: WillCallBin) -> WillCallBin:
        async with self._store.lock:
            return self._store.insert(bin)

    async def save(self, bin: WillCallBin, expected_version: int) -> WillCallBin:
        async with self._store.lock:
            return self._store.compare_and_swap(bin, expected_version)

    async def list_active(self, limit: int = 1000) -> List[WillCallBin]:
        return [bin for bin in self._store.values() if bin.is_active][:limit]

    async def list_awaiting_restock(self, limit: int = 1000) -> List[WillCallBin]:
        return [
            bin for bin in self._store.values() if bin.insurance_reversed and bin.returned_to_stock_at is None
        ][:limit]

    async def find_by_prescription(self, prescription_id: str) -> Optional[WillCallBin]:
        for bin in self._store.values():
            if bin.prescription_id == prescription_id:
                return bin
        return None
