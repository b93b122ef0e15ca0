"""
MongoDB repositories built on motor.

Each entity is one document keyed by its id. Updates are compare-and-swap:
``replace_one`` filters on the expected ``version`` and a zero match count
means another writer got there first.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from ....application.ports.repositories.pickup_session_repo import PickupSessionRepository
from ....application.ports.repositories.verification_session_repo import (
    VerificationSessionRepository,
)
from ....application.ports.repositories.will_call_bin_repo import WillCallBinRepository
from ....application.ports.repositories.workflow_item_repo import WorkflowItemRepository
from ....core.exceptions import ConcurrentModificationError, PersistenceError
from ....domain.entities.pickup import PickupSession
from ....domain.entities.verification import VerificationSession
from ....domain.entities.will_call import WillCallBin
from ....domain.entities.workflow_item import WorkflowItem
from ....domain.enums.verification import VerificationStatus
from ....domain.enums.workflow import WorkflowState
from ....domain.errors import DuplicateEntityError, VerificationInProgressError
from .codec import from_document, to_document

logger = logging.getLogger("rxworkflow")

T = TypeVar("T")


class _MongoStore(Generic[T]):
    """Versioned document store for one entity type."""

    def __init__(self, collection: Any, entity_cls: Type[T], id_field: str) -> None:
        self.collection = collection
        self.entity_cls = entity_cls
        self.id_field = id_field
        self.entity_type = entity_cls.__name__

    def decode(self, document: Optional[Dict[str, Any]]) -> Optional[T]:
        if document is None:
            return None
        return from_document(self.entity_cls, document)

    async def get(self, entity_id: str) -> Optional[T]:
        try:
            document = await self.collection.find_one({"_id": entity_id})
        except PyMongoError as e:
            logger.error("Failed to load %s %s: %s", self.entity_type, entity_id, e)
            raise PersistenceError(f"Failed to load {self.entity_type} '{entity_id}'") from e
        return self.decode(document)

    async def find(self, query: Dict[str, Any], limit: int) -> List[T]:
        try:
            cursor = self.collection.find(query).limit(limit)
            documents = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error("Failed to query %s: %s", self.entity_type, e)
            raise PersistenceError(f"Failed to query {self.entity_type}") from e
        return [self.decode(document) for document in documents]

    async def insert(self, entity: T) -> T:
        stored = entity.with_changes(version=0)
        document = to_document(stored, self.id_field)
        try:
            await self.collection.insert_one(document)
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error("Failed to insert %s %s: %s", self.entity_type, document["_id"], e)
            raise PersistenceError(f"Failed to insert {self.entity_type} '{document['_id']}'") from e
        return stored

    async def compare_and_swap(self, entity: T, expected_version: int) -> T:
        stored = entity.with_changes(version=expected_version + 1)
        document = to_document(stored, self.id_field)
        entity_id = document["_id"]
        try:
            result = await self.collection.replace_one({"_id": entity_id, "version": expected_version}, document)
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error("Failed to save %s %s: %s", self.entity_type, entity_id, e)
            raise PersistenceError(f"Failed to save {self.entity_type} '{entity_id}'") from e

        if result.matched_count == 0:
            current = await self.collection.find_one({"_id": entity_id}, {"version": 1})
            actual = current.get("version") if current else None
            logger.warning(
                "CAS conflict on %s %s: expected %s, found %s",
                self.entity_type,
                entity_id,
                expected_version,
                actual,
            )
            raise ConcurrentModificationError(self.entity_type, entity_id, expected_version, actual)
        return stored


class MongoWorkflowItemRepository(WorkflowItemRepository):
    def __init__(self, collection: Any) -> None:
        self._store = _MongoStore(collection, WorkflowItem, "id")

    async def ensure_indexes(self) -> None:
        await self._store.collection.create_index([("prescription_id", ASCENDING)])
        await self._store.collection.create_index([("state", ASCENDING), ("priority", ASCENDING)])

    async def get(self, item_id: str) -> Optional[WorkflowItem]:
        return await self._store.get(item_id)

    async def get_by_prescription_id(self, prescription_id: str) -> Optional[WorkflowItem]:
        items = await self._store.find({"prescription_id": prescription_id}, limit=1)
        return items[0] if items else None

    async def add(self, item: WorkflowItem) -> WorkflowItem:
        try:
            return await self._store.insert(item)
        except DuplicateKeyError as e:
            raise DuplicateEntityError("WorkflowItem", item.id) from e

    async def save(self, item: WorkflowItem, expected_version: int) -> WorkflowItem:
        return await self._store.compare_and_swap(item, expected_version)

    async def find_by_states(self, states: List[WorkflowState], limit: int = 500) -> List[WorkflowItem]:
        return await self._store.find({"state": {"$in": [state.value for state in states]}}, limit)


class MongoVerificationSessionRepository(VerificationSessionRepository):
    """Verification sessions; a partial unique index keeps one open session per fill."""

    def __init__(self, collection: Any) -> None:
        self._store = _MongoStore(collection, VerificationSession, "id")

    async def ensure_indexes(self) -> None:
        await self._store.collection.create_index(
            [("fill_id", ASCENDING)],
            unique=True,
            name="one_open_session_per_fill",
            partialFilterExpression={"status": VerificationStatus.IN_PROGRESS.value},
        )
        await self._store.collection.create_index([("prescription_id", ASCENDING)])

    async def _raise_duplicate(self, session: VerificationSession, error: DuplicateKeyError) -> None:
        key_pattern = (error.details or {}).get("keyPattern", {})
        if "fill_id" in key_pattern:
            existing = await self.find_in_progress_by_fill(session.fill_id)
            raise VerificationInProgressError(
                session.fill_id, existing.id if existing else "unknown"
            ) from error
        raise DuplicateEntityError("VerificationSession", session.id) from error

    async def get(self, session_id: str) -> Optional[VerificationSession]:
        return await self._store.get(session_id)

    async def add(self, session: VerificationSession) -> VerificationSession:
        try:
            return await self._store.insert(session)
        except DuplicateKeyError as e:
            await self._raise_duplicate(session, e)

    async def save(self, session: VerificationSession, expected_version: int) -> VerificationSession:
        try:
            return await self._store.compare_and_swap(session, expected_version)
        except DuplicateKeyError as e:
            await self._raise_duplicate(session, e)

    async def find_in_progress_by_fill(self, fill_id: str) -> Optional[VerificationSession]:
        sessions = await self._store.find(
            {"fill_id": fill_id, "status": VerificationStatus.IN_PROGRESS.value}, limit=1
        )
        return sessions[0] if sessions else None

    async def find_by_prescription(self, prescription_id: str) -> List[VerificationSession]:
        return await self._store.find({"prescription_id": prescription_id}, limit=100)


class MongoPickupSessionRepository(PickupSessionRepository):
    def __init__(self, collection: Any) -> None:
        self._store = _MongoStore(collection, PickupSession, "id")

    async def ensure_indexes(self) -> None:
        await self._store.collection.create_index([("selected_patient_id", ASCENDING)])

    async def get(self, session_id: str) -> Optional[PickupSession]:
        return await self._store.get(session_id)

    async def add(self, session: PickupSession) -> PickupSession:
        try:
            return await self._store.insert(session)
        except DuplicateKeyError as e:
            raise DuplicateEntityError("PickupSession", session.id) from e

    async def save(self, session: PickupSession, expected_version: int) -> PickupSession:
        return await self._store.compare_and_swap(session, expected_version)


class MongoWillCallBinRepository(WillCallBinRepository):
    def __init__(self, collection: Any) -> None:
        self._store = _MongoStore(collection, WillCallBin, "bin_id")

    async def ensure_indexes(self) -> None:
        await self._store.collection.create_index(
            [("insurance_reversed", ASCENDING), ("picked_up_at", ASCENDING), ("return_to_stock_date", ASCENDING)]
        )
        await self._store.collection.create_index(
            [("insurance_reversed", ASCENDING), ("returned_to_stock_at", ASCENDING)]
        )
        await self._store.collection.create_index([("prescription_id", ASCENDING)])

    async def get(self, bin_id: str) -> Optional[WillCallBin]:
        return await self._store.get(bin_id)

    async def add(self, bin: WillCallBin) -> WillCallBin:
        try:
            return await self._store.insert(bin)
        except DuplicateKeyError as e:
            raise DuplicateEntityError("WillCallBin", bin.bin_id) from e

    async def save(self, bin: WillCallBin, expected_version: int) -> WillCallBin:
        return await self._store.compare_and_swap(bin, expected_version)

    async def list_active(self, limit: int = 1000) -> List[WillCallBin]:
        return await self._store.find({"insurance_reversed": False, "picked_up_at": None}, limit)

    async def list_awaiting_restock(self, limit: int = 1000) -> List[WillCallBin]:
        return await self._store.find({"insurance_reversed": True, "returned_to_stock_at": None}, limit)

    async def find_by_prescription(self, prescription_id: str) -> Optional[WillCallBin]:
        bins = await self._store.find({"prescription_id": prescription_id}, limit=1)
        return bins[0] if bins else None
