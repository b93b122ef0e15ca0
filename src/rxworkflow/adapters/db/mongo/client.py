"""
Motor client and repository wiring.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from ....core.config import DatabaseSettings
from .repositories import (
    MongoPickupSessionRepository,
    MongoVerificationSessionRepository,
    MongoWillCallBinRepository,
    MongoWorkflowItemRepository,
)

logger = logging.getLogger("rxworkflow")


@dataclass
class MongoRepositories:
    client: AsyncIOMotorClient
    workflow_items: MongoWorkflowItemRepository
    verification_sessions: MongoVerificationSessionRepository
    pickup_sessions: MongoPickupSessionRepository
    will_call_bins: MongoWillCallBinRepository

    async def ensure_indexes(self) -> None:
        await self.workflow_items.ensure_indexes()
        await self.verification_sessions.ensure_indexes()
        await self.pickup_sessions.ensure_indexes()
        await self.will_call_bins.ensure_indexes()
        logger.info("MongoDB indexes ensured")

    def close(self) -> None:
        self.client.close()


def create_mongo_client(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Client that returns timezone-aware datetimes."""
    return AsyncIOMotorClient(settings.uri, tz_aware=True, serverSelectionTimeoutMS=5000)


def build_mongo_repositories(
    settings: DatabaseSettings, client: Optional[AsyncIOMotorClient] = None
) -> MongoRepositories:
    client = client or create_mongo_client(settings)
    db = client[settings.db_name]
    return MongoRepositories(
        client=client,
        workflow_items=MongoWorkflowItemRepository(db[settings.workflow_items_collection]),
        verification_sessions=MongoVerificationSessionRepository(db[settings.verification_sessions_collection]),
        pickup_sessions=MongoPickupSessionRepository(db[settings.pickup_sessions_collection]),
        will_call_bins=MongoWillCallBinRepository(db[settings.will_call_bins_collection]),
    )
