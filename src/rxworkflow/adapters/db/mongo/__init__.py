"""
MongoDB persistence (motor).
"""

from .client import MongoRepositories, build_mongo_repositories, create_mongo_client
from .codec import from_document, to_document
from .repositories import (
    MongoPickupSessionRepository,
    MongoVerificationSessionRepository,
    MongoWillCallBinRepository,
    MongoWorkflowItemRepository,
)

__all__ = [
    "MongoRepositories",
    "build_mongo_repositories",
    "create_mongo_client",
    "from_document",
    "to_document",
    "MongoWorkflowItemRepository",
    "MongoVerificationSessionRepository",
    "MongoPickupSessionRepository",
    "MongoWillCallBinRepository",
]
