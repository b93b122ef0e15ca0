"""
Entity <-> MongoDB document mapping.

Entities stay plain frozen dataclasses. A pydantic ``TypeAdapter`` per entity
type dumps them in JSON mode (enums by value, Decimals, dates and datetimes as
strings, tuples as arrays) and validates stored documents back into entities.
"""

from functools import lru_cache
from typing import Any, Dict, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from ....core.exceptions import PersistenceError

T = TypeVar("T")


@lru_cache(maxsize=None)
def entity_adapter(entity_cls: type) -> TypeAdapter:
    return TypeAdapter(entity_cls)


def to_document(entity: Any, id_field: str) -> Dict[str, Any]:
    """Top-level document with ``_id`` taken from ``id_field``."""
    document = entity_adapter(type(entity)).dump_python(entity, mode="json")
    document["_id"] = document[id_field]
    return document


def from_document(cls: Type[T], document: Dict[str, Any]) -> T:
    """Rebuild an entity from a stored document; unknown keys are ignored."""
    try:
        return entity_adapter(cls).validate_python(document)
    except ValidationError as e:
        raise PersistenceError(
            f"Stored {cls.__name__} document is invalid",
            {"errors": [error["msg"] for error in e.errors()]},
        ) from e
