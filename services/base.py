"""
Shared plumbing for the entity services.
"""

from typing import Any

from core.errors import NotFoundError, ValidationError
from core.storage import BaseCollection, BaseRecordStore, Record


# Keys the store owns; never accepted from clients
RESERVED_FIELDS = ("id", "_id")


class CollectionService:
    """
    Base for services that wrap one record collection.

    Subclasses set COLLECTION_NAME and ENTITY_NAME.
    """

    COLLECTION_NAME: str = ""
    ENTITY_NAME: str = "Record"

    def __init__(self, store: BaseRecordStore):
        self._collection: BaseCollection = store.collection(self.COLLECTION_NAME)

    async def get(self, record_id: str) -> dict[str, Any]:
        """Get one record as a dict, or raise NotFoundError."""
        record = await self._require(record_id)
        return record.to_dict()

    async def _require(self, record_id: str) -> Record:
        record = await self._collection.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.ENTITY_NAME} {record_id} not found")
        return record


def client_fields(fields: Any) -> dict[str, Any]:
    """
    Validate an arbitrary client payload and drop store-owned keys.

    Raises:
        ValidationError: If the payload is not a JSON object
    """
    if not isinstance(fields, dict):
        raise ValidationError("Request body must be a JSON object")
    return {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}
