"""
Customer records.
"""

from typing import Any

from core.logging import get_logger
from core.storage import SERVER_TIMESTAMP
from services.base import CollectionService, client_fields


logger = get_logger(__name__)


class CustomerService(CollectionService):
    """Stores arbitrary customer fields plus a registration timestamp."""

    COLLECTION_NAME = "clientes"
    ENTITY_NAME = "Customer"
    TIMESTAMP_FIELD = "registrationDate"

    async def create(self, fields: dict[str, Any]) -> str:
        """Register a customer. Returns the generated id."""
        data = {
            **client_fields(fields),
            self.TIMESTAMP_FIELD: SERVER_TIMESTAMP,
        }
        record_id = await self._collection.add(data)
        logger.info("Customer created", customer_id=record_id)
        return record_id

    async def list_all(self) -> list[dict[str, Any]]:
        """All customers, newest first."""
        records = await self._collection.order_by(self.TIMESTAMP_FIELD, descending=True)
        return [record.to_dict() for record in records]
