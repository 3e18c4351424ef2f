"""
Order records.

Orders carry arbitrary client fields (normally including a numeric
``total``). The service owns ``status`` and ``orderDate``.
"""

from typing import Any

from core.errors import NotFoundError, ValidationError
from core.logging import get_logger
from core.storage import SERVER_TIMESTAMP
from services.base import CollectionService, client_fields


logger = get_logger(__name__)

PENDING_STATUS = "pending"


class OrderService(CollectionService):
    """Creates orders as pending and lets callers move their status."""

    COLLECTION_NAME = "pedidos"
    ENTITY_NAME = "Order"
    TIMESTAMP_FIELD = "orderDate"

    async def create(self, fields: dict[str, Any]) -> str:
        """
        Place an order.

        Any client-supplied ``status`` is replaced with "pending".
        Returns the generated id.
        """
        data = {
            **client_fields(fields),
            "status": PENDING_STATUS,
            self.TIMESTAMP_FIELD: SERVER_TIMESTAMP,
        }
        record_id = await self._collection.add(data)
        logger.info(
            "Order created",
            order_id=record_id,
            total=data.get("total"),
        )
        return record_id

    async def list_all(self) -> list[dict[str, Any]]:
        """All orders, newest first."""
        records = await self._collection.order_by(self.TIMESTAMP_FIELD, descending=True)
        return [record.to_dict() for record in records]

    async def update_status(self, record_id: str, status: Any) -> None:
        """
        Overwrite the status of an order. Any non-empty string is accepted.

        Raises:
            ValidationError: If status is not a non-empty string
            NotFoundError: If the order does not exist
        """
        if not isinstance(status, str) or not status:
            raise ValidationError("status must be a non-empty string")

        found = await self._collection.update(record_id, {"status": status})
        if not found:
            raise NotFoundError(f"{self.ENTITY_NAME} {record_id} not found")

        logger.info("Order status updated", order_id=record_id, status=status)
