"""
Product records and their images.

Numeric fields arrive as text (multipart forms) or JSON numbers and are
coerced here; anything that does not parse is rejected with a
ValidationError instead of being stored.
"""

import math
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional

from core.errors import NotFoundError, ValidationError
from core.logging import get_logger
from core.storage import SERVER_TIMESTAMP, BaseRecordStore
from core.uploads import LocalUploadStorage
from services.base import CollectionService


logger = get_logger(__name__)


@dataclass
class ImageUpload:
    """A file received with a product creation request."""
    filename: Optional[str]
    file: BinaryIO


def parse_price(value: Any) -> float:
    """
    Coerce a price to float.

    Accepts ints, floats and numeric strings. Rejects missing, empty,
    boolean, non-numeric and non-finite input.
    """
    if isinstance(value, str):
        value = value.strip()
    if value is None or value == "":
        raise ValidationError("price is required")
    if isinstance(value, bool):
        raise ValidationError("price must be a number")

    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"price must be a number, got {value!r}")

    if not math.isfinite(price):
        raise ValidationError(f"price must be a finite number, got {value!r}")
    return price


def parse_stock(value: Any) -> int:
    """
    Coerce a stock quantity to int.

    Accepts ints, integral floats and integer strings.
    """
    if isinstance(value, str):
        value = value.strip()
    if value is None or value == "":
        raise ValidationError("stock is required")
    if isinstance(value, bool):
        raise ValidationError("stock must be an integer")

    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"stock must be an integer, got {value!r}")
        return int(value)

    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"stock must be an integer, got {value!r}")


class ProductService(CollectionService):
    """
    Product catalogue.

    The four mutable fields (name, description, price, stock) are always
    written together; imageUrl and creationDate are set once at creation.
    """

    COLLECTION_NAME = "produtos"
    ENTITY_NAME = "Product"
    TIMESTAMP_FIELD = "creationDate"

    def __init__(self, store: BaseRecordStore, uploads: LocalUploadStorage):
        super().__init__(store)
        self._uploads = uploads

    def _mutable_fields(
        self,
        name: Optional[str],
        description: Optional[str],
        price: Any,
        stock: Any,
    ) -> dict[str, Any]:
        return {
            "name": name,
            "description": description,
            "price": parse_price(price),
            "stock": parse_stock(stock),
        }

    async def create(
        self,
        *,
        name: Optional[str],
        description: Optional[str],
        price: Any,
        stock: Any,
        image: Optional[ImageUpload] = None,
    ) -> str:
        """
        Add a product, storing its image first when one was sent.

        Numeric fields are validated before anything is written. If the
        record write fails the stored image is removed again.

        Returns:
            The generated product id
        """
        data = self._mutable_fields(name, description, price, stock)

        image_url = None
        if image is not None:
            image_url = await self._uploads.save(image.filename, image.file)

        data["imageUrl"] = image_url
        data[self.TIMESTAMP_FIELD] = SERVER_TIMESTAMP

        try:
            record_id = await self._collection.add(data)
        except Exception:
            if image_url is not None:
                await self._uploads.remove(image_url)
            raise

        logger.info(
            "Product created",
            product_id=record_id,
            price=data["price"],
            stock=data["stock"],
            has_image=image_url is not None,
        )
        return record_id

    async def list_all(self) -> list[dict[str, Any]]:
        """All products in store order."""
        records = await self._collection.get_all()
        return [record.to_dict() for record in records]

    async def update(
        self,
        record_id: str,
        *,
        name: Optional[str],
        description: Optional[str],
        price: Any,
        stock: Any,
    ) -> None:
        """
        Overwrite name, description, price and stock.

        Raises:
            ValidationError: If price or stock do not parse
            NotFoundError: If the product does not exist
        """
        fields = self._mutable_fields(name, description, price, stock)
        found = await self._collection.update(record_id, fields)
        if not found:
            raise NotFoundError(f"{self.ENTITY_NAME} {record_id} not found")

        logger.info("Product updated", product_id=record_id)

    async def delete(self, record_id: str) -> None:
        """
        Remove a product and its stored image.

        Deleting an unknown id is a no-op.
        """
        record = await self._collection.get(record_id)
        if record is None:
            logger.info("Product not found on delete", product_id=record_id)
            return

        await self._collection.delete(record_id)
        await self._uploads.remove(record.data.get("imageUrl"))

        logger.info("Product deleted", product_id=record_id)
