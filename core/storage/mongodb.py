"""
MongoDB storage backend implementation.

One MongoDB collection per entity collection. Identifiers are the
generated ObjectIds rendered as hex strings.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from bson import ObjectId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from core.errors import StoreError
from core.logging import get_logger
from core.storage.base import (
    BaseCollection,
    BaseRecordStore,
    Record,
    resolve_server_timestamps,
)


logger = get_logger(__name__)


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    """Re-raise driver failures as StoreError, keeping the driver message."""
    try:
        yield
    except PyMongoError as e:
        logger.error(
            "MongoDB operation failed",
            operation=operation,
            collection=collection,
            error=str(e),
        )
        raise StoreError(str(e)) from e


def to_object_id(record_id: str) -> Optional[ObjectId]:
    """Parse an API identifier; None when it is not a valid ObjectId."""
    if not ObjectId.is_valid(record_id):
        return None
    return ObjectId(record_id)


def document_to_record(doc: dict[str, Any]) -> Record:
    """Split a raw MongoDB document into a Record."""
    doc = dict(doc)
    record_id = str(doc.pop("_id"))
    return Record(id=record_id, data=doc)


class MongoDBCollection(BaseCollection):
    """BaseCollection backed by a motor collection."""

    def __init__(self, name: str, collection: AsyncIOMotorCollection):
        super().__init__(name)
        self._collection = collection

    async def add(self, data: dict[str, Any]) -> str:
        doc = resolve_server_timestamps(data)
        doc.pop("_id", None)
        with _store_errors("add", self.name):
            result = await self._collection.insert_one(doc)

        logger.debug(
            "Document inserted",
            collection=self.name,
            record_id=str(result.inserted_id),
        )
        return str(result.inserted_id)

    async def get_all(self) -> list[Record]:
        with _store_errors("get_all", self.name):
            docs = await self._collection.find({}).to_list(length=None)
        return [document_to_record(doc) for doc in docs]

    async def get(self, record_id: str) -> Optional[Record]:
        oid = to_object_id(record_id)
        if oid is None:
            return None
        with _store_errors("get", self.name):
            doc = await self._collection.find_one({"_id": oid})
        if doc is None:
            return None
        return document_to_record(doc)

    async def update(self, record_id: str, fields: dict[str, Any]) -> bool:
        oid = to_object_id(record_id)
        if oid is None:
            return False
        with _store_errors("update", self.name):
            result = await self._collection.update_one(
                {"_id": oid},
                {"$set": resolve_server_timestamps(fields)},
            )
        return result.matched_count > 0

    async def delete(self, record_id: str) -> bool:
        oid = to_object_id(record_id)
        if oid is None:
            return False
        with _store_errors("delete", self.name):
            result = await self._collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def order_by(self, field_name: str, descending: bool = True) -> list[Record]:
        direction = DESCENDING if descending else ASCENDING
        with _store_errors("order_by", self.name):
            cursor = self._collection.find({}).sort(
                [(field_name, direction), ("_id", direction)]
            )
            docs = await cursor.to_list(length=None)
        return [document_to_record(doc) for doc in docs]


class MongoDBRecordStore(BaseRecordStore):
    """
    MongoDB-based record store.

    Uses a single motor client for all collections.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str = "loja",
        username: Optional[str] = None,
        password: Optional[str] = None,
        indexes: Optional[dict[str, str]] = None,
    ):
        """
        Initialize MongoDB record store.

        Args:
            connection_string: MongoDB connection URI
            database_name: Database name
            username: Optional user, passed to the client separately from the URI
            password: Optional password
            indexes: Collection name -> field to index descending at setup
        """
        self._connection_string = connection_string
        self._database_name = database_name
        self._username = username
        self._password = password
        self._indexes = indexes or {}
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    async def setup(self) -> None:
        """Initialize connection and create indexes."""
        if self._client is not None:
            return

        credentials: dict[str, Any] = {}
        if self._username:
            credentials["username"] = self._username
            credentials["password"] = self._password

        self._client = AsyncIOMotorClient(
            self._connection_string,
            tz_aware=True,
            **credentials,
        )
        self._db = self._client[self._database_name]

        for name, field_name in self._indexes.items():
            with _store_errors("create_index", name):
                await self._db[name].create_index([(field_name, DESCENDING)])

        logger.info(
            "MongoDB record store initialized",
            database=self._database_name,
            indexed_collections=list(self._indexes),
        )

    @property
    def _database(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise StoreError("Record store not initialized. Call setup() first.")
        return self._db

    def collection(self, name: str) -> MongoDBCollection:
        return MongoDBCollection(name, self._database[name])

    async def ping(self) -> bool:
        try:
            await self._database.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB ping failed", error=str(e))
            return False
        return True

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
        logger.info("MongoDB record store closed")
