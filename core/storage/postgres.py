"""
PostgreSQL storage backend implementation.

Stores every collection in one ``records`` table with a JSONB payload.
Timestamps are written as ISO-8601 strings inside the payload, so they
sort correctly as text.
"""

import json
import uuid
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Iterator, Optional

from sqlalchemy import (
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    delete,
    func,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from core.errors import StoreError
from core.logging import get_logger
from core.storage.base import (
    BaseCollection,
    BaseRecordStore,
    Record,
    resolve_server_timestamps,
)


logger = get_logger(__name__)

metadata = MetaData()

records_table = Table(
    "records",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("collection", String(64), nullable=False, index=True),
    Column("data", JSONB, nullable=False),
    Column(
        "created_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _json_serializer(value: Any) -> str:
    return json.dumps(value, default=_json_default)


@contextmanager
def _store_errors(operation: str, collection: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(
            "PostgreSQL operation failed",
            operation=operation,
            collection=collection,
            error=str(e),
        )
        raise StoreError(str(e)) from e


class PostgresCollection(BaseCollection):
    """BaseCollection backed by rows of the ``records`` table."""

    def __init__(self, name: str, engine: AsyncEngine):
        super().__init__(name)
        self._engine = engine

    async def add(self, data: dict[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        with _store_errors("add", self.name):
            async with self._engine.begin() as conn:
                await conn.execute(
                    insert(records_table).values(
                        id=record_id,
                        collection=self.name,
                        data=resolve_server_timestamps(data),
                    )
                )
        return record_id

    async def get_all(self) -> list[Record]:
        query = (
            select(records_table.c.id, records_table.c.data)
            .where(records_table.c.collection == self.name)
            .order_by(records_table.c.created_at, records_table.c.id)
        )
        return await self._fetch("get_all", query)

    async def get(self, record_id: str) -> Optional[Record]:
        query = select(records_table.c.id, records_table.c.data).where(
            records_table.c.collection == self.name,
            records_table.c.id == record_id,
        )
        rows = await self._fetch("get", query)
        return rows[0] if rows else None

    async def update(self, record_id: str, fields: dict[str, Any]) -> bool:
        with _store_errors("update", self.name):
            async with self._engine.begin() as conn:
                result = await conn.execute(
                    select(records_table.c.data)
                    .where(
                        records_table.c.collection == self.name,
                        records_table.c.id == record_id,
                    )
                    .with_for_update()
                )
                row = result.first()
                if row is None:
                    return False

                merged = {**row.data, **resolve_server_timestamps(fields)}
                await conn.execute(
                    update(records_table)
                    .where(records_table.c.id == record_id)
                    .values(data=merged)
                )
        return True

    async def delete(self, record_id: str) -> bool:
        with _store_errors("delete", self.name):
            async with self._engine.begin() as conn:
                result = await conn.execute(
                    delete(records_table).where(
                        records_table.c.collection == self.name,
                        records_table.c.id == record_id,
                    )
                )
        return result.rowcount > 0

    async def order_by(self, field_name: str, descending: bool = True) -> list[Record]:
        sort_value = records_table.c.data[field_name].astext
        if descending:
            ordering = [sort_value.desc().nulls_last(), records_table.c.created_at.desc()]
        else:
            ordering = [sort_value.asc().nulls_first(), records_table.c.created_at.asc()]

        query = (
            select(records_table.c.id, records_table.c.data)
            .where(records_table.c.collection == self.name)
            .order_by(*ordering)
        )
        return await self._fetch("order_by", query)

    async def _fetch(self, operation: str, query) -> list[Record]:
        with _store_errors(operation, self.name):
            async with self._engine.connect() as conn:
                result = await conn.execute(query)
                rows = result.all()
        return [Record(id=row.id, data=dict(row.data)) for row in rows]


class PostgresRecordStore(BaseRecordStore):
    """
    PostgreSQL-based record store.

    Uses an async SQLAlchemy engine (asyncpg driver).
    """

    def __init__(
        self,
        async_connection_string: str,
        echo: bool = False,
    ):
        """
        Initialize PostgreSQL record store.

        Args:
            async_connection_string: PostgreSQL async connection URI
            echo: Whether to log SQL statements
        """
        self._connection_string = async_connection_string
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None

    async def setup(self) -> None:
        """Initialize engine and create the records table."""
        if self._engine is not None:
            return

        self._engine = create_async_engine(
            self._connection_string,
            echo=self._echo,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            json_serializer=_json_serializer,
        )

        with _store_errors("setup", records_table.name):
            async with self._engine.begin() as conn:
                await conn.run_sync(metadata.create_all)

        logger.info("PostgreSQL record store initialized")

    @property
    def _active_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreError("Record store not initialized. Call setup() first.")
        return self._engine

    def collection(self, name: str) -> PostgresCollection:
        return PostgresCollection(name, self._active_engine)

    async def ping(self) -> bool:
        try:
            async with self._active_engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("PostgreSQL ping failed", error=str(e))
            return False
        return True

    async def close(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        logger.info("PostgreSQL record store closed")
