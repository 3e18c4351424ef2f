"""
In-memory record store.

Keeps documents in process memory. Used by the test-suite and for running
the API locally without a database.
"""

import itertools
import uuid
from copy import deepcopy
from typing import Any, Optional

from core.logging import get_logger
from core.storage.base import (
    BaseCollection,
    BaseRecordStore,
    Record,
    resolve_server_timestamps,
)


logger = get_logger(__name__)


class _StoredDocument:
    """Internal representation of a stored document."""

    def __init__(self, seq: int, data: dict[str, Any]):
        self.seq = seq
        self.data = data


class MemoryCollection(BaseCollection):
    """Dict-backed collection. Documents are copied in and out."""

    def __init__(self, name: str, counter: "itertools.count[int]"):
        super().__init__(name)
        self._documents: dict[str, _StoredDocument] = {}
        self._counter = counter

    async def add(self, data: dict[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        self._documents[record_id] = _StoredDocument(
            seq=next(self._counter),
            data=deepcopy(resolve_server_timestamps(data)),
        )
        return record_id

    async def get_all(self) -> list[Record]:
        return [self._to_record(rid, doc) for rid, doc in self._documents.items()]

    async def get(self, record_id: str) -> Optional[Record]:
        doc = self._documents.get(record_id)
        if doc is None:
            return None
        return self._to_record(record_id, doc)

    async def update(self, record_id: str, fields: dict[str, Any]) -> bool:
        doc = self._documents.get(record_id)
        if doc is None:
            return False
        doc.data.update(deepcopy(resolve_server_timestamps(fields)))
        return True

    async def delete(self, record_id: str) -> bool:
        return self._documents.pop(record_id, None) is not None

    async def order_by(self, field_name: str, descending: bool = True) -> list[Record]:
        # Missing values sort lowest, like MongoDB; insertion order breaks ties
        def sort_key(item: tuple[str, _StoredDocument]) -> tuple:
            value = item[1].data.get(field_name)
            return (value is not None, value if value is not None else 0, item[1].seq)

        items = sorted(self._documents.items(), key=sort_key, reverse=descending)
        return [self._to_record(rid, doc) for rid, doc in items]

    @staticmethod
    def _to_record(record_id: str, doc: _StoredDocument) -> Record:
        return Record(id=record_id, data=deepcopy(doc.data))


class MemoryRecordStore(BaseRecordStore):
    """
    In-process implementation of BaseRecordStore.

    Usage:
        store = MemoryRecordStore()
        await store.setup()
        record_id = await store.collection("produtos").add({"name": "Caneca"})
    """

    def __init__(self):
        self._collections: dict[str, MemoryCollection] = {}
        self._counter = itertools.count()

    async def setup(self) -> None:
        logger.info("Memory record store initialized")

    def collection(self, name: str) -> MemoryCollection:
        if name not in self._collections:
            self._collections[name] = MemoryCollection(name, self._counter)
        return self._collections[name]

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        logger.info("Memory record store closed")
