"""
Tests for the storage factory and backend helpers that need no server.
"""

import pytest
from bson import ObjectId

from core.config import Settings
from core.storage import StorageBackend, create_record_store, get_storage_backend
from core.storage.memory import MemoryRecordStore
from core.storage.mongodb import MongoDBRecordStore, document_to_record, to_object_id
from core.storage.postgres import PostgresRecordStore


@pytest.mark.parametrize("backend, expected_type", [
    ("memory", MemoryRecordStore),
    ("mongodb", MongoDBRecordStore),
    ("postgres", PostgresRecordStore),
])
def test_create_record_store(backend, expected_type):
    settings = Settings(storage_backend=backend)

    store = create_record_store(settings)

    assert get_storage_backend(settings) == StorageBackend(backend)
    assert isinstance(store, expected_type)


def test_to_object_id():
    oid = ObjectId()

    assert to_object_id(str(oid)) == oid
    assert to_object_id("not-an-object-id") is None
    assert to_object_id("") is None


def test_document_to_record_stringifies_id():
    oid = ObjectId()

    record = document_to_record({"_id": oid, "name": "Caneca"})

    assert record.id == str(oid)
    assert record.data == {"name": "Caneca"}


def test_uninitialized_mongodb_store_refuses_collections():
    from core.errors import StoreError

    store = MongoDBRecordStore("mongodb://localhost:27017")

    with pytest.raises(StoreError):
        store.collection("clientes")
