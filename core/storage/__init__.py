"""
Storage abstraction layer.

Provides pluggable record store backends for the API's document
collections (customers, products, orders).

Supported backends:
- MongoDB (recommended for production)
- PostgreSQL (JSONB document table)
- Memory (tests and local development)
"""

from core.storage.base import (
    SERVER_TIMESTAMP,
    BaseCollection,
    BaseRecordStore,
    Record,
)
from core.storage.factory import (
    create_record_store,
    get_storage_backend,
    StorageBackend,
)

__all__ = [
    # Abstract interfaces
    "BaseCollection",
    "BaseRecordStore",
    "Record",
    "SERVER_TIMESTAMP",
    # Factory functions
    "create_record_store",
    "get_storage_backend",
    "StorageBackend",
]
