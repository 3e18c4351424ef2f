"""
Storage factory for creating record store instances.

This module provides factory functions to create the appropriate
storage implementation based on configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from core.logging import get_logger
from core.storage.base import BaseRecordStore


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MONGODB = "mongodb"
    POSTGRES = "postgres"
    MEMORY = "memory"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_record_store(
    settings: "Settings",
    indexes: Optional[dict[str, str]] = None,
) -> BaseRecordStore:
    """
    Create a record store instance based on settings.

    Args:
        settings: Application settings
        indexes: Collection name -> timestamp field to index, where the
            backend supports per-collection indexes

    Returns:
        Configured store instance (not yet initialized)
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.MONGODB:
        from core.storage.mongodb import MongoDBRecordStore

        logger.info(
            "Creating MongoDB record store",
            database=settings.mongodb_database,
        )
        return MongoDBRecordStore(
            connection_string=settings.mongodb_url,
            database_name=settings.mongodb_database,
            username=settings.mongodb_user,
            password=settings.mongodb_password,
            indexes=indexes,
        )

    elif backend == StorageBackend.POSTGRES:
        from core.storage.postgres import PostgresRecordStore

        logger.info("Creating PostgreSQL record store")
        return PostgresRecordStore(
            async_connection_string=settings.postgres_async_url,
            echo=settings.debug and settings.log_level.upper() == "DEBUG",
        )

    elif backend == StorageBackend.MEMORY:
        from core.storage.memory import MemoryRecordStore

        logger.info("Creating in-memory record store")
        return MemoryRecordStore()

    else:
        raise ValueError(f"Unsupported backend: {backend}")
