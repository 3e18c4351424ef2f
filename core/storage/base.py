"""
Abstract base classes for record store backends.

This module defines the contracts that all storage implementations must follow,
enabling pluggable backends for the document collections behind the API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


class _ServerTimestamp:
    """Sentinel replaced by the store with the write time."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls) -> "_ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_server_timestamps(
    data: dict[str, Any],
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Return a copy of ``data`` with every SERVER_TIMESTAMP value set to ``now``."""
    now = now or utcnow()
    return {
        key: now if value is SERVER_TIMESTAMP else value
        for key, value in data.items()
    }


@dataclass
class Record:
    """
    A stored document and its store-generated identifier.

    ``data`` never contains the identifier; it is kept apart so that
    client-supplied fields cannot shadow it.
    """
    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the API representation ``{"id": ..., **fields}``."""
        return {"id": self.id, **self.data}


class BaseCollection(ABC):
    """
    Abstract document collection keyed by an opaque identifier.

    Identifiers are generated by the backend on ``add`` and never reassigned.
    Lookups with an identifier the backend cannot parse behave as "not found".
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def add(self, data: dict[str, Any]) -> str:
        """
        Insert a new document.

        SERVER_TIMESTAMP values are resolved at write time.
        Returns the generated identifier.
        """
        pass

    @abstractmethod
    async def get_all(self) -> list[Record]:
        """Return every document in store-native order."""
        pass

    @abstractmethod
    async def get(self, record_id: str) -> Optional[Record]:
        """Get a document by identifier."""
        pass

    @abstractmethod
    async def update(self, record_id: str, fields: dict[str, Any]) -> bool:
        """
        Overwrite the given top-level fields of a document.

        Fields not named are left untouched.
        Returns True if the document was found.
        """
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """
        Remove a document.

        Returns True if a document was removed.
        """
        pass

    @abstractmethod
    async def order_by(self, field_name: str, descending: bool = True) -> list[Record]:
        """Return every document sorted by a top-level field."""
        pass


class BaseRecordStore(ABC):
    """
    Abstract base class for record store backends.

    A store owns the connection to the database and hands out
    collections by name. The API lifespan owns its lifecycle.
    """

    @abstractmethod
    async def setup(self) -> None:
        """
        Open connections and create indexes/tables.

        This should be idempotent - safe to call multiple times.
        """
        pass

    @abstractmethod
    def collection(self, name: str) -> BaseCollection:
        """Get a collection handle by name."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend is reachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (connections, pools)."""
        pass
