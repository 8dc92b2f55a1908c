"""Storage collaborator interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from listing_engine.models import Property, SavedRecord


def next_id(ids: Iterable[int]) -> int:
    """Return ``max(ids) + 1``, or ``1`` for an empty collection."""
    return max(ids, default=0) + 1


class StorageBackend(ABC):
    """CRUD over the property and saved-record collections.

    Implementations raise ``PropertyNotFoundError`` or
    ``SavedRecordNotFoundError`` for unknown ids and ``StorageError`` for
    transport failures. Returned entities are detached copies.
    """

    @abstractmethod
    async def fetch_properties(self) -> list[Property]:
        """All properties in insertion order."""

    @abstractmethod
    async def fetch_property_by_id(self, property_id: int) -> Property:
        """The property with ``property_id``."""

    @abstractmethod
    async def insert_property(self, prop: Property) -> Property:
        """Store ``prop`` under the next free id and return the stored copy."""

    @abstractmethod
    async def replace_property(self, prop: Property) -> Property:
        """Overwrite the stored property that has ``prop.id``."""

    @abstractmethod
    async def remove_property(self, property_id: int) -> Property:
        """Remove and return the property with ``property_id``."""

    @abstractmethod
    async def fetch_saved_records(self) -> list[SavedRecord]:
        """All saved records in insertion order."""

    @abstractmethod
    async def create_saved_record(self, property_id: int) -> SavedRecord:
        """Create a record for ``property_id`` with empty notes, saved now."""

    @abstractmethod
    async def delete_saved_record(self, record_id: int) -> None:
        """Delete the saved record with ``record_id``."""

    @abstractmethod
    async def update_saved_record(self, record_id: int, notes: str) -> SavedRecord:
        """Replace the notes of the saved record with ``record_id``."""

    async def close(self) -> None:
        """Release backend resources."""
