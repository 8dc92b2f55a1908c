"""In-memory backend holding mock listing data."""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from listing_engine.backends.base import StorageBackend, next_id
from listing_engine.exceptions import (
    InvalidEntityError,
    PropertyNotFoundError,
    SavedRecordNotFoundError,
)
from listing_engine.models import Property, SavedRecord
from listing_engine.serialization import property_from_dict, saved_record_from_dict

logger = logging.getLogger(__name__)


class MemoryBackend(StorageBackend):
    """Keep both collections in process memory.

    Parameters
    ----------
    properties : Iterable[Property] | None
        Initial listings.
    saved_records : Iterable[SavedRecord] | None
        Initial bookmarks.
    latency_ms : float
        Simulated round-trip delay awaited before every call.
    """

    def __init__(
        self,
        properties: Iterable[Property] | None = None,
        saved_records: Iterable[SavedRecord] | None = None,
        latency_ms: float = 0.0,
    ) -> None:
        self._properties: list[Property] = [copy.deepcopy(p) for p in properties or []]
        self._saved: list[SavedRecord] = [copy.deepcopy(r) for r in saved_records or []]
        self._latency = latency_ms / 1000.0
        _check_unique("Property id", [p.id for p in self._properties])
        _check_unique("SavedRecord id", [r.id for r in self._saved])
        _check_unique("SavedRecord property_id", [r.property_id for r in self._saved])

    @classmethod
    def from_seed_file(cls, path: str | Path, latency_ms: float = 0.0) -> MemoryBackend:
        """Load a JSON seed file.

        The file holds either a list of properties or an object with
        ``properties`` and ``savedProperties`` lists, in the camelCase
        mock-data layout.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        if isinstance(data, list):
            data = {"properties": data}
        properties = [property_from_dict(item) for item in data.get("properties", [])]
        saved = [saved_record_from_dict(item) for item in data.get("savedProperties", [])]
        logger.info(
            "Loaded %d properties and %d saved records from %s", len(properties), len(saved), path
        )
        return cls(properties, saved, latency_ms=latency_ms)

    async def _simulate_latency(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

    def _property_index(self, property_id: int) -> int:
        for index, prop in enumerate(self._properties):
            if prop.id == property_id:
                return index
        raise PropertyNotFoundError(f"Property {property_id} not found")

    def _saved_index(self, record_id: int) -> int:
        for index, record in enumerate(self._saved):
            if record.id == record_id:
                return index
        raise SavedRecordNotFoundError(f"Saved record {record_id} not found")

    async def fetch_properties(self) -> list[Property]:
        await self._simulate_latency()
        return copy.deepcopy(self._properties)

    async def fetch_property_by_id(self, property_id: int) -> Property:
        await self._simulate_latency()
        return copy.deepcopy(self._properties[self._property_index(property_id)])

    async def insert_property(self, prop: Property) -> Property:
        await self._simulate_latency()
        stored = replace(copy.deepcopy(prop), id=next_id(p.id for p in self._properties))
        self._properties.append(stored)
        return copy.deepcopy(stored)

    async def replace_property(self, prop: Property) -> Property:
        await self._simulate_latency()
        index = self._property_index(prop.id)
        self._properties[index] = copy.deepcopy(prop)
        return copy.deepcopy(prop)

    async def remove_property(self, property_id: int) -> Property:
        await self._simulate_latency()
        return self._properties.pop(self._property_index(property_id))

    async def fetch_saved_records(self) -> list[SavedRecord]:
        await self._simulate_latency()
        return copy.deepcopy(self._saved)

    async def create_saved_record(self, property_id: int) -> SavedRecord:
        await self._simulate_latency()
        record = SavedRecord(
            id=next_id(r.id for r in self._saved),
            property_id=property_id,
            saved_date=datetime.now(timezone.utc),
            notes="",
        )
        self._saved.append(record)
        return copy.deepcopy(record)

    async def delete_saved_record(self, record_id: int) -> None:
        await self._simulate_latency()
        del self._saved[self._saved_index(record_id)]

    async def update_saved_record(self, record_id: int, notes: str) -> SavedRecord:
        await self._simulate_latency()
        index = self._saved_index(record_id)
        self._saved[index] = replace(self._saved[index], notes=notes)
        return copy.deepcopy(self._saved[index])


def _check_unique(label: str, values: list[int]) -> None:
    seen: set[int] = set()
    for value in values:
        if value in seen:
            raise InvalidEntityError(f"Duplicate {label}: {value}")
        seen.add(value)
