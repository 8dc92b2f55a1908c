"""Saved-set manager: one bookmark per property, flipped by toggling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from listing_engine.backends.base import StorageBackend
from listing_engine.exceptions import InvalidEntityError, SavedRecordNotFoundError
from listing_engine.models import (
    SavedProperty,
    SavedRecord,
    ToggleAction,
    ToggleResult,
    coerce_id,
)
from listing_engine.store.locks import KeyedLock

if TYPE_CHECKING:
    from listing_engine.store.properties import PropertyStore

logger = logging.getLogger(__name__)


class SavedSetManager:
    """Owns the saved-record collection.

    ``toggle_save`` is the only operation that adds or removes records. It
    holds a per-property lock across the existence check and the mutation,
    so concurrent toggles of one property never leave two records behind.

    Parameters
    ----------
    backend : StorageBackend
        Storage collaborator.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend
        self._locks = KeyedLock()

    async def get_all(self) -> list[SavedRecord]:
        """Return every saved record in insertion order."""
        return await self._backend.fetch_saved_records()

    async def get_by_id(self, record_id: int | str) -> SavedRecord:
        """Return the saved record with ``record_id``."""
        rid = coerce_id(record_id)
        for record in await self._backend.fetch_saved_records():
            if record.id == rid:
                return record
        raise SavedRecordNotFoundError(f"Saved record {rid} not found")

    async def _find(self, property_id: int) -> SavedRecord | None:
        for record in await self._backend.fetch_saved_records():
            if record.property_id == property_id:
                return record
        return None

    async def is_property_saved(self, property_id: int | str) -> bool:
        """True iff a saved record points at ``property_id``."""
        return await self._find(coerce_id(property_id)) is not None

    async def toggle_save(self, property_id: int | str) -> ToggleResult:
        """Save the property if it is not saved, otherwise unsave it.

        Unsaving discards the record and its notes; saving again creates a
        fresh record with empty notes.

        Parameters
        ----------
        property_id : int | str
            Property to flip.

        Returns
        -------
        ToggleResult
            ``added`` with the new record, or ``removed`` with the deleted one.
        """
        pid = coerce_id(property_id)
        async with self._locks.hold(pid):
            existing = await self._find(pid)
            if existing is not None:
                await self._backend.delete_saved_record(existing.id)
                result = ToggleResult(action=ToggleAction.REMOVED, record=existing)
            else:
                record = await self._backend.create_saved_record(pid)
                result = ToggleResult(action=ToggleAction.ADDED, record=record)

        logger.info(
            "Toggled property %d: %s",
            pid,
            result.action.value,
            extra={"property_id": pid, "record_id": result.record.id, "action": result.action.value},
        )
        return result

    async def update(self, record_id: int | str, patch: Mapping[str, Any]) -> SavedRecord:
        """Change the notes of a saved record.

        Only ``notes`` is editable. An ``id`` in the patch is ignored; any
        other key is rejected.

        Raises
        ------
        SavedRecordNotFoundError
            If no saved record has that id.
        InvalidEntityError
            If the patch touches a field other than ``notes``.
        """
        rid = coerce_id(record_id)
        extra = set(patch) - {"notes", "id", "Id"}
        if extra:
            raise InvalidEntityError(f"Only notes can be updated, got {', '.join(sorted(extra))}")
        if "notes" not in patch:
            return await self.get_by_id(rid)

        notes = patch["notes"]
        if notes is None:
            notes = ""
        if not isinstance(notes, str):
            raise InvalidEntityError(f"notes must be text, got {notes!r}")
        record = await self._backend.update_saved_record(rid, notes)
        logger.info("Updated notes of saved record %d", rid, extra={"record_id": rid})
        return record

    async def get_saved_properties(self, store: PropertyStore) -> list[SavedProperty]:
        """Join every saved record with its property, in saved-record order.

        Raises
        ------
        PropertyNotFoundError
            If a record points at a property that no longer exists.
        """
        records = await self._backend.fetch_saved_records()
        return [
            SavedProperty(property=await store.get_by_id(record.property_id), record=record)
            for record in records
        ]
