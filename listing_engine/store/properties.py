"""Property store: CRUD over listings."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from listing_engine.backends.base import StorageBackend
from listing_engine.models import Property, coerce_id
from listing_engine.serialization import merge_property, property_from_dict, to_dict
from listing_engine.store.locks import KeyedLock

logger = logging.getLogger(__name__)

_CREATE = object()


class PropertyStore:
    """Owns the property collection.

    Ids are assigned by the backend as ``max(existing) + 1``. Mutations of
    the same id, and all creations, are serialized.

    Parameters
    ----------
    backend : StorageBackend
        Storage collaborator.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend
        self._locks = KeyedLock()

    async def get_all(self) -> list[Property]:
        """Return every property in insertion order."""
        properties = await self._backend.fetch_properties()
        logger.debug("Fetched %d properties", len(properties))
        return properties

    async def get_by_id(self, property_id: int | str) -> Property:
        """Return the property with ``property_id``.

        Raises
        ------
        PropertyNotFoundError
            If no property has that id.
        """
        return await self._backend.fetch_property_by_id(coerce_id(property_id))

    async def create(self, draft: Mapping[str, Any] | Property) -> Property:
        """Store a new property and return it with its assigned id.

        Parameters
        ----------
        draft : Mapping[str, Any] | Property
            Property fields. Any id in the draft is ignored. ``Property``
            drafts are validated the same way as mappings.

        Returns
        -------
        Property
            Stored property.

        Raises
        ------
        InvalidEntityError
            If the draft does not describe a valid property.
        """
        fields = to_dict(draft) if isinstance(draft, Property) else draft
        prop = property_from_dict(
            {k: v for k, v in fields.items() if k not in ("id", "Id")}, require_id=False
        )
        async with self._locks.hold(_CREATE):
            stored = await self._backend.insert_property(prop)
        logger.info("Created property %d", stored.id, extra={"property_id": stored.id})
        return stored

    async def update(self, property_id: int | str, patch: Mapping[str, Any]) -> Property:
        """Merge ``patch`` into the property with ``property_id``.

        The id is never changed, even when ``patch`` carries one.

        Raises
        ------
        PropertyNotFoundError
            If no property has that id.
        InvalidEntityError
            If ``patch`` names unknown fields or invalid values.
        """
        pid = coerce_id(property_id)
        async with self._locks.hold(pid):
            current = await self._backend.fetch_property_by_id(pid)
            updated = await self._backend.replace_property(merge_property(current, patch))
        logger.info("Updated property %d", pid, extra={"property_id": pid})
        return updated

    async def delete(self, property_id: int | str) -> Property:
        """Remove and return the property with ``property_id``.

        Raises
        ------
        PropertyNotFoundError
            If no property has that id.
        """
        pid = coerce_id(property_id)
        async with self._locks.hold(pid):
            deleted = await self._backend.remove_property(pid)
        logger.info("Deleted property %d", pid, extra={"property_id": pid})
        return deleted
