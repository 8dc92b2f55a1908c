"""PostgreSQL backend for the remote record store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Iterator

import psycopg
from psycopg.rows import dict_row

from listing_engine.backends.base import StorageBackend
from listing_engine.exceptions import (
    PropertyNotFoundError,
    SavedRecordNotFoundError,
    StorageError,
)
from listing_engine.models import Property, SavedRecord
from listing_engine.serialization import property_from_dict, saved_record_from_dict

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS properties (
    id              INTEGER PRIMARY KEY,
    title           TEXT NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    price           INTEGER NOT NULL CHECK (price >= 0),
    street          TEXT NOT NULL,
    city            TEXT NOT NULL,
    state           TEXT NOT NULL,
    zip_code        TEXT NOT NULL,
    bedrooms        DOUBLE PRECISION NOT NULL DEFAULT 0,
    bathrooms       DOUBLE PRECISION NOT NULL DEFAULT 0,
    square_feet     INTEGER NOT NULL DEFAULT 0,
    property_type   TEXT NOT NULL,
    images          TEXT[] NOT NULL DEFAULT '{}',
    amenities       TEXT[] NOT NULL DEFAULT '{}',
    listing_date    TIMESTAMPTZ,
    lat             DOUBLE PRECISION,
    lng             DOUBLE PRECISION
);

CREATE TABLE IF NOT EXISTS saved_properties (
    id              INTEGER PRIMARY KEY,
    property_id     INTEGER NOT NULL UNIQUE,
    saved_date      TIMESTAMPTZ NOT NULL DEFAULT now(),
    notes           TEXT NOT NULL DEFAULT ''
);
"""

# Flattened column order shared by INSERT and UPDATE
PROPERTY_COLUMNS = [
    "id",
    "title",
    "description",
    "price",
    "street",
    "city",
    "state",
    "zip_code",
    "bedrooms",
    "bathrooms",
    "square_feet",
    "property_type",
    "images",
    "amenities",
    "listing_date",
    "lat",
    "lng",
]

SELECT_PROPERTIES_SQL = f"SELECT {', '.join(PROPERTY_COLUMNS)} FROM properties"  # noqa: S608
INSERT_PROPERTY_SQL = (
    f"INSERT INTO properties ({', '.join(PROPERTY_COLUMNS)}) "  # noqa: S608
    f"VALUES ({', '.join(['%s'] * len(PROPERTY_COLUMNS))})"
)
UPDATE_PROPERTY_SQL = (
    "UPDATE properties SET "  # noqa: S608
    + ", ".join(f"{col} = %s" for col in PROPERTY_COLUMNS[1:])
    + " WHERE id = %s"
)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as ``StorageError``."""
    try:
        yield
    except psycopg.Error as exc:
        logger.error("Storage operation %s failed: %s", operation, exc)
        raise StorageError(f"{operation} failed: {exc}") from exc


def property_to_row(prop: Property) -> list[Any]:
    """Flatten a property into ``PROPERTY_COLUMNS`` order."""
    coords = prop.coordinates
    return [
        prop.id,
        prop.title,
        prop.description,
        prop.price,
        prop.address.street,
        prop.address.city,
        prop.address.state,
        prop.address.zip_code,
        prop.bedrooms,
        prop.bathrooms,
        prop.square_feet,
        prop.property_type.value,
        list(prop.images),
        sorted(prop.amenities),
        prop.listing_date,
        coords.lat if coords else None,
        coords.lng if coords else None,
    ]


def row_to_property(row: dict[str, Any]) -> Property:
    """Rebuild a property from a ``dict_row``."""
    coordinates = None
    if row["lat"] is not None and row["lng"] is not None:
        coordinates = {"lat": row["lat"], "lng": row["lng"]}
    return property_from_dict(
        {
            "id": row["id"],
            "title": row["title"],
            "description": row["description"],
            "price": row["price"],
            "address": {
                "street": row["street"],
                "city": row["city"],
                "state": row["state"],
                "zip_code": row["zip_code"],
            },
            "bedrooms": row["bedrooms"],
            "bathrooms": row["bathrooms"],
            "square_feet": row["square_feet"],
            "property_type": row["property_type"],
            "images": row["images"] or [],
            "amenities": row["amenities"] or [],
            "listing_date": row["listing_date"],
            "coordinates": coordinates,
        }
    )


class PostgresBackend(StorageBackend):
    """Store both collections in PostgreSQL.

    The connection runs in autocommit mode; statements that must see a
    consistent ``MAX(id)`` run inside an explicit transaction holding a
    table lock.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self.conn = conn

    @classmethod
    async def connect(cls, connection_string: str) -> PostgresBackend:
        """Open a connection and return a backend bound to it."""
        with _storage_errors("connect"):
            conn = await psycopg.AsyncConnection.connect(
                connection_string, autocommit=True, row_factory=dict_row
            )
        logger.info("Connected to PostgreSQL")
        return cls(conn)

    async def ensure_schema(self) -> None:
        """Create the tables if they do not exist."""
        with _storage_errors("ensure schema"):
            async with self.conn.cursor() as cur:
                await cur.execute(SCHEMA_SQL)

    async def fetch_properties(self) -> list[Property]:
        with _storage_errors("fetch properties"):
            async with self.conn.cursor() as cur:
                await cur.execute(SELECT_PROPERTIES_SQL + " ORDER BY id")
                rows = await cur.fetchall()
        return [row_to_property(row) for row in rows]

    async def fetch_property_by_id(self, property_id: int) -> Property:
        with _storage_errors("fetch property"):
            async with self.conn.cursor() as cur:
                await cur.execute(SELECT_PROPERTIES_SQL + " WHERE id = %s", (property_id,))
                row = await cur.fetchone()
        if row is None:
            raise PropertyNotFoundError(f"Property {property_id} not found")
        return row_to_property(row)

    async def insert_property(self, prop: Property) -> Property:
        with _storage_errors("insert property"):
            async with self.conn.transaction():
                async with self.conn.cursor() as cur:
                    await cur.execute("LOCK TABLE properties IN SHARE ROW EXCLUSIVE MODE")
                    await cur.execute("SELECT COALESCE(MAX(id), 0) + 1 AS next_id FROM properties")
                    row = await cur.fetchone()
                    stored = replace(prop, id=row["next_id"])
                    await cur.execute(INSERT_PROPERTY_SQL, property_to_row(stored))
        return stored

    async def replace_property(self, prop: Property) -> Property:
        values = property_to_row(prop)
        with _storage_errors("update property"):
            async with self.conn.cursor() as cur:
                await cur.execute(UPDATE_PROPERTY_SQL, values[1:] + [prop.id])
                updated = cur.rowcount
        if not updated:
            raise PropertyNotFoundError(f"Property {prop.id} not found")
        return prop

    async def remove_property(self, property_id: int) -> Property:
        with _storage_errors("delete property"):
            async with self.conn.cursor() as cur:
                await cur.execute(
                    f"DELETE FROM properties WHERE id = %s RETURNING {', '.join(PROPERTY_COLUMNS)}",  # noqa: S608
                    (property_id,),
                )
                row = await cur.fetchone()
        if row is None:
            raise PropertyNotFoundError(f"Property {property_id} not found")
        return row_to_property(row)

    async def fetch_saved_records(self) -> list[SavedRecord]:
        with _storage_errors("fetch saved records"):
            async with self.conn.cursor() as cur:
                await cur.execute(
                    "SELECT id, property_id, saved_date, notes FROM saved_properties ORDER BY id"
                )
                rows = await cur.fetchall()
        return [saved_record_from_dict(row) for row in rows]

    async def create_saved_record(self, property_id: int) -> SavedRecord:
        with _storage_errors("create saved record"):
            async with self.conn.transaction():
                async with self.conn.cursor() as cur:
                    await cur.execute("LOCK TABLE saved_properties IN SHARE ROW EXCLUSIVE MODE")
                    await cur.execute(
                        "INSERT INTO saved_properties (id, property_id, saved_date, notes) "
                        "SELECT COALESCE(MAX(id), 0) + 1, %s, now(), '' FROM saved_properties "
                        "RETURNING id, property_id, saved_date, notes",
                        (property_id,),
                    )
                    row = await cur.fetchone()
        return saved_record_from_dict(row)

    async def delete_saved_record(self, record_id: int) -> None:
        with _storage_errors("delete saved record"):
            async with self.conn.cursor() as cur:
                await cur.execute("DELETE FROM saved_properties WHERE id = %s", (record_id,))
                deleted = cur.rowcount
        if not deleted:
            raise SavedRecordNotFoundError(f"Saved record {record_id} not found")

    async def update_saved_record(self, record_id: int, notes: str) -> SavedRecord:
        with _storage_errors("update saved record"):
            async with self.conn.cursor() as cur:
                await cur.execute(
                    "UPDATE saved_properties SET notes = %s WHERE id = %s "
                    "RETURNING id, property_id, saved_date, notes",
                    (notes, record_id),
                )
                row = await cur.fetchone()
        if row is None:
            raise SavedRecordNotFoundError(f"Saved record {record_id} not found")
        return saved_record_from_dict(row)

    async def close(self) -> None:
        with _storage_errors("close"):
            await self.conn.close()
