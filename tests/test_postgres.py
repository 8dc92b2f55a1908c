"""Tests for the PostgreSQL backend with a mocked connection."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock, patch

import psycopg
import pytest

from listing_engine.backends.postgres import (
    PROPERTY_COLUMNS,
    SCHEMA_SQL,
    PostgresBackend,
    property_to_row,
    row_to_property,
)
from listing_engine.exceptions import (
    PropertyNotFoundError,
    SavedRecordNotFoundError,
    StorageError,
)
from listing_engine.models import Property


def _property_row(prop: Property) -> dict[str, Any]:
    return dict(zip(PROPERTY_COLUMNS, property_to_row(prop)))


@pytest.fixture
def cursor() -> MagicMock:
    """Async cursor whose results are set per test."""
    cur = MagicMock()
    cur.execute = AsyncMock()
    cur.fetchone = AsyncMock(return_value=None)
    cur.fetchall = AsyncMock(return_value=[])
    cur.rowcount = 1
    return cur


@pytest.fixture
def conn(cursor: MagicMock) -> MagicMock:
    """Async connection handing out ``cursor``."""
    connection = MagicMock()
    connection.cursor.return_value.__aenter__.return_value = cursor
    connection.cursor.return_value.__aexit__.return_value = False
    connection.transaction.return_value.__aenter__.return_value = None
    connection.transaction.return_value.__aexit__.return_value = False
    connection.close = AsyncMock()
    return connection


@pytest.fixture
def pg(conn: MagicMock) -> PostgresBackend:
    return PostgresBackend(conn)


class TestRowMapping:
    """Tests for row flattening."""

    def test_row_round_trip(self, make_property: Callable[..., Property]) -> None:
        prop = make_property(4)

        assert row_to_property(_property_row(prop)) == prop

    def test_row_without_coordinates(self, make_property: Callable[..., Property]) -> None:
        row = _property_row(make_property(4, coordinates=None))

        assert row["lat"] is None
        assert row_to_property(row).coordinates is None

    def test_amenities_are_sorted(self, make_property: Callable[..., Property]) -> None:
        row = _property_row(make_property(4, amenities=frozenset({"Pool", "Gym"})))

        assert row["amenities"] == ["Gym", "Pool"]
        assert row["property_type"] == "House"


class TestConnect:
    """Tests for connecting and schema setup."""

    def test_connect(self, conn: MagicMock) -> None:
        with patch(
            "listing_engine.backends.postgres.psycopg.AsyncConnection.connect",
            new=AsyncMock(return_value=conn),
        ) as connect:
            backend = asyncio.run(PostgresBackend.connect("postgresql://u:p@h:5432/db"))

        assert backend.conn is conn
        assert connect.await_args.args == ("postgresql://u:p@h:5432/db",)
        assert connect.await_args.kwargs["autocommit"] is True

    def test_connect_failure(self) -> None:
        with patch(
            "listing_engine.backends.postgres.psycopg.AsyncConnection.connect",
            new=AsyncMock(side_effect=psycopg.OperationalError("down")),
        ):
            with pytest.raises(StorageError, match="connect failed"):
                asyncio.run(PostgresBackend.connect("postgresql://u:p@h:5432/db"))

    def test_ensure_schema(self, pg: PostgresBackend, cursor: MagicMock) -> None:
        asyncio.run(pg.ensure_schema())

        cursor.execute.assert_awaited_once_with(SCHEMA_SQL)

    def test_close(self, pg: PostgresBackend, conn: MagicMock) -> None:
        asyncio.run(pg.close())

        conn.close.assert_awaited_once()


class TestProperties:
    """Tests for property statements."""

    def test_fetch_properties(
        self, pg: PostgresBackend, cursor: MagicMock, make_property: Callable[..., Property]
    ) -> None:
        cursor.fetchall.return_value = [_property_row(make_property(1)), _property_row(make_property(2))]

        result = asyncio.run(pg.fetch_properties())

        assert [p.id for p in result] == [1, 2]
        assert "ORDER BY id" in cursor.execute.await_args.args[0]

    def test_fetch_property_by_id(
        self, pg: PostgresBackend, cursor: MagicMock, make_property: Callable[..., Property]
    ) -> None:
        cursor.fetchone.return_value = _property_row(make_property(3))

        assert asyncio.run(pg.fetch_property_by_id(3)).id == 3
        assert cursor.execute.await_args.args[1] == (3,)

    def test_fetch_property_missing(self, pg: PostgresBackend) -> None:
        with pytest.raises(PropertyNotFoundError):
            asyncio.run(pg.fetch_property_by_id(3))

    def test_insert_uses_next_id_under_lock(
        self, pg: PostgresBackend, conn: MagicMock, cursor: MagicMock, make_property: Callable[..., Property]
    ) -> None:
        cursor.fetchone.return_value = {"next_id": 8}

        stored = asyncio.run(pg.insert_property(make_property(0)))

        statements = [call.args[0] for call in cursor.execute.await_args_list]
        assert stored.id == 8
        assert statements[0].startswith("LOCK TABLE properties")
        assert "MAX(id)" in statements[1]
        assert cursor.execute.await_args_list[2].args[1][0] == 8
        conn.transaction.assert_called_once()

    def test_replace_property(
        self, pg: PostgresBackend, cursor: MagicMock, make_property: Callable[..., Property]
    ) -> None:
        prop = make_property(2)

        assert asyncio.run(pg.replace_property(prop)) == prop
        assert cursor.execute.await_args.args[1][-1] == 2

    def test_replace_missing(
        self, pg: PostgresBackend, cursor: MagicMock, make_property: Callable[..., Property]
    ) -> None:
        cursor.rowcount = 0

        with pytest.raises(PropertyNotFoundError):
            asyncio.run(pg.replace_property(make_property(2)))

    def test_remove_property(
        self, pg: PostgresBackend, cursor: MagicMock, make_property: Callable[..., Property]
    ) -> None:
        cursor.fetchone.return_value = _property_row(make_property(2))

        assert asyncio.run(pg.remove_property(2)).id == 2
        assert "RETURNING" in cursor.execute.await_args.args[0]

    def test_remove_missing(self, pg: PostgresBackend) -> None:
        with pytest.raises(PropertyNotFoundError):
            asyncio.run(pg.remove_property(2))

    def test_driver_error_becomes_storage_error(self, pg: PostgresBackend, cursor: MagicMock) -> None:
        cursor.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(StorageError, match="fetch properties failed"):
            asyncio.run(pg.fetch_properties())


class TestSavedRecords:
    """Tests for saved-record statements."""

    ROW = {
        "id": 1,
        "property_id": 7,
        "saved_date": datetime(2024, 6, 1, tzinfo=timezone.utc),
        "notes": "",
    }

    def test_fetch_saved_records(self, pg: PostgresBackend, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = [self.ROW]

        records = asyncio.run(pg.fetch_saved_records())

        assert records[0].property_id == 7
        assert records[0].saved_date == self.ROW["saved_date"]

    def test_create_saved_record(self, pg: PostgresBackend, conn: MagicMock, cursor: MagicMock) -> None:
        cursor.fetchone.return_value = self.ROW

        record = asyncio.run(pg.create_saved_record(7))

        assert record.id == 1
        assert cursor.execute.await_args.args[1] == (7,)
        conn.transaction.assert_called_once()

    def test_delete_saved_record(self, pg: PostgresBackend, cursor: MagicMock) -> None:
        assert asyncio.run(pg.delete_saved_record(1)) is None
        assert cursor.execute.await_args.args[1] == (1,)

    def test_delete_missing(self, pg: PostgresBackend, cursor: MagicMock) -> None:
        cursor.rowcount = 0

        with pytest.raises(SavedRecordNotFoundError):
            asyncio.run(pg.delete_saved_record(1))

    def test_update_saved_record(self, pg: PostgresBackend, cursor: MagicMock) -> None:
        cursor.fetchone.return_value = {**self.ROW, "notes": "Call agent"}

        record = asyncio.run(pg.update_saved_record(1, "Call agent"))

        assert record.notes == "Call agent"
        assert cursor.execute.await_args.args[1] == ("Call agent", 1)

    def test_update_missing(self, pg: PostgresBackend) -> None:
        with pytest.raises(SavedRecordNotFoundError):
            asyncio.run(pg.update_saved_record(1, "x"))
