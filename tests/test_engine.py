"""Tests for engine assembly."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from listing_engine.backends import MemoryBackend, StorageBackend
from listing_engine.config import ListingEngineConfig, MemoryConfig
from listing_engine.engine import ListingEngine, open_engine
from listing_engine.models import ToggleAction


class TestListingEngine:
    """Tests for ListingEngine."""

    def test_from_backend_shares_backend(self, backend: MemoryBackend) -> None:
        engine = ListingEngine.from_backend(backend)

        assert engine.backend is backend
        assert engine.queries.store is engine.properties

    def test_end_to_end(self, backend: MemoryBackend) -> None:
        engine = ListingEngine.from_backend(backend)

        async def scenario() -> tuple[list[int], ToggleAction, list[int]]:
            async with engine:
                matches = await engine.queries.browse("main", {"priceMin": 200_000})
                toggled = await engine.saved.toggle_save(matches[0].id)
                joined = await engine.saved.get_saved_properties(engine.properties)
            return [p.id for p in matches], toggled.action, [s.property.id for s in joined]

        matches, action, saved_ids = asyncio.run(scenario())

        assert matches == [3]
        assert action is ToggleAction.ADDED
        assert saved_ids == [3]

    def test_close_closes_backend(self) -> None:
        backend = AsyncMock(spec=StorageBackend)

        asyncio.run(ListingEngine.from_backend(backend).close())

        backend.close.assert_awaited_once()

    def test_context_manager_closes_on_error(self) -> None:
        backend = AsyncMock(spec=StorageBackend)

        async def scenario() -> None:
            async with ListingEngine.from_backend(backend):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(scenario())
        backend.close.assert_awaited_once()


class TestOpenEngine:
    """Tests for open_engine."""

    def test_open_with_config(self) -> None:
        config = ListingEngineConfig(memory=MemoryConfig(generate_count=3), seed=5)

        async def scenario() -> int:
            async with await open_engine(config) as engine:
                return len(await engine.properties.get_all())

        assert asyncio.run(scenario()) == 3

    def test_open_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LISTINGS_BACKEND", "memory")
        monkeypatch.setenv("LISTINGS_GENERATE_COUNT", "2")
        monkeypatch.delenv("LISTINGS_SEED_PATH", raising=False)

        engine = asyncio.run(open_engine())

        assert isinstance(engine.backend, MemoryBackend)
        assert len(asyncio.run(engine.properties.get_all())) == 2
