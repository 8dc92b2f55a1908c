"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from listing_engine.backends import MemoryBackend
from listing_engine.models import Address, Coordinates, Property, PropertyType
from listing_engine.store import PropertyStore, SavedSetManager


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def make_property() -> Callable[..., Property]:
    """Factory for properties with sensible defaults."""

    def _make(property_id: int, **overrides: Any) -> Property:
        values: dict[str, Any] = {
            "id": property_id,
            "title": f"Listing {property_id}",
            "price": 300_000,
            "address": Address(
                street=f"{property_id} Oak Avenue",
                city="Springfield",
                state="IL",
                zip_code="62701",
            ),
            "property_type": PropertyType.HOUSE,
            "description": "A test listing.",
            "bedrooms": 3,
            "bathrooms": 2,
            "square_feet": 1500,
            "images": [f"https://img.test/{property_id}/0.jpg"],
            "amenities": frozenset({"Parking"}),
            "listing_date": datetime(2024, 5, 1, tzinfo=timezone.utc),
            "coordinates": Coordinates(lat=39.78, lng=-89.65),
        }
        values.update(overrides)
        return Property(**values)

    return _make


@pytest.fixture
def listings(make_property: Callable[..., Property]) -> list[Property]:
    """Four listings spread over the filter dimensions."""
    return [
        make_property(
            1,
            title="Sunny Condo near Main Street",
            price=150_000,
            property_type=PropertyType.CONDO,
            bedrooms=1,
            bathrooms=1,
            square_feet=700,
            amenities=frozenset({"Pool"}),
            address=Address(street="12 Main St", city="Austin", state="TX", zip_code="78701"),
        ),
        make_property(
            2,
            title="Family House with Garden",
            price=350_000,
            property_type=PropertyType.HOUSE,
            bedrooms=4,
            bathrooms=2.5,
            square_feet=2400,
            amenities=frozenset({"Pool", "Gym", "Garden"}),
            address=Address(street="8 Elm Road", city="Denver", state="CO", zip_code="80202"),
        ),
        make_property(
            3,
            title="Modern House",
            price=500_000,
            property_type=PropertyType.HOUSE,
            bedrooms=5,
            bathrooms=3,
            square_feet=3200,
            amenities=frozenset({"Gym"}),
            address=Address(street="400 Mainsail Drive", city="Boulder", state="CO", zip_code="80301"),
        ),
        make_property(
            4,
            title="Downtown Apartment",
            price=220_000,
            property_type=PropertyType.APARTMENT,
            bedrooms=2,
            bathrooms=1.5,
            square_feet=950,
            amenities=frozenset({"Gym", "Parking"}),
            address=Address(street="77 Pine Street", city="Portland", state="OR", zip_code="97205"),
        ),
    ]


@pytest.fixture
def backend(listings: list[Property]) -> MemoryBackend:
    """Memory backend seeded with ``listings`` and no saved records."""
    return MemoryBackend(listings)


@pytest.fixture
def store(backend: MemoryBackend) -> PropertyStore:
    """Property store over the seeded backend."""
    return PropertyStore(backend)


@pytest.fixture
def saved(backend: MemoryBackend) -> SavedSetManager:
    """Saved-set manager over the seeded backend."""
    return SavedSetManager(backend)
