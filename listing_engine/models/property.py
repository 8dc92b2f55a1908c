"""Property model for real-estate listings."""

from dataclasses import dataclass, field
from datetime import datetime

from listing_engine.models.base import Address, Coordinates
from listing_engine.models.enums import PropertyType


@dataclass
class Property:
    """One listing available for view."""

    id: int
    title: str
    price: int  # Whole dollars
    address: Address
    property_type: PropertyType
    description: str = ""
    bedrooms: float = 0
    bathrooms: float = 0  # Half-bath steps (1.5, 2.5, ...)
    square_feet: int = 0
    images: list[str] = field(default_factory=list)  # Index 0 is the primary image
    amenities: frozenset[str] = field(default_factory=frozenset)
    listing_date: datetime | None = None
    coordinates: Coordinates | None = None
