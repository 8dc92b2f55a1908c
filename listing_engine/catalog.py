"""Choices offered by the filter panel."""

from listing_engine.models.enums import PropertyType

PROPERTY_TYPES: list[str] = [property_type.value for property_type in PropertyType]

AMENITIES: list[str] = [
    "Pool",
    "Gym",
    "Parking",
    "Balcony",
    "Garden",
    "Fireplace",
    "Air Conditioning",
    "Dishwasher",
    "Washer/Dryer",
    "Pet Friendly",
]
