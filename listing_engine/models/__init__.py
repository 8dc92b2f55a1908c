"""Domain models for listings and saved properties."""

from listing_engine.models.base import Address, Coordinates, coerce_id
from listing_engine.models.criteria import FilterCriteria
from listing_engine.models.enums import PropertyType, ToggleAction
from listing_engine.models.property import Property
from listing_engine.models.saved import SavedProperty, SavedRecord, ToggleResult

__all__ = [
    "Address",
    "Coordinates",
    "FilterCriteria",
    "Property",
    "PropertyType",
    "SavedProperty",
    "SavedRecord",
    "ToggleAction",
    "ToggleResult",
    "coerce_id",
]
