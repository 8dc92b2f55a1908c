"""Enumeration types for listing entities."""

from enum import Enum


class PropertyType(str, Enum):
    HOUSE = "House"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    APARTMENT = "Apartment"


class ToggleAction(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
