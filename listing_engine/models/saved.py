"""Saved-property (bookmark) models."""

from dataclasses import dataclass
from datetime import datetime

from listing_engine.models.enums import ToggleAction
from listing_engine.models.property import Property


@dataclass
class SavedRecord:
    """A user's bookmark of one property.

    At most one record exists per ``property_id``. ``saved_date`` is set
    when the record is created; only ``notes`` is editable afterwards.
    """

    id: int
    property_id: int  # References Property.id
    saved_date: datetime
    notes: str = ""


@dataclass
class ToggleResult:
    """Outcome of flipping the saved state of a property."""

    action: ToggleAction
    record: SavedRecord


@dataclass
class SavedProperty:
    """A saved record joined with the property it points at."""

    property: Property
    record: SavedRecord
