"""Conversion between entities and plain dicts.

Outbound, entities become JSON-ready dicts (``to_dict``) or records in the
camelCase mock-data layout (``property_to_record``). Inbound, dicts in
either spelling are decoded and validated into entities.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from listing_engine.exceptions import InvalidEntityError
from listing_engine.models.base import Address, Coordinates, coerce_id
from listing_engine.models.enums import PropertyType
from listing_engine.models.property import Property
from listing_engine.models.saved import SavedRecord

PROPERTY_KEYS: dict[str, str] = {
    "Id": "id",
    "squareFeet": "square_feet",
    "propertyType": "property_type",
    "listingDate": "listing_date",
}
ADDRESS_KEYS: dict[str, str] = {"zipCode": "zip_code"}
SAVED_RECORD_KEYS: dict[str, str] = {
    "Id": "id",
    "propertyId": "property_id",
    "savedDate": "saved_date",
}

PROPERTY_FIELDS = frozenset(Property.__dataclass_fields__)
ADDRESS_FIELDS = frozenset(Address.__dataclass_fields__)
COORDINATE_FIELDS = frozenset(Coordinates.__dataclass_fields__)
SAVED_RECORD_FIELDS = frozenset(SavedRecord.__dataclass_fields__)


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (frozenset, set)):
        return sorted(serialize_value(v) for v in value)
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidEntityError(f"Invalid timestamp: {value!r}") from exc
    else:
        raise InvalidEntityError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _rename(data: Mapping[str, Any], aliases: Mapping[str, str], allowed: frozenset[str], entity: str) -> dict[str, Any]:
    """Map camelCase keys to field names and reject unknown keys."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        name = aliases.get(key, key)
        if name not in allowed:
            raise InvalidEntityError(f"{entity} has no field {key!r}")
        result[name] = value
    return result


def _non_negative(name: str, value: Any, *, integral: bool = False) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidEntityError(f"{name} must be a number, got {value!r}")
    if value < 0:
        raise InvalidEntityError(f"{name} must not be negative, got {value!r}")
    if integral:
        if value != int(value):
            raise InvalidEntityError(f"{name} must be a whole number, got {value!r}")
        return int(value)
    return value


def address_from_dict(data: Mapping[str, Any] | Address) -> Address:
    """Decode an address."""
    if isinstance(data, Address):
        return Address(**asdict(data))
    if not isinstance(data, Mapping):
        raise InvalidEntityError(f"address must be a mapping, got {data!r}")
    values = _rename(data, ADDRESS_KEYS, ADDRESS_FIELDS, "Address")
    missing = ADDRESS_FIELDS - values.keys()
    if missing:
        raise InvalidEntityError(f"Address is missing {', '.join(sorted(missing))}")
    return Address(**{name: str(value) for name, value in values.items()})


def coordinates_from_dict(data: Mapping[str, Any] | Coordinates | None) -> Coordinates | None:
    """Decode coordinates; ``None`` stays ``None``."""
    if data is None:
        return None
    if isinstance(data, Coordinates):
        return Coordinates(lat=data.lat, lng=data.lng)
    if not isinstance(data, Mapping):
        raise InvalidEntityError(f"coordinates must be a mapping, got {data!r}")
    values = _rename(data, {}, COORDINATE_FIELDS, "Coordinates")
    try:
        return Coordinates(lat=float(values["lat"]), lng=float(values["lng"]))
    except KeyError as exc:
        raise InvalidEntityError(f"Coordinates is missing {exc.args[0]}") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidEntityError(f"Invalid coordinates: {data!r}") from exc


def property_from_dict(data: Mapping[str, Any], *, require_id: bool = True) -> Property:
    """Decode and validate a property.

    Parameters
    ----------
    data : Mapping[str, Any]
        Property fields, snake_case or camelCase.
    require_id : bool
        When False (drafts), a missing id is stored as ``0`` until the
        backend assigns one.

    Returns
    -------
    Property
        Decoded property.
    """
    values = _rename(data, PROPERTY_KEYS, PROPERTY_FIELDS, "Property")
    required = {"title", "price", "address", "property_type"}
    if require_id:
        required.add("id")
    missing = required - values.keys()
    if missing:
        raise InvalidEntityError(f"Property is missing {', '.join(sorted(missing))}")

    try:
        property_type = PropertyType(values["property_type"])
    except ValueError as exc:
        raise InvalidEntityError(f"Unknown property type: {values['property_type']!r}") from exc

    bathrooms = _non_negative("bathrooms", values.get("bathrooms", 0))
    if (bathrooms * 2) != int(bathrooms * 2):
        raise InvalidEntityError(f"bathrooms must be in half steps, got {bathrooms!r}")

    images = values.get("images") or []
    amenities = values.get("amenities") or []
    if isinstance(images, str) or isinstance(amenities, str):
        raise InvalidEntityError("images and amenities must be collections of strings")

    return Property(
        id=coerce_id(values["id"]) if "id" in values else 0,
        title=str(values["title"]),
        price=_non_negative("price", values["price"], integral=True),
        address=address_from_dict(values["address"]),
        property_type=property_type,
        description=str(values.get("description") or ""),
        bedrooms=_non_negative("bedrooms", values.get("bedrooms", 0)),
        bathrooms=bathrooms,
        square_feet=_non_negative("square_feet", values.get("square_feet", 0), integral=True),
        images=[str(url) for url in images],
        amenities=frozenset(str(item) for item in amenities),
        listing_date=parse_datetime(values.get("listing_date")),
        coordinates=coordinates_from_dict(values.get("coordinates")),
    )


def saved_record_from_dict(data: Mapping[str, Any]) -> SavedRecord:
    """Decode a saved record; textual property ids become integers."""
    values = _rename(data, SAVED_RECORD_KEYS, SAVED_RECORD_FIELDS, "SavedRecord")
    missing = {"id", "property_id", "saved_date"} - values.keys()
    if missing:
        raise InvalidEntityError(f"SavedRecord is missing {', '.join(sorted(missing))}")
    saved_date = parse_datetime(values["saved_date"])
    if saved_date is None:
        raise InvalidEntityError("SavedRecord is missing saved_date")
    return SavedRecord(
        id=coerce_id(values["id"]),
        property_id=coerce_id(values["property_id"]),
        saved_date=saved_date,
        notes=str(values.get("notes") or ""),
    )


def merge_property(prop: Property, patch: Mapping[str, Any]) -> Property:
    """Apply ``patch`` to ``prop`` and return the merged property.

    The id never changes: ``id``/``Id`` keys in the patch are dropped.
    Nested ``address`` and ``coordinates`` mappings are merged field by
    field rather than replacing the whole value.
    """
    changes = _rename(
        {k: v for k, v in patch.items() if k not in ("id", "Id")},
        PROPERTY_KEYS,
        PROPERTY_FIELDS,
        "Property",
    )
    merged = to_dict(prop)
    for nested in ("address", "coordinates"):
        current = merged.get(nested)
        change = changes.get(nested)
        if isinstance(current, dict) and isinstance(change, Mapping):
            changes[nested] = {**current, **change}
    merged.update(changes)
    merged["id"] = prop.id
    return property_from_dict(merged)


def property_to_record(prop: Property) -> dict[str, Any]:
    """Render a property in the camelCase mock-data layout."""
    data = to_dict(prop)
    record = {"Id": data.pop("id")}
    reverse = {name: key for key, name in PROPERTY_KEYS.items() if name != "id"}
    for name, value in data.items():
        record[reverse.get(name, name)] = value
    record["address"] = {
        "zipCode" if k == "zip_code" else k: v for k, v in record["address"].items()
    }
    return record


def saved_record_to_record(record: SavedRecord) -> dict[str, Any]:
    """Render a saved record in the camelCase mock-data layout."""
    return {
        "Id": record.id,
        "propertyId": str(record.property_id),
        "savedDate": serialize_value(record.saved_date),
        "notes": record.notes,
    }
