"""Filter criteria model.

Every dimension is optional. Numeric bounds are inactive while ``None``;
set-valued dimensions are inactive while empty. Payloads coming from the
presentation layer use camelCase keys (``priceMin``, ``propertyTypes``);
both spellings are accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Mapping

from listing_engine.exceptions import InvalidCriteriaError
from listing_engine.models.enums import PropertyType

CAMEL_CASE_KEYS: dict[str, str] = {
    "priceMin": "price_min",
    "priceMax": "price_max",
    "propertyTypes": "property_types",
    "bedroomsMin": "bedrooms_min",
    "bathroomsMin": "bathrooms_min",
    "squareFeetMin": "square_feet_min",
    "amenities": "amenities",
}

NUMERIC_FIELDS = ("price_min", "price_max", "bedrooms_min", "bathrooms_min", "square_feet_min")


@dataclass(frozen=True)
class FilterCriteria:
    """Multi-dimensional filter configuration applied after text search."""

    price_min: int | None = None
    price_max: int | None = None
    property_types: frozenset[PropertyType] = field(default_factory=frozenset)
    bedrooms_min: float | None = None
    bathrooms_min: float | None = None
    square_feet_min: int | None = None
    amenities: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidCriteriaError(f"{name} must be a number, got {value!r}")

        object.__setattr__(self, "property_types", _to_property_types(self.property_types))
        object.__setattr__(self, "amenities", _to_amenities(self.amenities))

    @property
    def is_active(self) -> bool:
        """True when at least one dimension restricts the result."""
        if self.property_types or self.amenities:
            return True
        return any(getattr(self, name) is not None for name in NUMERIC_FIELDS)

    def merge(self, changes: Mapping[str, Any]) -> FilterCriteria:
        """Return a copy with the given dimensions replaced.

        Parameters
        ----------
        changes : Mapping[str, Any]
            Dimensions to change, snake_case or camelCase. ``None`` (or an
            empty list) switches a dimension off.

        Returns
        -------
        FilterCriteria
            New criteria; ``self`` is left untouched.
        """
        return replace(self, **_normalize(changes))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> FilterCriteria:
        """Parse a criteria payload; ``None`` or ``{}`` gives inactive criteria."""
        if not data:
            return cls()
        return cls(**_normalize(data))

    def to_dict(self) -> dict[str, Any]:
        """Render as the camelCase payload used by the presentation layer."""
        result: dict[str, Any] = {}
        for camel, name in CAMEL_CASE_KEYS.items():
            value = getattr(self, name)
            if isinstance(value, frozenset):
                value = sorted(item.value if isinstance(item, PropertyType) else item for item in value)
            result[camel] = value
        return result


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase keys to field names and reject unknown keys."""
    names = {f.name for f in fields(FilterCriteria)}
    result: dict[str, Any] = {}
    for key, value in data.items():
        name = CAMEL_CASE_KEYS.get(key, key)
        if name not in names:
            raise InvalidCriteriaError(f"Unknown filter criterion: {key!r}")
        if name in ("property_types", "amenities") and value is None:
            value = frozenset()
        result[name] = value
    return result


def _to_property_types(values: Iterable[Any]) -> frozenset[PropertyType]:
    if isinstance(values, str):
        values = [values]
    try:
        items = list(values)
    except TypeError as exc:
        raise InvalidCriteriaError(f"property_types must be a collection, got {values!r}") from exc
    try:
        return frozenset(PropertyType(value) for value in items)
    except ValueError as exc:
        raise InvalidCriteriaError(f"Unknown property type in {items!r}") from exc


def _to_amenities(values: Iterable[Any]) -> frozenset[str]:
    if isinstance(values, str):
        values = [values]
    try:
        amenities = frozenset(values)
    except TypeError as exc:
        raise InvalidCriteriaError(f"amenities must be a collection, got {values!r}") from exc
    if not all(isinstance(item, str) for item in amenities):
        raise InvalidCriteriaError("amenities must be strings")
    return amenities
