"""Multi-criteria filtering of listings."""

from __future__ import annotations

from typing import Callable, Sequence

from listing_engine.models import FilterCriteria, Property

Predicate = Callable[[Property], bool]


class FilterEvaluator:
    """Keep the listings that satisfy every active criterion.

    Numeric bounds are inclusive. ``property_types`` is a membership test
    and ``amenities`` requires every requested amenity to be present.
    Inactive criteria keep everything, in input order.
    """

    def predicates(self, criteria: FilterCriteria) -> list[Predicate]:
        """Build one predicate per active dimension."""
        checks: list[Predicate] = []
        if criteria.price_min is not None:
            checks.append(lambda p, bound=criteria.price_min: p.price >= bound)
        if criteria.price_max is not None:
            checks.append(lambda p, bound=criteria.price_max: p.price <= bound)
        if criteria.property_types:
            checks.append(lambda p, types=criteria.property_types: p.property_type in types)
        if criteria.bedrooms_min is not None:
            checks.append(lambda p, bound=criteria.bedrooms_min: p.bedrooms >= bound)
        if criteria.bathrooms_min is not None:
            checks.append(lambda p, bound=criteria.bathrooms_min: p.bathrooms >= bound)
        if criteria.square_feet_min is not None:
            checks.append(lambda p, bound=criteria.square_feet_min: p.square_feet >= bound)
        if criteria.amenities:
            checks.append(lambda p, wanted=criteria.amenities: wanted <= p.amenities)
        return checks

    def filter(
        self, properties: Sequence[Property], criteria: FilterCriteria | None = None
    ) -> list[Property]:
        if criteria is None:
            return list(properties)

        checks = self.predicates(criteria)
        if not checks:
            return list(properties)
        return [prop for prop in properties if all(check(prop) for check in checks)]
