"""Free-text search over listing fields."""

from __future__ import annotations

from typing import Sequence

from listing_engine.models import Property


class SearchIndex:
    """Case-insensitive substring match on title, street, city and zip code.

    A listing matches when the lower-cased query occurs in any one of the
    fields. Zip codes are compared as stored. Matches keep their input
    order.
    """

    def search(self, query: str | None, properties: Sequence[Property]) -> list[Property]:
        if not query or not query.strip():
            return list(properties)

        term = query.lower()
        return [prop for prop in properties if self.matches(prop, term)]

    @staticmethod
    def matches(prop: Property, term: str) -> bool:
        """True if the already lower-cased ``term`` hits one of the fields."""
        address = prop.address
        return (
            term in prop.title.lower()
            or term in address.street.lower()
            or term in address.city.lower()
            or term in address.zip_code
        )
