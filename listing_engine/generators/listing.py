"""Listing generator for mock property data."""

from __future__ import annotations

from datetime import timezone

from listing_engine.catalog import AMENITIES
from listing_engine.generators.base import BaseGenerator
from listing_engine.models import Address, Coordinates, Property, PropertyType


class ListingGenerator(BaseGenerator[Property]):
    """Generate realistic US listings."""

    PROPERTY_TYPES = list(PropertyType)
    PROPERTY_TYPE_WEIGHTS = [0.45, 0.25, 0.15, 0.15]

    # Asking price ranges by type (USD)
    PRICE_RANGES = {
        PropertyType.HOUSE: (250_000, 1_500_000),
        PropertyType.CONDO: (150_000, 800_000),
        PropertyType.TOWNHOUSE: (200_000, 900_000),
        PropertyType.APARTMENT: (100_000, 600_000),
    }

    BEDROOM_RANGES = {
        PropertyType.HOUSE: (2, 6),
        PropertyType.CONDO: (1, 3),
        PropertyType.TOWNHOUSE: (2, 4),
        PropertyType.APARTMENT: (0, 3),
    }

    TITLE_ADJECTIVES = [
        "Charming",
        "Modern",
        "Spacious",
        "Renovated",
        "Sunny",
        "Cozy",
        "Elegant",
        "Bright",
    ]

    def generate(self, property_id: int) -> Property:
        """Generate a single listing.

        Parameters
        ----------
        property_id : int
            Id to assign.

        Returns
        -------
        Property
            Generated listing.
        """
        property_type = self.weighted_choice(self.PROPERTY_TYPES, self.PROPERTY_TYPE_WEIGHTS)
        low, high = self.PRICE_RANGES[property_type]
        bedrooms = self.random.randint(*self.BEDROOM_RANGES[property_type])
        city = self.fake.city()

        return Property(
            id=property_id,
            title=f"{self.random.choice(self.TITLE_ADJECTIVES)} {property_type.value} in {city}",
            description=self.fake.paragraph(nb_sentences=4),
            price=self.stepped_amount(low, high, 5_000),
            address=Address(
                street=self.fake.street_address(),
                city=city,
                state=self.fake.state_abbr(),
                zip_code=self.fake.zipcode(),
            ),
            bedrooms=bedrooms,
            bathrooms=max(1, bedrooms) / 2 + self.random.choice([0.5, 1.0, 1.5]),
            square_feet=self.random.randint(450 + bedrooms * 250, 900 + bedrooms * 600),
            property_type=property_type,
            images=[
                f"https://picsum.photos/seed/listing-{property_id}-{index}/800/600"
                for index in range(self.random.randint(3, 6))
            ],
            amenities=frozenset(self.random.sample(AMENITIES, k=self.random.randint(1, 5))),
            listing_date=self.fake.date_time_between(start_date="-90d", tzinfo=timezone.utc),
            coordinates=Coordinates(
                lat=float(self.fake.latitude()),
                lng=float(self.fake.longitude()),
            ),
        )
