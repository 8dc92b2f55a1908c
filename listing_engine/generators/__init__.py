"""Mock data generators."""

from listing_engine.generators.listing import ListingGenerator

__all__ = ["ListingGenerator"]
