"""Stores owning the engine's entity collections."""

from listing_engine.store.properties import PropertyStore
from listing_engine.store.saved import SavedSetManager

__all__ = ["PropertyStore", "SavedSetManager"]
