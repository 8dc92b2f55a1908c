"""Custom exception hierarchy for listing-engine."""


class ListingEngineError(Exception):
    """Base exception for all listing-engine errors."""


class EntityNotFoundError(ListingEngineError):
    """Raised when an id has no matching entity in the targeted collection."""


class PropertyNotFoundError(EntityNotFoundError):
    """Raised when no property has the requested id."""


class SavedRecordNotFoundError(EntityNotFoundError):
    """Raised when no saved record has the requested id."""


class InvalidIdentifierError(ListingEngineError, ValueError):
    """Raised when an entity id is neither an integer nor an all-digit string."""


class InvalidEntityError(ListingEngineError):
    """Raised when a draft, patch or stored record does not describe a valid entity."""


class InvalidCriteriaError(ListingEngineError):
    """Raised when a filter criteria payload cannot be parsed."""


class ConfigurationError(ListingEngineError):
    """Raised when configuration is invalid or missing."""


class StorageError(ListingEngineError):
    """Raised when the storage backend fails (connection, query, transport)."""
