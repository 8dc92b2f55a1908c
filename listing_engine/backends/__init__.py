"""Storage backends behind the engine."""

import logging

from listing_engine.backends.base import StorageBackend, next_id
from listing_engine.backends.memory import MemoryBackend
from listing_engine.backends.postgres import PostgresBackend
from listing_engine.config import ListingEngineConfig
from listing_engine.generators import ListingGenerator

logger = logging.getLogger(__name__)

__all__ = ["MemoryBackend", "PostgresBackend", "StorageBackend", "create_backend", "next_id"]


async def create_backend(config: ListingEngineConfig) -> StorageBackend:
    """Build the backend selected by ``config.backend``.

    Parameters
    ----------
    config : ListingEngineConfig
        Engine configuration.

    Returns
    -------
    StorageBackend
        Ready-to-use backend.
    """
    config.validate()

    if config.backend == "postgres":
        backend = await PostgresBackend.connect(config.postgres.connection_string)
        await backend.ensure_schema()
        return backend

    memory = config.memory
    if memory.seed_path is not None:
        return MemoryBackend.from_seed_file(memory.seed_path, latency_ms=memory.latency_ms)

    properties = []
    if memory.generate_count:
        properties = list(ListingGenerator(seed=config.seed).generate_batch(memory.generate_count))
        logger.info("Generated %d mock listings", len(properties))
    return MemoryBackend(properties, latency_ms=memory.latency_ms)
