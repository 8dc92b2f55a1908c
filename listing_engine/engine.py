"""Engine assembly: one backend, the stores built on it, and the orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import TracebackType

from listing_engine.backends import StorageBackend, create_backend
from listing_engine.config import ListingEngineConfig
from listing_engine.search import QueryOrchestrator
from listing_engine.store import PropertyStore, SavedSetManager

logger = logging.getLogger(__name__)


@dataclass
class ListingEngine:
    """Handle passed to the presentation layer.

    Build one per process with ``open_engine`` (or ``from_backend``) and
    close it on shutdown.
    """

    backend: StorageBackend
    properties: PropertyStore
    saved: SavedSetManager
    queries: QueryOrchestrator

    @classmethod
    def from_backend(cls, backend: StorageBackend) -> ListingEngine:
        """Wire the engine components around ``backend``."""
        properties = PropertyStore(backend)
        return cls(
            backend=backend,
            properties=properties,
            saved=SavedSetManager(backend),
            queries=QueryOrchestrator(store=properties),
        )

    async def close(self) -> None:
        await self.backend.close()
        logger.info("Listing engine closed")

    async def __aenter__(self) -> ListingEngine:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


async def open_engine(config: ListingEngineConfig | None = None) -> ListingEngine:
    """Create the configured backend and wrap it in a ``ListingEngine``.

    Parameters
    ----------
    config : ListingEngineConfig | None
        Engine configuration; read from the environment when omitted.

    Returns
    -------
    ListingEngine
        Ready-to-use engine.
    """
    config = config or ListingEngineConfig.from_env()
    backend = await create_backend(config)
    logger.info(
        "Listing engine started with %s backend", config.backend, extra={"backend": config.backend}
    )
    return ListingEngine.from_backend(backend)
