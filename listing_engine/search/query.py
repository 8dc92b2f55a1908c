"""Query orchestration: text search first, then filters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from listing_engine.catalog import AMENITIES, PROPERTY_TYPES
from listing_engine.exceptions import ConfigurationError
from listing_engine.models import FilterCriteria, Property
from listing_engine.search.filters import FilterEvaluator
from listing_engine.search.index import SearchIndex

if TYPE_CHECKING:
    from listing_engine.store.properties import PropertyStore

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """Turn a free-text query plus filter criteria into a result list.

    The text search narrows the input first and the filters run on what
    is left, so results keep the input's relative order.

    Parameters
    ----------
    store : PropertyStore | None
        Source of listings for ``browse``. ``query`` does not need it.
    search_index : SearchIndex | None
        Text matcher.
    filter_evaluator : FilterEvaluator | None
        Criteria matcher.
    """

    def __init__(
        self,
        store: PropertyStore | None = None,
        search_index: SearchIndex | None = None,
        filter_evaluator: FilterEvaluator | None = None,
    ) -> None:
        self.store = store
        self.search_index = search_index or SearchIndex()
        self.filter_evaluator = filter_evaluator or FilterEvaluator()

    def query(
        self,
        all_properties: Sequence[Property],
        free_text: str | None = "",
        criteria: FilterCriteria | Mapping[str, Any] | None = None,
    ) -> list[Property]:
        """Search, then filter. ``all_properties`` is never modified."""
        if isinstance(criteria, Mapping):
            criteria = FilterCriteria.from_dict(criteria)

        narrowed = self.search_index.search(free_text, all_properties)
        results = self.filter_evaluator.filter(narrowed, criteria)
        logger.debug(
            "Query %r matched %d of %d properties (%d after filters)",
            free_text,
            len(narrowed),
            len(all_properties),
            len(results),
        )
        return results

    async def browse(
        self,
        free_text: str | None = "",
        criteria: FilterCriteria | Mapping[str, Any] | None = None,
    ) -> list[Property]:
        """Run ``query`` over every listing in the store."""
        if self.store is None:
            raise ConfigurationError("QueryOrchestrator.browse needs a PropertyStore")
        return self.query(await self.store.get_all(), free_text, criteria)

    @staticmethod
    def property_types() -> list[str]:
        return list(PROPERTY_TYPES)

    @staticmethod
    def amenities() -> list[str]:
        return list(AMENITIES)
