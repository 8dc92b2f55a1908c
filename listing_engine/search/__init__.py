"""Text search, filtering and query orchestration."""

from listing_engine.search.filters import FilterEvaluator
from listing_engine.search.index import SearchIndex
from listing_engine.search.query import QueryOrchestrator

__all__ = ["FilterEvaluator", "QueryOrchestrator", "SearchIndex"]
