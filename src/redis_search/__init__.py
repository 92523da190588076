"""Boolean full-text and exact-match search on top of Redis sorted sets."""

from redis_search.adapters.store import AbstractSortedSetStore, RedisSortedSetStore
from redis_search.config import Settings
from redis_search.domain.query import AnyOfValues, ExactValue, FreeText, MatchMode, SearchQuery
from redis_search.exceptions import SearchError, SearchValidationError, StoreError
from redis_search.observability.setup import setup_observability
from redis_search.service_layer.search_service import SearchIndex, create_search


__all__ = [
    "AbstractSortedSetStore",
    "AnyOfValues",
    "ExactValue",
    "FreeText",
    "MatchMode",
    "RedisSortedSetStore",
    "SearchError",
    "SearchIndex",
    "SearchQuery",
    "SearchValidationError",
    "Settings",
    "StoreError",
    "create_search",
    "setup_observability",
]
