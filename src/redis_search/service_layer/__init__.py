"""Service layer - public handle for the search index."""

from redis_search.service_layer.search_service import SearchIndex, create_search


__all__ = [
    "SearchIndex",
    "create_search",
]
