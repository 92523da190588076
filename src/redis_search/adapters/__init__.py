"""Adapters layer - store implementations behind the index engine."""

from redis_search.adapters.store import AbstractSortedSetStore, RedisSortedSetStore


__all__ = [
    "AbstractSortedSetStore",
    "RedisSortedSetStore",
]
