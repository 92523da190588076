"""Shared test fixtures and configuration."""

from collections.abc import Callable, Sequence
import copy
import os
from typing import Any

import pytest
import pytest_asyncio


# Complete test environment that overrides every config value
TEST_ENV = {
    "REDIS_URL": "redis://localhost:6379/15",
    "FREE_TEXT_FIELD": "content",
    "DEFAULT_MATCH_WORDS": "all",
    "PHONETIC_MAX_LENGTH": "32",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

# Now we can safely import config-dependent modules
from redis_search.adapters.store import AbstractSortedSetStore
from redis_search.config import Settings
from redis_search.exceptions import StoreError
from redis_search.search.commands import StoreCommand, StoreOp
from redis_search.service_layer.search_service import SearchIndex


def _rank_slice(size: int, start: int, stop: int) -> slice:
    if start < 0:
        start = max(size + start, 0)
    if stop < 0:
        stop = size + stop
    if start >= size or stop < start:
        return slice(0, 0)
    return slice(start, min(stop, size - 1) + 1)


class InMemorySortedSetStore(AbstractSortedSetStore):
    """Dict-backed store with Redis set / sorted-set semantics.

    Batches are applied to a copy and committed only if every command
    succeeds. ``fail_when`` lets a test reject chosen batches.
    """

    def __init__(self) -> None:
        self.sets: dict[str, set[str]] = {}
        self.zsets: dict[str, dict[str, float]] = {}
        self.batches: list[list[StoreCommand]] = []
        self.fail_when: Callable[[Sequence[StoreCommand]], bool] | None = None
        self.closed = False

    async def execute(self, commands: Sequence[StoreCommand]) -> list[Any]:
        self.batches.append(list(commands))
        if self.fail_when is not None and self.fail_when(commands):
            raise StoreError("injected batch failure")
        sets, zsets = copy.deepcopy(self.sets), copy.deepcopy(self.zsets)
        try:
            return [self._apply(command) for command in commands]
        except Exception:
            self.sets, self.zsets = sets, zsets
            raise

    async def set_members(self, key: str) -> set[str]:
        return set(self.sets.get(key, set()))

    async def set_cardinality(self, key: str) -> int:
        return len(self.sets.get(key, set()))

    async def delete(self, *keys: str) -> int:
        return sum(self._delete(key) for key in keys)

    async def aclose(self) -> None:
        self.closed = True

    def keys(self) -> set[str]:
        return set(self.sets) | set(self.zsets)

    def _delete(self, key: str) -> int:
        found = key in self.sets or key in self.zsets
        self.sets.pop(key, None)
        self.zsets.pop(key, None)
        return int(found)

    def _store_zset(self, key: str, members: dict[str, float]) -> int:
        self._delete(key)
        if members:
            self.zsets[key] = members
        return len(members)

    def _apply(self, command: StoreCommand) -> Any:
        key, args = command.key, command.args
        if command.op is StoreOp.SET_ADD:
            target = self.sets.setdefault(key, set())
            added = {str(member) for member in args} - target
            target.update(added)
            return len(added)
        if command.op is StoreOp.SET_REMOVE:
            target = self.sets.get(key, set())
            removed = target & {str(member) for member in args}
            target -= removed
            if not target:
                self.sets.pop(key, None)
            return len(removed)
        if command.op is StoreOp.DELETE:
            return self._delete(key)
        if command.op is StoreOp.SORTED_SET_ADD:
            score, member = args
            target = self.zsets.setdefault(key, {})
            is_new = str(member) not in target
            target[str(member)] = float(score)
            return int(is_new)
        if command.op is StoreOp.SORTED_SET_REMOVE:
            target = self.zsets.get(key, {})
            removed = sum(1 for member in args if target.pop(str(member), None) is not None)
            if not target:
                self.zsets.pop(key, None)
            return removed
        if command.op is StoreOp.RANGE_DESC:
            start, stop = args
            ordered = sorted(self.zsets.get(key, {}).items(), key=lambda item: (item[1], item[0]), reverse=True)
            return [member for member, _ in ordered[_rank_slice(len(ordered), start, stop)]]
        if command.op is StoreOp.TRIM_BY_RANK:
            start, stop = args
            target = self.zsets.get(key, {})
            ordered = sorted(target.items(), key=lambda item: (item[1], item[0]))
            doomed = ordered[_rank_slice(len(ordered), start, stop)]
            for member, _ in doomed:
                del target[member]
            if not target:
                self.zsets.pop(key, None)
            return len(doomed)
        if command.op is StoreOp.UNION_STORE:
            merged: dict[str, float] = {}
            for source in args:
                for member, score in self.zsets.get(source, {}).items():
                    merged[member] = merged.get(member, 0.0) + score
            return self._store_zset(key, merged)
        if command.op is StoreOp.INTERSECT_STORE:
            sources = [self.zsets.get(source, {}) for source in args]
            common = set(sources[0]).intersection(*sources[1:]) if sources else set()
            return self._store_zset(key, {member: sum(source[member] for source in sources) for member in common})
        raise ValueError(f"unsupported op {command.op}")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Set test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store() -> InMemorySortedSetStore:
    return InMemorySortedSetStore()


@pytest.fixture
def search_index(store, settings) -> SearchIndex:
    return SearchIndex("mypostsearch", store, settings)


SAMPLE_DOCUMENTS = [
    ({"content": "ruby emerald", "uid": 5, "cid": 1}, 1),
    ({"content": "emerald orange emerald", "uid": 5, "cid": 2}, 2),
    ({"content": "cucumber apple orange", "uid": 4, "cid": 2}, 3),
    ({"content": "ORANGE apple pear", "uid": 5, "cid": 4}, 4),
    ({"content": "dog cat", "uid": 6, "cid": 4}, 5),
]


@pytest_asyncio.fixture
async def populated_index(search_index) -> SearchIndex:
    for fields, doc_id in SAMPLE_DOCUMENTS:
        await search_index.index(fields, doc_id)
    return search_index
