"""Store commands as plain values.

Writers, removers and the planner build lists of ``StoreCommand`` which an
``AbstractSortedSetStore`` executes as one atomic batch. Keeping them as data
means every batch can be inspected without a running store.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class StoreOp(str, Enum):
    """Operations the backing store must support inside a batch."""

    SET_ADD = "set_add"
    SET_REMOVE = "set_remove"
    DELETE = "delete"
    SORTED_SET_ADD = "sorted_set_add"
    SORTED_SET_REMOVE = "sorted_set_remove"
    RANGE_DESC = "range_desc"
    TRIM_BY_RANK = "trim_by_rank"
    UNION_STORE = "union_store"
    INTERSECT_STORE = "intersect_store"


@dataclass(frozen=True)
class StoreCommand:
    op: StoreOp
    key: str
    args: tuple = ()


def set_add(key: str, *members: str) -> StoreCommand:
    return StoreCommand(StoreOp.SET_ADD, key, members)


def set_remove(key: str, *members: str) -> StoreCommand:
    return StoreCommand(StoreOp.SET_REMOVE, key, members)


def delete(key: str) -> StoreCommand:
    return StoreCommand(StoreOp.DELETE, key)


def sorted_set_add(key: str, score: float, member: str) -> StoreCommand:
    """Add ``member`` with ``score``; an existing member's score is overwritten."""
    return StoreCommand(StoreOp.SORTED_SET_ADD, key, (score, member))


def sorted_set_remove(key: str, *members: str) -> StoreCommand:
    return StoreCommand(StoreOp.SORTED_SET_REMOVE, key, members)


def range_desc(key: str, start: int, stop: int) -> StoreCommand:
    """Read members by descending score over the rank window ``[start, stop]``."""
    return StoreCommand(StoreOp.RANGE_DESC, key, (start, stop))


def trim_by_rank(key: str, start: int, stop: int) -> StoreCommand:
    return StoreCommand(StoreOp.TRIM_BY_RANK, key, (start, stop))


def union_store(dest: str, sources: Iterable[str]) -> StoreCommand:
    return StoreCommand(StoreOp.UNION_STORE, dest, tuple(sources))


def intersect_store(dest: str, sources: Iterable[str]) -> StoreCommand:
    return StoreCommand(StoreOp.INTERSECT_STORE, dest, tuple(sources))
