"""Sorted-set store abstractions and the Redis implementation.

Defines the store contract the index is built on, following the Repository
Pattern: the engine never talks to a client directly, only to an
``AbstractSortedSetStore``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
import logging
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from redis_search.exceptions import StoreError
from redis_search.search.commands import StoreCommand, StoreOp


if TYPE_CHECKING:
    from redis_search.config import Settings


logger = logging.getLogger(__name__)


class AbstractSortedSetStore(ABC):
    """Abstract atomic set / sorted-set store.

    Every method is a coroutine that may suspend the caller; failures are
    raised as ``StoreError``.
    """

    @abstractmethod
    async def execute(self, commands: Sequence[StoreCommand]) -> list[Any]:
        """Run ``commands`` as one all-or-nothing batch.

        Args:
            commands: Commands in submission order

        Returns:
            One response per command, in the same order
        """
        raise NotImplementedError

    @abstractmethod
    async def set_members(self, key: str) -> set[str]:
        raise NotImplementedError

    @abstractmethod
    async def set_cardinality(self, key: str) -> int:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Optional hook for releasing connections."""

        return


class RedisSortedSetStore(AbstractSortedSetStore):
    """Store backed by ``redis.asyncio`` with MULTI/EXEC pipelines."""

    def __init__(self, client: redis.Redis) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> RedisSortedSetStore:
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_socket_timeout,
        )
        return cls(client)

    async def execute(self, commands: Sequence[StoreCommand]) -> list[Any]:
        if not commands:
            return []
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                for command in commands:
                    _queue(pipe, command)
                return await pipe.execute()
        except RedisError as exc:
            logger.warning("Atomic batch of %d command(s) failed: %s", len(commands), exc)
            raise StoreError(f"batch failed: {exc}") from exc

    async def set_members(self, key: str) -> set[str]:
        try:
            return set(await self.client.smembers(key))
        except RedisError as exc:
            logger.warning("SMEMBERS %s failed: %s", key, exc)
            raise StoreError(f"failed to read {key}: {exc}") from exc

    async def set_cardinality(self, key: str) -> int:
        try:
            return int(await self.client.scard(key))
        except RedisError as exc:
            logger.warning("SCARD %s failed: %s", key, exc)
            raise StoreError(f"failed to count {key}: {exc}") from exc

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(await self.client.delete(*keys))
        except RedisError as exc:
            logger.warning("DEL %s failed: %s", " ".join(keys), exc)
            raise StoreError(f"failed to delete {', '.join(keys)}: {exc}") from exc

    async def aclose(self) -> None:
        await self.client.aclose()


def _queue(pipe: Any, command: StoreCommand) -> None:
    key, args = command.key, command.args
    match command.op:
        case StoreOp.SET_ADD:
            pipe.sadd(key, *args)
        case StoreOp.SET_REMOVE:
            pipe.srem(key, *args)
        case StoreOp.DELETE:
            pipe.delete(key)
        case StoreOp.SORTED_SET_ADD:
            score, member = args
            pipe.zadd(key, {member: score})
        case StoreOp.SORTED_SET_REMOVE:
            pipe.zrem(key, *args)
        case StoreOp.RANGE_DESC:
            start, stop = args
            pipe.zrevrange(key, start, stop)
        case StoreOp.TRIM_BY_RANK:
            start, stop = args
            pipe.zremrangebyrank(key, start, stop)
        case StoreOp.UNION_STORE:
            pipe.zunionstore(key, list(args))
        case StoreOp.INTERSECT_STORE:
            pipe.zinterstore(key, list(args))
        case _:
            raise ValueError(f"Unsupported store operation: {command.op}")
