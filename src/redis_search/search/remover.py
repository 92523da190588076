"""Index remover: undoes everything the writer recorded for a document."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import logging
from typing import TYPE_CHECKING, Any

from redis_search.exceptions import SearchValidationError
from redis_search.search import commands
from redis_search.search.commands import StoreCommand
from redis_search.search.keys import KeyScheme, format_value
from redis_search.search.writer import is_missing_id


if TYPE_CHECKING:
    from redis_search.adapters.store import AbstractSortedSetStore


logger = logging.getLogger(__name__)


class IndexRemover:
    """Removes a document using its reverse index sets as the source of truth.

    Each field is cleared in its own atomic batch. Fields are dispatched
    concurrently; a failing field fails the call without rolling back the
    fields already cleared. The global id set is left untouched.
    """

    def __init__(self, store: AbstractSortedSetStore, keys: KeyScheme) -> None:
        self.store = store
        self.keys = keys

    def build_field_removal(self, doc_id: Any, field_name: str, values: Iterable[str]) -> list[StoreCommand]:
        member = format_value(doc_id)
        batch = [commands.delete(self.keys.reverse_index_key(member, field_name))]
        for value in sorted(values):
            batch.append(commands.sorted_set_remove(self.keys.value_key(field_name, value), member))
        return batch

    async def remove(self, doc_id: Any) -> list[str]:
        """Remove ``doc_id`` from every field it was indexed under.

        Returns the field names that were cleared (empty for unknown ids).
        """
        if is_missing_id(doc_id):
            raise SearchValidationError("remove requires a document id")

        member = format_value(doc_id)
        registry_key = self.keys.field_registry_key(member)
        fields = sorted(await self.store.set_members(registry_key))
        if fields:
            await asyncio.gather(*(self._remove_field(member, field_name) for field_name in fields))
        await self.store.delete(registry_key)
        logger.debug("Removed document %s from %d field(s)", member, len(fields))
        return fields

    async def _remove_field(self, member: str, field_name: str) -> None:
        values = await self.store.set_members(self.keys.reverse_index_key(member, field_name))
        await self.store.execute(self.build_field_removal(member, field_name, values))
