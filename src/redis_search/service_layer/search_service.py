"""Search index orchestration layer.

``SearchIndex`` is the handle callers create once per namespace and pass
around; it owns the writer, remover and planner for that namespace and the
store they share. There is no process-wide client.
"""

from __future__ import annotations

from collections.abc import Generator, Mapping
from contextlib import contextmanager
import logging
from typing import Any

from redis_search.adapters.store import AbstractSortedSetStore, RedisSortedSetStore
from redis_search.config import Settings
from redis_search.domain.query import SearchQuery
from redis_search.exceptions import SearchValidationError
from redis_search.observability import (
    BATCH_SIZE,
    OPERATION_COUNT,
    OPERATION_LATENCY,
    create_span,
    namespace_context,
    track_latency,
)
from redis_search.search.keys import KeyScheme
from redis_search.search.normalizer import Normalizer
from redis_search.search.planner import QueryPlanner
from redis_search.search.remover import IndexRemover
from redis_search.search.writer import IndexWriter


logger = logging.getLogger(__name__)


class SearchIndex:
    """Boolean full-text and exact-match index over one namespace."""

    def __init__(
        self,
        namespace: str,
        store: AbstractSortedSetStore,
        settings: Settings | None = None,
        *,
        owns_store: bool = False,
    ) -> None:
        """Initialize the index handle.

        Args:
            namespace: Prefix scoping every key of this index (required)
            store: Atomic sorted-set store shared by all operations
            settings: Configuration; defaults are read from the environment
            owns_store: Close ``store`` when the handle is closed
        """
        if not namespace or not str(namespace).strip():
            raise SearchValidationError("a search index requires a namespace")
        self.namespace = str(namespace)
        self.store = store
        self.settings = settings or Settings()
        self._owns_store = owns_store

        self.keys = KeyScheme(self.namespace)
        self.normalizer = Normalizer(phonetic_max_length=self.settings.phonetic_max_length)
        self.writer = IndexWriter(self.keys, self.normalizer, free_text_field=self.settings.free_text_field)
        self.remover = IndexRemover(self.store, self.keys)
        self.planner = QueryPlanner(self.keys, self.normalizer)

    async def index(self, fields: Mapping[str, Any], doc_id: Any) -> None:
        """Index ``fields`` for ``doc_id`` in one atomic batch."""

        with self._observe("index"):
            batch = self.writer.build(fields, doc_id)
            BATCH_SIZE.labels(namespace=self.namespace, operation="index").observe(len(batch))
            await self.store.execute(batch)
            logger.debug("Indexed document %s with %d command(s)", doc_id, len(batch))

    async def query(self, query: SearchQuery | Mapping[str, Any], start: int = 0, stop: int = -1) -> list[str]:
        """Return document ids matching ``query``, highest score first.

        Args:
            query: ``SearchQuery`` or ``{"query": {...}, "matchWords": "all"|"any"}``
            start: First rank of the result window
            stop: Last rank of the result window (-1 = last element)

        Returns:
            Ordered document ids; empty when nothing matches
        """
        with self._observe("query"):
            search_query = self._coerce_query(query)
            plan = self.planner.plan(search_query, start, stop)
            if plan is None:
                return []
            BATCH_SIZE.labels(namespace=self.namespace, operation="query").observe(len(plan.commands))
            responses = await self.store.execute(plan.commands)
            return list(responses[plan.result_index])

    async def remove(self, doc_id: Any) -> None:
        """Remove every index entry recorded for ``doc_id``."""

        with self._observe("remove"):
            await self.remover.remove(doc_id)

    async def count(self, namespace: str | None = None) -> int:
        """Number of document ids ever indexed in ``namespace`` (default: this one).

        Ids are not pruned on removal, so this can exceed the live count.
        """
        target = namespace or self.namespace
        with self._observe("count"):
            return await self.store.set_cardinality(KeyScheme(target).ids_key())

    async def aclose(self) -> None:
        if self._owns_store:
            await self.store.aclose()

    async def __aenter__(self) -> SearchIndex:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _coerce_query(self, query: SearchQuery | Mapping[str, Any]) -> SearchQuery:
        if isinstance(query, SearchQuery):
            return query
        return SearchQuery.from_mapping(
            query,
            free_text_field=self.settings.free_text_field,
            default_match_words=self.settings.default_match_words,
        )

    @contextmanager
    def _observe(self, operation: str) -> Generator[None, None, None]:
        status = "error"
        with (
            namespace_context(self.namespace),
            create_span(f"search.{operation}", attributes={"search.namespace": self.namespace}),
            track_latency(OPERATION_LATENCY, namespace=self.namespace, operation=operation),
        ):
            try:
                yield
                status = "ok"
            finally:
                OPERATION_COUNT.labels(namespace=self.namespace, operation=operation, status=status).inc()


def create_search(
    namespace: str,
    store: AbstractSortedSetStore | None = None,
    settings: Settings | None = None,
) -> SearchIndex:
    """Create a search handle for ``namespace``.

    When no store is given one is built from ``settings.redis_url`` and closed
    together with the handle.
    """
    if not namespace or not str(namespace).strip():
        raise SearchValidationError("create_search requires a namespace")
    settings = settings or Settings()
    if store is None:
        return SearchIndex(namespace, RedisSortedSetStore.from_settings(settings), settings, owns_store=True)
    return SearchIndex(namespace, store, settings)
