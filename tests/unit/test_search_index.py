"""Unit tests for the SearchIndex handle against the in-memory store."""

import pytest

from redis_search import create_search
from redis_search.adapters.store import RedisSortedSetStore
from redis_search.domain.query import ExactValue, SearchQuery
from redis_search.exceptions import SearchValidationError, StoreError
from redis_search.service_layer.search_service import SearchIndex


@pytest.mark.unit
class TestQueryScenarios:
    """Boolean combinations over the sample posts."""

    @pytest.mark.asyncio
    async def test_any_words_intersected_with_exact_field(self, populated_index):
        ids = await populated_index.query({"matchWords": "any", "query": {"content": "apple orange", "uid": 5}})

        assert sorted(ids) == ["2", "4"]

    @pytest.mark.asyncio
    async def test_unmatched_field_empties_result(self, populated_index):
        ids = await populated_index.query({"query": {"uid": 5, "content": "apple orange", "cid": 123}})

        assert ids == []

    @pytest.mark.asyncio
    async def test_all_fields_must_match(self, populated_index):
        ids = await populated_index.query({"query": {"uid": 5, "content": "emerald", "cid": 1}})

        assert ids == ["1"]

    @pytest.mark.asyncio
    async def test_single_exact_field(self, populated_index):
        ids = await populated_index.query({"query": {"uid": 5}})

        assert sorted(ids) == ["1", "2", "4"]

    @pytest.mark.asyncio
    async def test_any_words_with_filter(self, populated_index):
        ids = await populated_index.query({"matchWords": "any", "query": {"content": "ruby pear", "cid": 4}})

        assert ids == ["4"]

    @pytest.mark.asyncio
    async def test_array_values_are_ored(self, populated_index):
        ids = await populated_index.query({"query": {"cid": [2, 4]}})

        assert sorted(ids) == ["2", "3", "4", "5"]

    @pytest.mark.asyncio
    async def test_array_combined_with_other_fields(self, populated_index):
        ids = await populated_index.query({"query": {"cid": [2, 4], "content": "orange", "uid": 4}})

        assert ids == ["3"]

    @pytest.mark.asyncio
    async def test_upper_case_query_matches(self, populated_index):
        assert await populated_index.query({"query": {"content": "CUCUMBER"}}) == ["3"]

    @pytest.mark.asyncio
    async def test_default_mode_requires_every_term(self, populated_index):
        ids = await populated_index.query({"query": {"content": "apple orange"}})

        assert sorted(ids) == ["3", "4"]

    @pytest.mark.asyncio
    async def test_results_ordered_by_term_frequency(self, populated_index):
        assert await populated_index.query({"query": {"content": "emerald"}}) == ["2", "1"]

    @pytest.mark.asyncio
    async def test_accepts_search_query_objects(self, populated_index):
        assert await populated_index.query(SearchQuery(fields={"uid": ExactValue(6)})) == ["5"]


@pytest.mark.unit
class TestPagination:
    @pytest.mark.asyncio
    async def test_window_limits_results(self, populated_index):
        ids = await populated_index.query({"query": {"uid": 5}}, 0, 1)

        assert ids == ["4", "2"]

    @pytest.mark.asyncio
    async def test_window_is_contiguous(self, populated_index):
        first = await populated_index.query({"query": {"uid": 5}}, 0, 0)
        rest = await populated_index.query({"query": {"uid": 5}}, 1, -1)

        assert first + rest == ["4", "2", "1"]

    @pytest.mark.asyncio
    async def test_tail_returns_fewer(self, populated_index):
        assert await populated_index.query({"query": {"uid": 5}}, 2, 10) == ["1"]

    @pytest.mark.asyncio
    async def test_aggregates_do_not_leak_with_full_window(self, populated_index, store):
        await populated_index.query({"query": {"cid": [2, 4], "content": "orange", "uid": 4}})

        assert not {key for key in store.keys() if key.endswith(":temp") or key.endswith(":tempFinal")}

    @pytest.mark.asyncio
    async def test_query_runs_as_one_batch(self, populated_index, store):
        store.batches.clear()

        await populated_index.query({"query": {"cid": [2, 4], "uid": 5}})

        assert len(store.batches) == 1


@pytest.mark.unit
class TestShortCircuit:
    @pytest.mark.asyncio
    async def test_empty_query_touches_nothing(self, populated_index, store):
        store.batches.clear()

        assert await populated_index.query({"query": {}}) == []
        assert await populated_index.query({"query": {"content": "the of"}}) == []
        assert store.batches == []


@pytest.mark.unit
class TestRemoveAndCount:
    @pytest.mark.asyncio
    async def test_removed_document_no_longer_matches(self, populated_index):
        await populated_index.remove(2)

        assert sorted(await populated_index.query({"query": {"uid": 5}})) == ["1", "4"]
        assert await populated_index.query({"query": {"content": "emerald"}}) == ["1"]

    @pytest.mark.asyncio
    async def test_remove_unknown_document_succeeds(self, populated_index):
        await populated_index.remove(404)

        assert await populated_index.count() == 5

    @pytest.mark.asyncio
    async def test_count_is_not_pruned_on_remove(self, populated_index):
        await populated_index.remove(1)

        assert await populated_index.count() == 5

    @pytest.mark.asyncio
    async def test_count_other_namespace(self, populated_index):
        assert await populated_index.count("othernamespace") == 0

    @pytest.mark.asyncio
    async def test_reindex_after_remove(self, populated_index):
        await populated_index.remove(5)
        await populated_index.index({"content": "dog", "uid": 7}, 5)

        assert await populated_index.query({"query": {"content": "cat"}}) == []
        assert await populated_index.query({"query": {"uid": 7}}) == ["5"]


@pytest.mark.unit
class TestErrors:
    def test_namespace_required(self, store):
        with pytest.raises(SearchValidationError):
            SearchIndex("", store)
        with pytest.raises(SearchValidationError):
            create_search("", store)

    @pytest.mark.asyncio
    async def test_missing_id_rejected_before_store(self, search_index, store):
        with pytest.raises(SearchValidationError):
            await search_index.index({"uid": 1}, None)

        assert store.batches == []

    @pytest.mark.asyncio
    async def test_failed_index_batch_applies_nothing(self, search_index, store):
        store.fail_when = lambda batch: True

        with pytest.raises(StoreError):
            await search_index.index({"content": "ruby", "uid": 5}, 1)

        assert store.keys() == set()

    @pytest.mark.asyncio
    async def test_failed_query_batch_raises(self, populated_index, store):
        store.fail_when = lambda batch: True

        with pytest.raises(StoreError):
            await populated_index.query({"query": {"uid": 5}})

    @pytest.mark.asyncio
    async def test_invalid_match_mode(self, populated_index):
        with pytest.raises(SearchValidationError):
            await populated_index.query({"matchWords": "some", "query": {"uid": 5}})


@pytest.mark.unit
class TestLifecycle:
    @pytest.mark.asyncio
    async def test_borrowed_store_is_not_closed(self, store, settings):
        async with create_search("ns", store, settings) as index:
            assert index.namespace == "ns"

        assert store.closed is False

    @pytest.mark.asyncio
    async def test_owned_store_is_closed(self, store, settings):
        async with SearchIndex("ns", store, settings, owns_store=True):
            pass

        assert store.closed is True

    def test_default_store_built_from_settings(self, settings, monkeypatch):
        sentinel = object()
        monkeypatch.setattr(RedisSortedSetStore, "from_settings", classmethod(lambda cls, s: sentinel))

        index = create_search("ns", settings=settings)

        assert index.store is sentinel
