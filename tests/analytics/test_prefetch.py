"""Tests for cache warm-up planning."""

from unittest.mock import AsyncMock

import pytest

from wastesort.analytics.prefetch import (
    get_prefetch_list,
    prefetch_popular_queries,
    prefetch_stats,
    should_prefetch,
)
from wastesort.analytics.tracker import PopularityTracker
from wastesort.cache.response_cache import ResponseCache
from wastesort.models import EventKind, WasteCategory


@pytest.fixture
def tracker(store, clock):
    return PopularityTracker(store, clock=clock)


@pytest.fixture
def cache(store, clock):
    return ResponseCache(store, clock=clock)


def _search(tracker, query, times=1, kind=EventKind.SEARCH_AI_CALL):
    for _ in range(times):
        tracker.track(kind, {"query": query})


class TestGetPrefetchList:
    def test_excludes_cached_queries(self, tracker, cache):
        _search(tracker, "baterie", times=2)
        _search(tracker, "sklenice")
        cache.add("Sklenice", WasteCategory.SKLO, query="sklenice")

        plan = get_prefetch_list(tracker, cache)
        assert [p.query for p in plan] == ["baterie"]

    def test_empty(self, tracker, cache):
        assert get_prefetch_list(tracker, cache) == []


class TestShouldPrefetch:
    def test_enough_misses(self, tracker):
        _search(tracker, "baterie", times=10, kind=EventKind.SEARCH_LOCAL_HIT)
        assert should_prefetch(tracker)

    def test_too_few_searches(self, tracker):
        _search(tracker, "baterie", times=9, kind=EventKind.SEARCH_LOCAL_HIT)
        assert not should_prefetch(tracker)

    def test_cache_already_effective(self, tracker):
        _search(tracker, "baterie", times=5, kind=EventKind.SEARCH_LOCAL_HIT)
        _search(tracker, "baterie", times=5, kind=EventKind.SEARCH_CACHE_HIT)
        assert not should_prefetch(tracker)


class TestPrefetchStats:
    def test_counts(self, tracker, cache):
        _search(tracker, "baterie")
        _search(tracker, "sklenice")
        cache.add("Sklenice", WasteCategory.SKLO, query="sklenice")

        assert prefetch_stats(tracker, cache) == {
            "popular_queries": 2,
            "already_cached": 1,
            "to_be_prefetched": 1,
        }


class TestPrefetchPopularQueries:
    @pytest.mark.asyncio
    async def test_runs_search_for_each_query(self, tracker, cache):
        _search(tracker, "baterie", times=2)
        _search(tracker, "noviny")
        search = AsyncMock()

        attempted = await prefetch_popular_queries(
            search, tracker, cache, delay=0, spacing=0
        )

        assert attempted == ["baterie", "noviny"]
        assert [c.args[0] for c in search.await_args_list] == [
            "baterie",
            "noviny",
        ]

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_the_run(self, tracker, cache):
        _search(tracker, "baterie", times=2)
        _search(tracker, "noviny")
        search = AsyncMock(side_effect=[RuntimeError("AI failed"), None])

        attempted = await prefetch_popular_queries(
            search, tracker, cache, delay=0, spacing=0
        )

        assert attempted == ["baterie", "noviny"]
        assert search.await_count == 2

    @pytest.mark.asyncio
    async def test_warm_cache(self, tracker, cache):
        search = AsyncMock()
        assert await prefetch_popular_queries(search, tracker, cache) == []
        search.assert_not_awaited()
