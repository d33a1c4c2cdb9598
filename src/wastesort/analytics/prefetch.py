"""Cache warm-up planning.

Decides which popular queries are worth asking the AI provider about
ahead of time, so that repeated questions are answered from the
response cache. The actual provider call is the host's ``search``
coroutine; this module only plans and paces the calls.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from wastesort.analytics.tracker import PopularityTracker, PopularQuery
from wastesort.cache.response_cache import ResponseCache
from wastesort.constants import (
    POPULARITY_LIMIT,
    PREFETCH_MAX_HIT_RATE,
    PREFETCH_MAX_ITEMS,
    PREFETCH_MIN_SEARCHES,
)

logger = logging.getLogger(__name__)


def get_prefetch_list(
    tracker: PopularityTracker,
    cache: ResponseCache,
    max_items: int = PREFETCH_MAX_ITEMS,
) -> list[PopularQuery]:
    """Popular queries that the cache cannot answer yet."""
    return [
        item
        for item in tracker.popular_queries(max_items)
        if cache.find_by_query(item.query) is None
    ]


def should_prefetch(tracker: PopularityTracker) -> bool:
    """True after ten session searches with a cache hit rate below 50%."""
    stats = tracker.stats()
    return (
        stats.total_searches >= PREFETCH_MIN_SEARCHES
        and stats.cache_hit_rate < PREFETCH_MAX_HIT_RATE
    )


def prefetch_stats(
    tracker: PopularityTracker,
    cache: ResponseCache,
) -> dict[str, int]:
    """How many of the top popular queries are already cached."""
    popular = tracker.popular_queries(POPULARITY_LIMIT)
    cached = sum(
        1 for item in popular if cache.find_by_query(item.query) is not None
    )
    return {
        "popular_queries": len(popular),
        "already_cached": cached,
        "to_be_prefetched": len(popular) - cached,
    }


async def prefetch_popular_queries(
    search: Callable[[str], Awaitable[object]],
    tracker: PopularityTracker,
    cache: ResponseCache,
    max_items: int = PREFETCH_MAX_ITEMS,
    delay: float = 2.0,
    spacing: float = 0.5,
) -> list[str]:
    """Run ``search`` for every planned query, one at a time.

    Waits ``delay`` seconds before the first call and ``spacing``
    seconds between calls. A failing query is logged and skipped.

    Returns:
        The queries that were attempted, in order.
    """
    plan = get_prefetch_list(tracker, cache, max_items)
    if not plan:
        logger.info("No items to prefetch, cache is warm")
        return []

    logger.info("Prefetching %d popular queries", len(plan))
    await asyncio.sleep(delay)

    attempted: list[str] = []
    for index, item in enumerate(plan):
        attempted.append(item.query)
        try:
            logger.debug(
                "Prefetching (%d/%d): %r", index + 1, len(plan), item.query
            )
            await search(item.query)
        except Exception as exc:
            logger.warning("Failed to prefetch %r: %s", item.query, exc)

        if index < len(plan) - 1:
            await asyncio.sleep(spacing)

    logger.info("Prefetching complete")
    return attempted
