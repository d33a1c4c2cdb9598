"""Popularity tracking and cache warm-up planning."""

from .prefetch import (
    get_prefetch_list,
    prefetch_popular_queries,
    prefetch_stats,
    should_prefetch,
)
from .tracker import AnalyticsStats, PopularityTracker, PopularQuery

__all__ = [
    "AnalyticsStats",
    "PopularQuery",
    "PopularityTracker",
    "get_prefetch_list",
    "prefetch_popular_queries",
    "prefetch_stats",
    "should_prefetch",
]
