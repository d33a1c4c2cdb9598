"""Popularity tracking.

An append-only log of user-facing resolution outcomes. Consumers never
replay individual events; they read aggregates: per-kind counts, the
most frequent queries, and the popularity boosts fed to the matcher.
"""

import json
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter

from wastesort.clock import Clock, now_ms
from wastesort.constants import (
    ANALYTICS_KEY,
    EVENT_RETENTION_MS,
    MAX_POPULARITY_BOOST,
    POPULARITY_LIMIT,
)
from wastesort.models import EventKind, PopularityEvent
from wastesort.storage import KeyValueStore, load_list, save_list
from wastesort.text.diacritics import normalize_query

logger = logging.getLogger(__name__)

_EVENTS = TypeAdapter(list[PopularityEvent])


class PopularQuery(BaseModel):
    query: str
    count: int


class ErrorCounts(BaseModel):
    offline: int = 0
    no_api_key: int = 0
    ai_failed: int = 0


class CompressionSavings(BaseModel):
    total_original_size: int
    total_compressed_size: int
    average_reduction: float


class AnalyticsStats(BaseModel):
    """Aggregate counts over a time window, with derived rates in %."""

    total_searches: int = 0
    local_hits: int = 0
    cache_hits: int = 0
    ai_calls: int = 0
    suggestions_shown: int = 0
    suggestions_accepted: int = 0
    suggestions_rejected: int = 0
    images_captured: int = 0
    images_compressed: int = 0
    image_cache_hits: int = 0
    user_added_items: int = 0
    feedback_positive: int = 0
    feedback_negative: int = 0
    errors: ErrorCounts = Field(default_factory=ErrorCounts)

    cache_hit_rate: float = 0.0
    suggestion_acceptance_rate: float = 0.0
    ai_usage_rate: float = 0.0
    image_cache_hit_rate: float = 0.0
    compression_savings: CompressionSavings | None = None


def _rate(part: int, whole: int) -> float:
    """Percentage rounded to one decimal place; 0 when whole is 0."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 1000) / 10


class PopularityTracker:
    """Event log loaded once, swept at load, flushed on every event."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = ANALYTICS_KEY,
        retention_ms: int = EVENT_RETENTION_MS,
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._key = key
        self._clock = clock
        self.retention_ms = retention_ms
        self.session_start = clock()
        self._events: list[PopularityEvent] = load_list(store, key, _EVENTS)
        self._purge_old()

    def _save(self) -> None:
        save_list(self._store, self._key, _EVENTS, self._events)

    def _purge_old(self) -> None:
        cutoff = self._clock() - self.retention_ms
        initial = len(self._events)
        self._events = [e for e in self._events if e.timestamp > cutoff]
        removed = initial - len(self._events)
        if removed:
            self._save()
            logger.info("Cleaned %d old analytics events", removed)

    @property
    def events(self) -> list[PopularityEvent]:
        return list(self._events)

    def track(
        self,
        kind: EventKind,
        metadata: dict[str, Any] | None = None,
    ) -> PopularityEvent:
        """Append an event and flush the log."""
        event = PopularityEvent(
            kind=kind, timestamp=self._clock(), metadata=metadata
        )
        self._events = [*self._events, event]
        self._save()
        logger.debug("Tracked %s %s", kind.value, metadata or "")
        return event

    def count(self, kind: EventKind, since: int | None = None) -> int:
        """Number of events of ``kind`` at or after ``since``.

        ``since`` defaults to the session start (tracker construction).
        """
        start = self.session_start if since is None else since
        return sum(
            1
            for e in self._events
            if e.kind == kind and e.timestamp >= start
        )

    def popular_queries(self, limit: int = 10) -> list[PopularQuery]:
        """Most frequent lowercased ``metadata["query"]`` values.

        Scans events of every kind. Ties keep first-seen order.
        """
        counter: Counter[str] = Counter()
        for event in self._events:
            query = (event.metadata or {}).get("query")
            if query and isinstance(query, str):
                counter[query.lower()] += 1
        return [
            PopularQuery(query=q, count=c)
            for q, c in counter.most_common(limit)
        ]

    def boost_table(self, limit: int = POPULARITY_LIMIT) -> dict[str, float]:
        """Matcher adjustments keyed by normalized query.

        More frequent queries get a lower (better) score, down to
        ``-0.5``.
        """
        table: dict[str, float] = {}
        for item in self.popular_queries(limit):
            key = normalize_query(item.query)
            if key not in table:
                table[key] = -min(item.count / 10, MAX_POPULARITY_BOOST)
        return table

    def stats(self, since: int | None = None) -> AnalyticsStats:
        """Aggregate counts and rates for events at or after ``since``."""
        start = self.session_start if since is None else since
        relevant = [e for e in self._events if e.timestamp >= start]
        counts = Counter(e.kind for e in relevant)

        local_hits = counts[EventKind.SEARCH_LOCAL_HIT]
        cache_hits = counts[EventKind.SEARCH_CACHE_HIT]
        ai_calls = counts[EventKind.SEARCH_AI_CALL]
        total_searches = local_hits + cache_hits + ai_calls
        shown = counts[EventKind.SEARCH_SUGGESTION_SHOWN]
        accepted = counts[EventKind.SEARCH_SUGGESTION_ACCEPTED]
        captured = counts[EventKind.IMAGE_CAPTURED]
        image_hits = counts[EventKind.IMAGE_CACHE_HIT]

        return AnalyticsStats(
            total_searches=total_searches,
            local_hits=local_hits,
            cache_hits=cache_hits,
            ai_calls=ai_calls,
            suggestions_shown=shown,
            suggestions_accepted=accepted,
            suggestions_rejected=counts[EventKind.SEARCH_SUGGESTION_REJECTED],
            images_captured=captured,
            images_compressed=counts[EventKind.IMAGE_COMPRESSED],
            image_cache_hits=image_hits,
            user_added_items=counts[EventKind.USER_ADDED_ITEM],
            feedback_positive=counts[EventKind.USER_FEEDBACK_POSITIVE],
            feedback_negative=counts[EventKind.USER_FEEDBACK_NEGATIVE],
            errors=ErrorCounts(
                offline=counts[EventKind.ERROR_OFFLINE],
                no_api_key=counts[EventKind.ERROR_NO_API_KEY],
                ai_failed=counts[EventKind.ERROR_AI_FAILED],
            ),
            cache_hit_rate=_rate(cache_hits, total_searches),
            suggestion_acceptance_rate=_rate(accepted, shown),
            ai_usage_rate=_rate(ai_calls, total_searches),
            image_cache_hit_rate=_rate(image_hits, captured),
            compression_savings=_compression_savings(relevant),
        )

    def export_data(self) -> str:
        """Events, current stats and top queries as a JSON document."""
        payload = {
            "events": [e.model_dump(mode="json") for e in self._events],
            "stats": self.stats().model_dump(mode="json"),
            "popular_queries": [
                q.model_dump() for q in self.popular_queries(20)
            ],
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)

    def clear(self) -> None:
        """Drop every event."""
        self._events = []
        self._save()


def _compression_savings(
    events: list[PopularityEvent],
) -> CompressionSavings | None:
    compressed = [
        e
        for e in events
        if e.kind == EventKind.IMAGE_COMPRESSED and e.metadata
    ]
    if not compressed:
        return None

    original = sum(int(e.metadata.get("originalSize", 0)) for e in compressed)
    reduced = sum(int(e.metadata.get("compressedSize", 0)) for e in compressed)
    reduction = (original - reduced) / original * 100 if original > 0 else 0.0
    return CompressionSavings(
        total_original_size=original,
        total_compressed_size=reduced,
        average_reduction=round(reduction * 10) / 10,
    )
