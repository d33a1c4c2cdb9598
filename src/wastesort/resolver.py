"""Resolution pipeline: local knowledge base, then the response cache.

A query that neither tier can answer is left to the host's AI provider;
its answer comes back through :meth:`WasteResolver.record_answer`.
"""

import logging

from wastesort.analytics.tracker import PopularityTracker
from wastesort.cache.response_cache import ResponseCache
from wastesort.constants import SUGGESTION_LIMIT, SUGGESTION_THRESHOLD
from wastesort.knowledge import KnowledgeBase
from wastesort.matching.matcher import find_local_match, rank_matches
from wastesort.models import (
    CacheEntry,
    EventKind,
    ProviderAnswer,
    Resolution,
    Suggestion,
    WasteRecord,
)
from wastesort.storage import KeyValueStore
from wastesort.text.ngrams import calculate_similarity

logger = logging.getLogger(__name__)

IMAGE_QUERY_LABEL = "Vyfocený odpad"


class WasteResolver:
    """Answers queries from local data and records the outcomes."""

    def __init__(
        self,
        knowledge: KnowledgeBase,
        cache: ResponseCache,
        tracker: PopularityTracker,
    ) -> None:
        self.knowledge = knowledge
        self.cache = cache
        self.tracker = tracker

    def resolve_text(self, text: str) -> Resolution | None:
        """Resolve a free-text query without calling the AI provider.

        Returns None when neither the knowledge base nor the cache has a
        confident answer.
        """
        boosts = self.tracker.boost_table()

        record = find_local_match(
            text, self.knowledge.records(), boosts=boosts
        )
        if record is not None:
            is_user = self.knowledge.is_user_record(record.name)
            metadata = {"query": text}
            if is_user:
                metadata["userAdded"] = True
            self.tracker.track(EventKind.SEARCH_LOCAL_HIT, metadata)
            return Resolution(
                record=record,
                source="user" if is_user else "local",
                query=text,
            )

        entry = self.cache.find_by_query(text, boosts=boosts)
        if entry is not None:
            logger.debug("Found %r in AI cache", entry.name)
            self.tracker.track(EventKind.SEARCH_CACHE_HIT, {"query": text})
            return Resolution(
                record=entry.to_record(), source="cache", query=text
            )

        return None

    def resolve_image(self, image_data: str) -> Resolution | None:
        """Resolve a base64 image payload from the cache by fingerprint."""
        entry = self.cache.find_by_image(image_data)
        if entry is None:
            return None

        logger.debug("Found %r in AI cache (by image)", entry.name)
        self.tracker.track(EventKind.IMAGE_CACHE_HIT)
        return Resolution(
            record=entry.to_record(), source="cache", query=IMAGE_QUERY_LABEL
        )

    def suggest(
        self,
        text: str,
        limit: int = SUGGESTION_LIMIT,
        threshold: float = SUGGESTION_THRESHOLD,
    ) -> list[Suggestion]:
        """Ranked "did you mean" candidates under a relaxed threshold."""
        ranked = rank_matches(
            text,
            self.knowledge.records(),
            threshold,
            limit,
            boosts=self.tracker.boost_table(),
        )
        return [
            Suggestion(
                record=record,
                score=score,
                similarity=calculate_similarity(text, record.name),
            )
            for record, score in ranked
        ]

    def record_answer(
        self,
        answer: ProviderAnswer,
        query: str | None = None,
        image_data: str | None = None,
        promote: bool = True,
    ) -> CacheEntry:
        """Store a provider answer in the cache and the knowledge base."""
        self.tracker.track(
            EventKind.SEARCH_AI_CALL,
            {"query": query, "hasImage": bool(image_data)},
        )
        entry = self.cache.add(
            name=answer.name,
            category=answer.category,
            note=answer.note or "",
            query=query,
            image_data=image_data,
        )

        if promote:
            record = WasteRecord(
                name=answer.name,
                category=answer.category,
                note=answer.note or "",
            )
            self.add_record(record)

        return entry

    def add_record(self, record: WasteRecord) -> bool:
        """Add a user record to the knowledge base unless it exists."""
        if not self.knowledge.add(record):
            return False
        self.tracker.track(
            EventKind.USER_ADDED_ITEM,
            {"itemName": record.name, "category": record.category.name},
        )
        return True


def create_resolver(store: KeyValueStore) -> WasteResolver:
    """Wire a knowledge base, cache and tracker onto one store."""
    return WasteResolver(
        knowledge=KnowledgeBase(store),
        cache=ResponseCache(store),
        tracker=PopularityTracker(store),
    )
