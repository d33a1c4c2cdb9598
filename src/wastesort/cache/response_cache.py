"""Cache of previously received AI answers.

Entries are addressed by normalized query text or by a positional
fingerprint of the image payload. The whole entry list lives in one
storage slot: it is loaded (and swept of expired entries) once at
construction and written back after every mutation.
"""

import logging
from collections.abc import Mapping

from pydantic import TypeAdapter

from wastesort.clock import Clock, now_ms
from wastesort.constants import (
    AI_CACHE_KEY,
    CACHE_MAX_ENTRIES,
    CACHE_TTL_MS,
    FINGERPRINT_SLICE,
    MATCH_THRESHOLD,
    MIN_QUERY_LENGTH,
)
from wastesort.matching.matcher import find_local_match
from wastesort.models import CacheEntry, WasteCategory
from wastesort.storage import KeyValueStore, load_list, save_list
from wastesort.text.diacritics import normalize_query

logger = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(list[CacheEntry])


def fingerprint_image(image_data: str) -> str:
    """Positional, non-cryptographic fingerprint of a base64 payload.

    Concatenates the first 50 characters, the 50 characters centred on
    the midpoint and the last 50 characters. Payloads shorter than 100
    characters are their own fingerprint.
    """
    length = len(image_data)
    if length < 2 * FINGERPRINT_SLICE:
        return image_data

    half = FINGERPRINT_SLICE // 2
    mid = length // 2
    start = image_data[:FINGERPRINT_SLICE]
    middle = image_data[mid - half:mid + half]
    end = image_data[length - FINGERPRINT_SLICE:]
    return f"{start}{middle}{end}"


class ResponseCache:
    """TTL- and capacity-bounded store of AI answers."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = AI_CACHE_KEY,
        ttl_ms: int = CACHE_TTL_MS,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._key = key
        self.ttl_ms = ttl_ms
        self.max_entries = max_entries
        self._clock = clock
        self._entries: list[CacheEntry] = load_list(store, key, _ENTRIES)
        self._purge_expired()

    # -----------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------

    def _save(self) -> None:
        save_list(self._store, self._key, _ENTRIES, self._entries)

    def _purge_expired(self) -> None:
        initial = len(self._entries)
        self._entries = [e for e in self._entries if self.is_valid(e)]
        removed = initial - len(self._entries)
        if removed:
            self._save()
            logger.info("Cleaned %d expired AI cache entries", removed)

    # -----------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------

    @property
    def entries(self) -> list[CacheEntry]:
        """Copy of all physically present entries, newest first."""
        return list(self._entries)

    def is_valid(self, entry: CacheEntry) -> bool:
        """True while the entry is younger than the TTL."""
        return self._clock() - entry.timestamp < self.ttl_ms

    def find_by_query(
        self,
        query: str,
        boosts: Mapping[str, float] | None = None,
    ) -> CacheEntry | None:
        """Find a live answer for a text query.

        Exact normalized-query equality wins; otherwise the local
        matcher runs over the live entries that carry a query, comparing
        by that query text.
        """
        if not query or len(query) < MIN_QUERY_LENGTH:
            return None

        candidates = [
            e for e in self._entries if e.query and self.is_valid(e)
        ]
        normalized = normalize_query(query)
        for entry in candidates:
            if normalize_query(entry.query) == normalized:
                return entry

        return find_local_match(
            query,
            candidates,
            MATCH_THRESHOLD,
            name_of=lambda e: e.query,
            boosts=boosts,
        )

    def find_by_image(self, image_data: str) -> CacheEntry | None:
        """Find a live answer whose image fingerprint matches the payload."""
        if not image_data:
            return None
        fingerprint = fingerprint_image(image_data)
        for entry in self._entries:
            if entry.image_fingerprint == fingerprint and self.is_valid(entry):
                return entry
        return None

    # -----------------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------------

    def add(
        self,
        name: str,
        category: WasteCategory,
        note: str = "",
        query: str | None = None,
        image_data: str | None = None,
    ) -> CacheEntry:
        """Store an AI answer, superseding an equivalent existing entry.

        An existing entry is replaced in place (with a fresh timestamp)
        when its normalized name, its normalized query or its image
        fingerprint equals the new one's. Otherwise the entry is
        prepended and the list truncated to ``max_entries``.
        """
        entry = CacheEntry(
            name=name,
            category=category,
            note=note,
            timestamp=self._clock(),
            query=query,
            image_fingerprint=(
                fingerprint_image(image_data) if image_data else None
            ),
        )

        entries = list(self._entries)
        index = self._find_equivalent(entries, entry)
        if index is not None:
            entries[index] = entry
        else:
            entries.insert(0, entry)
            del entries[self.max_entries:]

        self._entries = entries
        self._save()
        return entry

    @staticmethod
    def _find_equivalent(
        entries: list[CacheEntry], entry: CacheEntry
    ) -> int | None:
        name = normalize_query(entry.name)
        query = normalize_query(entry.query) if entry.query else None
        for index, cached in enumerate(entries):
            if normalize_query(cached.name) == name:
                return index
            if query and cached.query and normalize_query(cached.query) == query:
                return index
            if (
                entry.image_fingerprint
                and cached.image_fingerprint == entry.image_fingerprint
            ):
                return index
        return None

    def stats(self) -> dict[str, int]:
        """Counts of all, expired and live entries."""
        valid = sum(1 for e in self._entries if self.is_valid(e))
        return {
            "total": len(self._entries),
            "expired": len(self._entries) - valid,
            "valid": valid,
        }

    def clear(self) -> None:
        """Drop every entry."""
        self._entries = []
        self._save()
