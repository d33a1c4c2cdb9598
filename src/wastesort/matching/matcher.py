"""Local fuzzy matcher.

Decides, without any network call, whether a free-text query has a
confident answer among a list of candidates. Every query variant (see
:func:`wastesort.text.synonyms.expand_query`) is scored against every
candidate name by the first applicable rule of a fixed priority list:

1. exact match
2. exact match after stemming
3. prefix
4. phonetic (single word of six or more characters)
5. n-gram similarity above an adaptive threshold
6. prefix after stemming
7. containment
8. containment after stemming
9. reverse containment
10. reverse containment after stemming
11. Levenshtein distance (plain, then stemmed)

Lower scores are better. The variant penalty and the candidate's
popularity boost are added to the rule's base score, and the global
minimum is accepted only if it is below the threshold.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import TypeVar

from wastesort.constants import (
    MATCH_THRESHOLD,
    MIN_QUERY_LENGTH,
    PHONETIC_MIN_LENGTH,
)
from wastesort.text.diacritics import normalize_query
from wastesort.text.ngrams import ngram_similarity
from wastesort.text.phonetic import sounds_like
from wastesort.text.stemmer import stem_phrase
from wastesort.text.synonyms import expand_query

logger = logging.getLogger(__name__)

T = TypeVar("T")

NameOf = Callable[[T], str]

_MIN_SIMILARITY_RATIO = 0.5
_PREFIX_COVERAGE = 0.9


def _default_name_of(candidate) -> str:
    return candidate.name


def levenshtein_distance(s: str, t: str) -> int:
    """Classic edit distance with unit insert/delete/substitute costs."""
    if not s:
        return len(t)
    if not t:
        return len(s)

    previous = list(range(len(s) + 1))
    for i, tc in enumerate(t, start=1):
        current = [i]
        for j, sc in enumerate(s, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (sc != tc),
                )
            )
        previous = current
    return previous[-1]


def _ngram_threshold(word_count: int) -> float:
    if word_count >= 3:
        return 0.8
    if word_count == 2:
        return 0.7
    return 0.4


def _prefix_accepted(query: str, name: str) -> bool:
    """Guard multi-word prefix matches.

    A single-word query always passes. A multi-word query passes only
    if it covers at least 90% of the name, or the name's word at the
    position of the query's last word is in a prefix relation with it.
    """
    query_words = query.split()
    if len(query_words) <= 1:
        return True

    name_words = name.split()
    last_query_word = query_words[-1]
    position = len(query_words) - 1
    last_name_word = name_words[position] if len(name_words) > position else ""
    last_word_matches = (
        last_name_word.startswith(last_query_word)
        or last_query_word.startswith(last_name_word)
    )
    return len(query) / len(name) >= _PREFIX_COVERAGE or last_word_matches


def _distance_limit(query: str, name: str, threshold: float) -> float:
    """Largest edit distance accepted for a pair of unstemmed strings."""
    return min(threshold, math.floor(min(len(query), len(name)) / 3))


def _fuzzy_distance(a: str, b: str, limit: float) -> int | None:
    """Return the edit distance if it is close enough to count, else None."""
    distance = levenshtein_distance(a, b)
    max_length = max(len(a), len(b))
    if max_length == 0:
        return None
    ratio = 1 - distance / max_length
    if distance <= limit and ratio >= _MIN_SIMILARITY_RATIO:
        return distance
    return None


def _base_score(
    query: str,
    query_stemmed: str,
    name: str,
    name_stemmed: str,
    threshold: float,
) -> float | None:
    """Score one (variant, name) pair by the first applicable rule.

    Both sides must already be normalized. Returns None when no rule
    applies.
    """
    if name == query:
        return 0.0

    if name_stemmed == query_stemmed:
        return 0.05

    if name.startswith(query):
        if _prefix_accepted(query, name):
            return 0.1 + (len(name) - len(query)) / 100
        # rejected multi-word prefix falls through

    word_count = len(query.split())

    if (
        word_count == 1
        and len(query) >= PHONETIC_MIN_LENGTH
        and sounds_like(query, name)
    ):
        return 0.2

    similarity = ngram_similarity(query, name)
    if similarity > _ngram_threshold(word_count):
        return 0.3 + (1 - similarity) / 2

    if name_stemmed.startswith(query_stemmed) and _prefix_accepted(
        query_stemmed, name_stemmed
    ):
        return 0.4 + (len(name_stemmed) - len(query_stemmed)) / 100

    if query in name:
        return 0.5 + (len(name) - len(query)) / 100

    if query_stemmed in name_stemmed:
        return 0.6 + (len(name_stemmed) - len(query_stemmed)) / 100

    if name in query:
        return 0.7 + (len(query) - len(name)) / 100

    if name_stemmed in query_stemmed:
        return 0.8 + (len(query_stemmed) - len(name_stemmed)) / 100

    # the stemmed retry keeps the limit of the unstemmed pair
    limit = _distance_limit(query, name, threshold)
    distance = _fuzzy_distance(query, name, limit)
    if distance is not None:
        return 1.0 + distance / 10

    distance = _fuzzy_distance(query_stemmed, name_stemmed, limit)
    if distance is not None:
        return 1.1 + distance / 10

    return None


def score_candidate(
    variant: str,
    name: str,
    threshold: float = MATCH_THRESHOLD,
    penalty: float = 0.0,
    boost: float = 0.0,
) -> float | None:
    """Score a single query variant against a single candidate name.

    Returns the match score (lower is better) or None if no rule
    applies. Variants shorter than two characters are never scored.
    """
    query = normalize_query(variant)
    if len(query) < MIN_QUERY_LENGTH:
        return None

    name = normalize_query(name)
    if not name:
        return None
    score = _base_score(
        query, stem_phrase(query), name, stem_phrase(name), threshold
    )
    if score is None:
        return None
    return score + penalty + boost


def _score_all(
    query: str,
    candidates: Iterable[T],
    threshold: float,
    name_of: NameOf,
    boosts: Mapping[str, float] | None,
) -> list[tuple[float, int, T]]:
    """Best score per candidate as (score, order, candidate).

    ``order`` is the index of the (variant, candidate) pair that first
    reached the score, so ties resolve to the pair scanned first.
    """
    boosts = boosts or {}
    prepared = []
    for candidate in candidates:
        name = normalize_query(name_of(candidate))
        prepared.append(
            (candidate, name, stem_phrase(name), boosts.get(name, 0.0))
        )

    best: dict[int, tuple[float, int]] = {}
    order = 0
    for variant in expand_query(query):
        if len(variant.text) < MIN_QUERY_LENGTH:
            continue
        variant_stemmed = stem_phrase(variant.text)

        for position, (_, name, name_stemmed, boost) in enumerate(prepared):
            order += 1
            if not name:
                continue
            base = _base_score(
                variant.text, variant_stemmed, name, name_stemmed, threshold
            )
            if base is None:
                continue
            score = base + variant.penalty + boost
            if position not in best or score < best[position][0]:
                best[position] = (score, order)

    return [
        (score, seen, prepared[position][0])
        for position, (score, seen) in best.items()
    ]


def find_local_match(
    query: str,
    candidates: Iterable[T],
    threshold: float = MATCH_THRESHOLD,
    *,
    name_of: NameOf = _default_name_of,
    boosts: Mapping[str, float] | None = None,
) -> T | None:
    """Return the best-matching candidate, or None if nothing is close.

    Args:
        query: Raw user query.
        candidates: Records to search; names are read via ``name_of``.
        threshold: Scores at or above this value are rejected. Also caps
            the Levenshtein distance accepted by the fuzzy rule.
        name_of: Accessor returning the text a candidate is matched by.
        boosts: Precomputed popularity adjustments keyed by normalized
            candidate name (non-positive; lower ranks better).

    Returns:
        The candidate with the globally lowest score (the earliest one
        on ties) if that score is below ``threshold``, otherwise None.
    """
    scored = _score_all(query, candidates, threshold, name_of, boosts)
    if not scored:
        logger.debug("No rule matched %r", query)
        return None

    best_score, _, best = min(scored, key=lambda item: (item[0], item[1]))
    if best_score < threshold:
        logger.debug(
            "Matched %r -> %r (score %.3f)", query, name_of(best), best_score
        )
        return best

    logger.debug(
        "Best score for %r was %.3f (threshold %s)",
        query,
        best_score,
        threshold,
    )
    return None


def rank_matches(
    query: str,
    candidates: Iterable[T],
    threshold: float = MATCH_THRESHOLD,
    limit: int | None = None,
    *,
    name_of: NameOf = _default_name_of,
    boosts: Mapping[str, float] | None = None,
) -> list[tuple[T, float]]:
    """Return every candidate scoring below ``threshold``, best first.

    Ties keep candidate order. ``limit`` truncates the result.
    """
    scored = _score_all(query, candidates, threshold, name_of, boosts)
    accepted = sorted(
        (item for item in scored if item[0] < threshold),
        key=lambda item: (item[0], item[1]),
    )
    if limit is not None:
        accepted = accepted[:limit]
    return [(candidate, score) for score, _, candidate in accepted]
