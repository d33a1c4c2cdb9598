"""Character n-gram similarity."""

from wastesort.text.diacritics import normalize_query
from wastesort.text.phonetic import sounds_like


def generate_ngrams(text: str, n: int = 2) -> set[str]:
    """Return the set of contiguous character n-grams of normalized text.

    For ``n == 2`` the trigrams are folded into the same set as well;
    the matcher's similarity thresholds are calibrated on that mixed
    granularity.
    """
    normalized = normalize_query(text)
    grams = {normalized[i:i + n] for i in range(len(normalized) - n + 1)}
    if n == 2 and len(normalized) >= 3:
        grams.update(
            normalized[i:i + 3] for i in range(len(normalized) - 2)
        )
    return grams


def ngram_similarity(str1: str, str2: str, n: int = 2) -> float:
    """Jaccard index of the n-gram sets of two strings (0..1)."""
    grams1 = generate_ngrams(str1, n)
    grams2 = generate_ngrams(str2, n)
    if not grams1 or not grams2:
        return 0.0

    intersection = len(grams1 & grams2)
    union = len(grams1) + len(grams2) - intersection
    return intersection / union if union else 0.0


def calculate_similarity(query: str, target: str) -> float:
    """Blend exact, prefix, containment, phonetic and n-gram signals.

    Returns 1.0 for identical normalized strings, 0.9 for a prefix,
    0.8 for containment, otherwise the better of 0.7 (phonetic match)
    and 0.6 times the n-gram similarity.
    """
    if not query or not target:
        return 0.0

    q = normalize_query(query)
    t = normalize_query(target)
    if not q or not t:
        return 0.0
    if q == t:
        return 1.0
    if t.startswith(q):
        return 0.9
    if q in t:
        return 0.8

    score = 0.0
    if sounds_like(query, target):
        score = 0.7
    return max(score, ngram_similarity(query, target) * 0.6)
