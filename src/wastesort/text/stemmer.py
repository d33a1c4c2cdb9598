"""Heuristic Czech stemmer.

Strips the most common case and number endings so that inflected
forms such as "lahev", "lahve" and "lahvi" collapse to a shared root.
This is a greedy longest-suffix strip, not a linguistic analysis; it
may over- or under-strip, but it is deterministic.

Input words are expected to be normalized already (see
:func:`wastesort.text.diacritics.normalize_query`), so the endings are
listed without diacritics.
"""

# Ordered longest first; equal-length suffixes can never both match.
_SUFFIXES = (
    "ich", "imi", "ach", "ama", "ami", "ove", "ata", "ete", "eho", "ych",
    "im", "ou", "um", "em", "es", "mi", "ho",
    "a", "e", "i", "y", "u", "o",
)

_MIN_WORD_LENGTH = 4
_MIN_STEM_LENGTH = 3


def czech_stem(word: str) -> str:
    """Return the heuristic root of a single normalized word.

    Words shorter than four characters are returned unchanged. The
    first suffix (longest first) whose removal leaves at least three
    characters is stripped.
    """
    if len(word) < _MIN_WORD_LENGTH:
        return word

    for suffix in _SUFFIXES:
        if word.endswith(suffix) and len(word) - len(suffix) >= _MIN_STEM_LENGTH:
            return word[: -len(suffix)]

    return word


def stem_phrase(text: str) -> str:
    """Stem every whitespace-separated word and join with single spaces."""
    return " ".join(czech_stem(w) for w in text.split())
