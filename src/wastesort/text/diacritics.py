"""Diacritics normalization for transparent Czech/ASCII matching."""

import unicodedata


def strip_diacritics(text: str) -> str:
    """Strip diacritics from text and lowercase it.

    Uses NFD normalization to decompose characters, then removes
    combining marks (category 'Mn'), so "láhev" and "lahev" compare
    equal.

    Args:
        text: Input text (Czech or ASCII).

    Returns:
        Text with diacritics removed, lowercased.
    """
    nfd = unicodedata.normalize("NFD", text.lower())
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def normalize_query(query: str) -> str:
    """Normalize text for diacritics-insensitive matching.

    Applied to both the user query and every candidate name. The
    result is stable: normalizing it again returns it unchanged.

    Args:
        query: User query or record name.

    Returns:
        Lowercased, trimmed string without combining marks.
    """
    return strip_diacritics(query).strip()


def tokenize(text: str) -> list[str]:
    """Split normalized text into words."""
    return normalize_query(text).split()
