"""Soundex-like phonetic coding tuned for Czech.

Acoustically confusable consonant groups share a digit and all vowels
collapse into a single sentinel, so typos such as "plechofka" and
"plechovka" produce the same code.
"""

import re

from wastesort.constants import PHONETIC_CODE_LENGTH
from wastesort.text.diacritics import normalize_query

_VOWEL = "A"
_DIGITS = frozenset("0123456789")

# Applied in order to the normalized word. The diacritic classes are
# kept so the table reads like the Czech sound groups it encodes.
_RULES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"[bp]"), "1"),
    (re.compile(r"[dt]"), "2"),
    (re.compile(r"[kg]"), "3"),
    (re.compile(r"[fv]"), "4"),
    (re.compile(r"[sz]"), "5"),
    (re.compile(r"[cč]"), "6"),
    (re.compile(r"[šs]"), "7"),
    (re.compile(r"[žz]"), "8"),
    (re.compile(r"[lr]"), "9"),
    (re.compile(r"[mn]"), "0"),
    (re.compile(r"[aeiouy]"), _VOWEL),
)


def _transform(word: str) -> str:
    text = normalize_query(word)
    for pattern, replacement in _RULES:
        text = pattern.sub(replacement, text)
    return text


def czech_phonetic(word: str) -> str:
    """Return the six-character phonetic code of a word.

    The code is the first transformed character followed by up to
    five digits, each different from the digit appended before it,
    right-padded with ``0``. Empty input yields an empty code.
    """
    if not word:
        return ""

    transformed = _transform(word)
    if not transformed:
        return ""

    code = transformed[0]
    prev = ""
    for char in transformed[1:]:
        if len(code) >= PHONETIC_CODE_LENGTH:
            break
        if char != prev and char != _VOWEL and char in _DIGITS:
            code += char
            prev = char

    return (code + "0" * PHONETIC_CODE_LENGTH)[:PHONETIC_CODE_LENGTH]


def sounds_like(word1: str, word2: str) -> bool:
    """Return True if two words have the same or nearly the same code.

    Codes may differ in at most one position (compared over the
    shorter code).
    """
    if not word1 or not word2:
        return False

    code1 = czech_phonetic(word1)
    code2 = czech_phonetic(word2)
    if not code1 or not code2:
        return False
    if code1 == code2:
        return True

    diff = sum(1 for a, b in zip(code1, code2) if a != b)
    return diff <= 1
