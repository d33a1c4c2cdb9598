"""Czech text helpers used by the local matcher."""

from .diacritics import normalize_query, strip_diacritics, tokenize
from .ngrams import calculate_similarity, generate_ngrams, ngram_similarity
from .phonetic import czech_phonetic, sounds_like
from .stemmer import czech_stem, stem_phrase
from .synonyms import SYNONYMS, expand_query

__all__ = [
    "SYNONYMS",
    "calculate_similarity",
    "czech_phonetic",
    "czech_stem",
    "expand_query",
    "generate_ngrams",
    "ngram_similarity",
    "normalize_query",
    "sounds_like",
    "stem_phrase",
    "strip_diacritics",
    "tokenize",
]
