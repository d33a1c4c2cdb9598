"""Synonym and stem expansion of user queries.

Turns a raw query into a list of weighted rewritings (variants). The
original wording costs nothing; stemmed and synonym-substituted forms
carry a small penalty so that closer rewritings rank first.
"""

import logging

from wastesort.models import QueryVariant
from wastesort.text.diacritics import normalize_query
from wastesort.text.stemmer import czech_stem, stem_phrase

logger = logging.getLogger(__name__)

STEMMED_PENALTY = 0.1
SYNONYM_PENALTY = 0.2
STEM_EQUIVALENT_PENALTY = 0.25
STEMMED_SYNONYM_PENALTY = 0.3

# Canonical term -> surface variants used by people and the database.
_RAW_SYNONYMS: dict[str, list[str]] = {
    # Bottles and containers
    "lahev": [
        "flaska", "lahve", "flase", "flasky", "lahvi", "lahvich",
        "lahvemi",
    ],
    "flaska": ["lahev", "lahve", "lahvi", "flasky", "flasek", "flaskach"],
    "pet": [
        "petka", "petky", "plastova lahev", "plastova flaska",
        "pet lahev", "pet flaska",
    ],
    "plastova lahev": [
        "pet", "pet lahev", "pet flaska", "petka", "plastova flaska",
    ],
    "pet lahev": [
        "plastova lahev", "pet", "pet flaska", "petka", "plastova flaska",
    ],
    # Cartons and boxes
    "karton": [
        "krabice", "tetrapack", "tetra pak", "tetrapak", "lepenka",
        "napojovy karton",
    ],
    "krabice": ["karton", "box", "krabicka", "krabic", "krabicek", "lepenka"],
    "napojovy karton": [
        "karton od mleka", "karton od dzusu", "tetrapack", "tetrapak",
    ],
    "tetrapack": ["karton", "napojovy karton", "tetrapak", "tetra pak"],
    # Paper
    "noviny": ["casopis", "deniky", "magazin", "tisk", "novin", "novinach"],
    "casopis": ["noviny", "magazin", "casopisy", "casopisu"],
    "papir": ["papirovy odpad", "papiry", "lepenka"],
    # Glass
    "sklenice": [
        "sklo", "zavařovačka", "sklenicka", "sklenic", "sklenicek",
    ],
    "sklo": ["sklenice", "sklenenice", "lahev", "skleneny odpad"],
    # Metal
    "plechovka": ["konzerva", "plechovky", "konzervy", "plech", "plechovek"],
    "konzerva": ["plechovka", "konzervy", "plechovky", "konzervou"],
    "kov": ["kovy", "kovovy odpad", "kovove obaly", "plech"],
    # Electronics
    "baterie": ["baterka", "clanek", "akumulator", "baterii"],
    "mobil": ["telefon", "smartphone", "mobily", "telefony", "mobilni telefon"],
    "telefon": ["mobil", "smartphone", "mobily", "telefony", "mobilni telefon"],
    "pocitac": ["notebook", "laptop", "pc", "computer", "pocitace"],
    "notebook": ["pocitac", "laptop", "pc", "notebooky"],
    "lednicka": ["chladnicka", "mrazak", "mraznicka", "lednicky"],
    "televize": ["televizor", "tv", "monitor", "televizi", "televizory"],
    "elektro": ["elektroodpad", "elektrozarizeni", "elektrospotrebice"],
    # Textiles
    "obleceni": ["saty", "textil", "hadry", "satstvo", "odevy", "oblečení"],
    "textil": ["obleceni", "hadry", "satstvo", "odevy", "textilie"],
    "hadry": ["obleceni", "textil", "utěrky", "hadru"],
    # Cups
    "kelimek": ["kelímek", "pohar", "poharek", "kelimky", "kelímky"],
    "pohar": ["kelimek", "poharek", "pohary", "poharu"],
    # Plastics
    "plast": ["plastovy odpad", "plasty", "plastove obaly", "plastika"],
    "igelit": ["igelitovy sacek", "igelitova taska", "mikroten", "sacek"],
    "folie": ["plastova folie", "igelit", "obalova folie"],
    # Bio waste
    "bio": ["bioodpad", "biologicky odpad", "organicky odpad", "kompost"],
    "bioodpad": ["bio", "organicky odpad", "biologicky odpad", "kompost"],
    # Bags
    "sacek": ["sacky", "taška", "igelit", "igelitovy sacek"],
    "taska": ["tasky", "sacek", "igelitova taska"],
}


def _normalize_table(
    raw: dict[str, list[str]],
) -> dict[str, tuple[str, ...]]:
    """Normalize keys and values, dropping duplicates and self-references."""
    table: dict[str, tuple[str, ...]] = {}
    for canonical, variants in raw.items():
        key = normalize_query(canonical)
        seen: list[str] = []
        for variant in variants:
            value = normalize_query(variant)
            if value and value != key and value not in seen:
                seen.append(value)
        table[key] = tuple(seen)
    return table


SYNONYMS: dict[str, tuple[str, ...]] = _normalize_table(_RAW_SYNONYMS)

# canonical -> stems of the canonical term and all its variants
_STEM_INDEX: dict[str, frozenset[str]] = {
    canonical: frozenset(
        [czech_stem(canonical), *(czech_stem(s) for s in synonyms)]
    )
    for canonical, synonyms in SYNONYMS.items()
}


def _replace(words: list[str], start: int, count: int, text: str) -> str:
    return " ".join([*words[:start], text, *words[start + count:]])


def expand_query(query: str) -> list[QueryVariant]:
    """Expand a query into weighted variants.

    Produces, in order: the normalized query (penalty 0), its stemmed
    form (0.1), direct synonym substitutions for every word and every
    adjacent word pair (0.2) together with their stemmed forms (0.3),
    and canonical-term substitutions for words whose stem matches a
    synonym group (0.25). When the same text arises more than once it
    keeps the smallest penalty.
    """
    normalized = normalize_query(query)
    variants: dict[str, float] = {}

    def _add(text: str, penalty: float) -> None:
        if text not in variants or penalty < variants[text]:
            variants[text] = penalty

    _add(normalized, 0.0)

    words = normalized.split()
    stemmed_words = [czech_stem(w) for w in words]
    stemmed_query = " ".join(stemmed_words)
    if stemmed_query != normalized:
        _add(stemmed_query, STEMMED_PENALTY)

    for i, word in enumerate(words):
        for synonym in SYNONYMS.get(word, ()):
            _add(_replace(words, i, 1, synonym), SYNONYM_PENALTY)
            _add(
                _replace(words, i, 1, stem_phrase(synonym)),
                STEMMED_SYNONYM_PENALTY,
            )

        for canonical, stems in _STEM_INDEX.items():
            if stemmed_words[i] in stems:
                _add(_replace(words, i, 1, canonical), STEM_EQUIVALENT_PENALTY)

        if i < len(words) - 1:
            phrase = f"{word} {words[i + 1]}"
            for synonym in SYNONYMS.get(phrase, ()):
                _add(_replace(words, i, 2, synonym), SYNONYM_PENALTY)
                _add(
                    _replace(words, i, 2, stem_phrase(synonym)),
                    STEMMED_SYNONYM_PENALTY,
                )

    logger.debug("Variants for %r: %s", query, list(variants))
    return [QueryVariant(text, penalty) for text, penalty in variants.items()]
