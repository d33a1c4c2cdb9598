"""Tests for the local fuzzy matcher."""

import pytest

from wastesort.matching.matcher import (
    find_local_match,
    levenshtein_distance,
    rank_matches,
    score_candidate,
)
from wastesort.models import WasteCategory, WasteRecord
from wastesort.text.diacritics import normalize_query


def _records(*names):
    return [WasteRecord(name=n, category=WasteCategory.PLAST) for n in names]


class TestLevenshteinDistance:
    @pytest.mark.parametrize(
        "s,t,expected",
        [
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
            ("abc", "abc", 0),
            ("", "abc", 3),
            ("abc", "", 3),
        ],
    )
    def test_distance(self, s, t, expected):
        assert levenshtein_distance(s, t) == expected


class TestScoreCandidate:
    def test_exact(self):
        assert score_candidate("PET Láhev", "pet lahev") == 0.0

    def test_stemmed_exact(self):
        assert score_candidate("lahvi", "lahve") == 0.05

    def test_prefix(self):
        assert score_candidate("kelimek", "kelímek od jogurtu") == (
            pytest.approx(0.21)
        )

    def test_multi_word_prefix(self):
        assert score_candidate("kelimek od", "kelímek od jogurtu") == (
            pytest.approx(0.18)
        )

    def test_phonetic(self):
        assert score_candidate("plechofka", "plechovka") == pytest.approx(0.2)

    def test_ngram(self):
        # similarity 7/15
        assert score_candidate("lahev", "PET láhev") == pytest.approx(
            0.3 + (1 - 7 / 15) / 2
        )

    def test_containment(self):
        assert score_candidate("lahev", "plastová láhev") == pytest.approx(
            0.59
        )

    def test_reverse_containment(self):
        assert score_candidate("stara plechovka", "plechovka") == (
            pytest.approx(0.76)
        )

    def test_levenshtein(self):
        # three substitutions in nine characters
        assert score_candidate("abcdefghi", "axcdxfghx") == pytest.approx(1.3)

    def test_stemmed_levenshtein_uses_unstemmed_limit(self):
        # stems "tsamz" and "fmamz" are two edits apart; the limit comes
        # from the six-character query, not from the five-character stems
        assert score_candidate("tsamzy", "fmamzami") == pytest.approx(1.3)

    def test_levenshtein_capped_by_threshold(self):
        assert score_candidate("abcdefghi", "axcdxfghx", threshold=2) is None

    def test_penalty_and_boost(self):
        assert score_candidate(
            "sklenice", "sklenice", penalty=0.2, boost=-0.3
        ) == pytest.approx(-0.1)

    def test_short_variant(self):
        assert score_candidate("a", "a") is None

    def test_empty_name(self):
        assert score_candidate("sklenice", "") is None

    def test_no_rule(self):
        assert score_candidate("xyzzy", "plechovka") is None


class TestFindLocalMatch:
    @pytest.mark.parametrize(
        "query", ["sklenice", "Sklenice", "PET LÁHEV", "karton od mleka"]
    )
    def test_exact_wins(self, sample_db, query):
        match = find_local_match(query, sample_db)
        assert match is not None
        assert normalize_query(match.name) == normalize_query(query)

    def test_exact_record(self, sample_db):
        match = find_local_match("sklenice", sample_db)
        assert match.name == "sklenice"

    def test_prefix_match(self, sample_db):
        match = find_local_match("kelimek", sample_db)
        assert match.name == "kelímek od jogurtu"

    def test_synonym_match(self, sample_db):
        match = find_local_match("konzerva", sample_db)
        assert match.name == "plechovka"

    def test_plural_via_stemming(self):
        db = _records("PET láhev", "sklenice", "plechovka")
        match = find_local_match("lahve", db)
        assert match is not None
        assert match.name == "PET láhev"

    def test_phonetic_typo(self, sample_db):
        match = find_local_match("plechofka", sample_db)
        assert match.name == "plechovka"

    def test_short_query(self, sample_db):
        assert find_local_match("a", sample_db) is None
        assert find_local_match("a", _records("a")) is None

    def test_two_letter_query_without_match(self):
        db = _records("PET láhev", "sklenice", "plechovka")
        assert find_local_match("to", db) is None

    def test_no_match(self, sample_db):
        assert find_local_match("xyzzy", sample_db) is None

    def test_empty_candidates(self):
        assert find_local_match("sklenice", []) is None

    def test_threshold_is_exclusive(self, sample_db):
        assert find_local_match("sklenice", sample_db, threshold=0) is None

    def test_threshold_rejects_weak_match(self, sample_db):
        # best score is 0.21
        assert find_local_match("kelimek", sample_db, threshold=0.2) is None
        assert find_local_match("kelimek", sample_db, threshold=0.22)

    def test_tie_goes_to_earlier_candidate(self):
        db = _records("kelimek a", "kelimek b")
        assert find_local_match("kelimek", db).name == "kelimek a"

    def test_boost_breaks_tie(self):
        db = _records("kelimek a", "kelimek b")
        match = find_local_match("kelimek", db, boosts={"kelimek b": -0.3})
        assert match.name == "kelimek b"

    def test_custom_name_accessor(self):
        items = [{"label": "PET láhev"}, {"label": "sklenice"}]
        match = find_local_match(
            "pet lahev", items, name_of=lambda item: item["label"]
        )
        assert match == {"label": "PET láhev"}

    def test_skips_empty_names(self):
        db = _records("", "sklenice")
        assert find_local_match("sklenice", db).name == "sklenice"


class TestRankMatches:
    def test_sorted_ascending(self):
        db = _records("sklenice", "plastová láhev", "PET láhev")
        ranked = rank_matches("lahev", db)
        scores = [score for _, score in ranked]
        assert scores == sorted(scores)
        assert ranked[0][0].name == "PET láhev"

    def test_limit(self):
        db = _records("sklenice", "plastová láhev", "PET láhev")
        ranked = rank_matches("lahev", db, limit=2)
        assert [r.name for r, _ in ranked] == ["PET láhev", "plastová láhev"]

    def test_threshold_filters(self):
        db = _records("plastová láhev", "PET láhev")
        ranked = rank_matches("lahev", db, threshold=0.58)
        assert [r.name for r, _ in ranked] == ["PET láhev"]

    def test_no_candidates(self):
        assert rank_matches("lahev", []) == []
