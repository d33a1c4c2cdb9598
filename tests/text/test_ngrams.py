"""Tests for n-gram similarity."""

import pytest

from wastesort.text.ngrams import (
    calculate_similarity,
    generate_ngrams,
    ngram_similarity,
)


class TestGenerateNgrams:
    def test_bigrams_include_trigrams(self):
        assert generate_ngrams("abc") == {"ab", "bc", "abc"}

    def test_trigrams_only_for_n3(self):
        assert generate_ngrams("abcd", 3) == {"abc", "bcd"}

    def test_normalizes_input(self):
        assert generate_ngrams("Láh") == generate_ngrams("lah")

    def test_too_short(self):
        assert generate_ngrams("a") == set()
        assert generate_ngrams("") == set()


class TestNgramSimilarity:
    def test_identical(self):
        assert ngram_similarity("lahev", "lahev") == 1.0

    def test_diacritics_insensitive(self):
        assert ngram_similarity("Láhev", "lahev") == 1.0

    def test_partial_overlap(self):
        # 7 shared grams out of a 15-gram union
        assert ngram_similarity("lahev", "pet lahev") == pytest.approx(7 / 15)

    def test_empty(self):
        assert ngram_similarity("", "lahev") == 0.0
        assert ngram_similarity("x", "lahev") == 0.0


class TestCalculateSimilarity:
    def test_exact(self):
        assert calculate_similarity("Láhev", "lahev") == 1.0

    def test_prefix(self):
        assert calculate_similarity("pet", "PET láhev") == 0.9

    def test_containment(self):
        assert calculate_similarity("lahev", "PET láhev") == 0.8

    def test_phonetic(self):
        assert calculate_similarity("plechofka", "plechovka") == 0.7

    def test_ngram_fallback(self):
        score = calculate_similarity("lahve", "pet lahev")
        assert 0.0 < score < 0.6

    def test_empty(self):
        assert calculate_similarity("", "lahev") == 0.0
        assert calculate_similarity("   ", "lahev") == 0.0

    def test_bounded(self):
        for query, target in [
            ("sklo", "sklenice"),
            ("baterie", "baterka"),
            ("xyz", "plechovka"),
        ]:
            assert 0.0 <= calculate_similarity(query, target) <= 1.0
