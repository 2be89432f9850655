"""Tests for body-type category normalization."""

import pytest

from carmatch.utils.category_normalizer import (
    CANONICAL_CATEGORIES,
    CATEGORY_SYNONYMS,
    DEFAULT_CATEGORY,
    normalize_category,
)


class TestNormalizeCategory:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Sedan", "sedan"),
            ("sedã", "sedan"),
            ("SUV", "suv"),
            ("Crossover", "suv"),
            ("Hatchback", "hatch"),
            ("Pick-up", "pickup"),
            ("Picape", "pickup"),
            ("Monovolume", "minivan"),
        ],
    )
    def test_direct_synonyms(self, raw, expected):
        assert normalize_category(raw) == expected

    def test_trims_whitespace(self):
        assert normalize_category("  suv  ") == "suv"

    def test_compound_phrase_by_substring(self):
        assert normalize_category("Picape cabine dupla") == "pickup"
        assert normalize_category("cabine dupla") == "pickup"
        assert normalize_category("SUV compacto") == "suv"

    def test_unknown_returns_normalized_input(self):
        assert normalize_category("  Conversível ") == "conversível"

    def test_empty_returns_default(self):
        assert normalize_category("") == DEFAULT_CATEGORY
        assert normalize_category(None) == DEFAULT_CATEGORY

    def test_every_synonym_maps_to_canonical(self):
        for synonym in CATEGORY_SYNONYMS:
            assert normalize_category(synonym) in CANONICAL_CATEGORIES
