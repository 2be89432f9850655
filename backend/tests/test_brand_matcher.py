"""Tests for typo-tolerant brand/model matching."""

from carmatch.schemas.vehicle import VehicleRecord
from carmatch.utils.brand_matcher import (
    confirmation_message,
    is_brand_word,
    known_brands,
    known_models,
    match_brand,
    match_brand_and_model,
    match_model,
)

BRANDS = ["Chevrolet", "Honda", "Toyota", "Volkswagen"]
MODELS = ["Civic", "Corolla", "Onix", "Tracker"]


class TestMatchBrand:
    def test_exact_case_insensitive(self):
        result = match_brand("TOYOTA", BRANDS)
        assert result.matched
        assert result.suggestion == "Toyota"
        assert result.confidence == 1.0

    def test_typo_is_corrected(self):
        result = match_brand("Toiota", BRANDS)
        assert result.matched
        assert result.suggestion == "Toyota"
        assert 0.6 <= result.confidence < 1.0

    def test_volkswagen_misspelling(self):
        assert match_brand("Volksvagen", BRANDS).suggestion == "Volkswagen"

    def test_no_match(self):
        result = match_brand("xyz", BRANDS)
        assert not result.matched
        assert result.suggestion is None
        assert result.original == "xyz"

    def test_threshold_override(self):
        result = match_brand("Toiota", BRANDS, threshold=95)
        assert not result.matched
        assert result.confidence > 0

    def test_empty_inputs(self):
        assert not match_brand("", BRANDS).matched
        assert not match_brand("Toyota", []).matched


class TestMatchModel:
    def test_typo_is_corrected(self):
        result = match_model("corola", MODELS)
        assert result.matched
        assert result.suggestion == "Corolla"

    def test_accented_input(self):
        assert match_model("Ônix", MODELS).confidence == 1.0


class TestMatchBrandAndModel:
    def test_brand_then_model(self):
        brand, model = match_brand_and_model("Toiota Corola 2020", BRANDS, MODELS)
        assert brand.suggestion == "Toyota"
        assert model.suggestion == "Corolla"

    def test_single_word(self):
        brand, model = match_brand_and_model("Honda", BRANDS, MODELS)
        assert brand.suggestion == "Honda"
        assert model is None

    def test_unmatched_parts_are_none(self):
        brand, model = match_brand_and_model("xyz qwe", BRANDS, MODELS)
        assert brand is None
        assert model is None

    def test_empty_query(self):
        assert match_brand_and_model("   ", BRANDS, MODELS) == (None, None)


class TestConfirmationMessage:
    def test_corrections_are_confirmed(self):
        brand, model = match_brand_and_model("Toiota Corola", BRANDS, MODELS)
        assert confirmation_message(brand, model) == "Did you mean **Toyota** **Corolla**?"

    def test_exact_matches_need_no_confirmation(self):
        brand, model = match_brand_and_model("Toyota Corolla", BRANDS, MODELS)
        assert confirmation_message(brand, model) is None

    def test_nothing_matched(self):
        assert confirmation_message() is None


class TestKnownValues:
    def test_distinct_sorted_available_only(self, sample_inventory):
        assert known_brands(sample_inventory) == ["Chevrolet", "Fiat", "Honda", "Hyundai", "Toyota"]
        assert known_models(sample_inventory) == ["Civic", "Corolla", "HB20", "Onix", "Strada", "Tracker"]

    def test_is_brand_word(self, sample_inventory):
        assert is_brand_word("KIA")
        assert is_brand_word("vw")
        assert is_brand_word("fiat", sample_inventory)
        assert not is_brand_word("Ka")
        assert not is_brand_word("")

    def test_stocked_brand_outside_common_list(self):
        inventory = [VehicleRecord(id="1", brand="BYD", model="Dolphin", year=2024, price=150_000)]
        assert not is_brand_word("byd")
        assert is_brand_word("byd", inventory)
