"""Tests for weighted similarity scoring."""

import pytest

from carmatch.schemas.matching import SimilarityCriteria, SimilarityWeights
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.utils.similarity import SimilarityScorer, format_price, price_proximity_score


def _make_vehicle(**kwargs) -> VehicleRecord:
    defaults = {
        "id": "v1",
        "brand": "Chevrolet",
        "model": "Onix",
        "year": 2020,
        "price": 100_000,
        "body_type": "Hatch",
        "fuel": "Flex",
        "transmission": "Manual",
    }
    defaults.update(kwargs)
    return VehicleRecord(**defaults)


def _criteria(**kwargs) -> SimilarityCriteria:
    defaults = {"target_category": "hatch", "target_price": 100_000}
    defaults.update(kwargs)
    return SimilarityCriteria(**defaults)


class TestPriceProximity:
    def test_inside_band_scores_full(self):
        assert price_proximity_score(100_000, 100_000, 20) == 100

    def test_exactly_at_band_edge_scores_full(self):
        assert price_proximity_score(120_000, 100_000, 20) == 100
        assert price_proximity_score(80_000, 100_000, 20) == 100

    def test_double_deviation_scores_zero(self):
        assert price_proximity_score(140_000, 100_000, 20) == 0
        assert price_proximity_score(60_000, 100_000, 20) == 0

    def test_linear_decay_between(self):
        assert price_proximity_score(130_000, 100_000, 20) == 50
        assert price_proximity_score(75_000, 100_000, 20) == 75

    def test_clamped_beyond_double(self):
        assert price_proximity_score(500_000, 100_000, 20) == 0

    def test_non_positive_target_scores_zero(self):
        assert price_proximity_score(100_000, 0, 20) == 0

    def test_zero_tolerance_is_a_cliff(self):
        assert price_proximity_score(100_000, 100_000, 0) == 100
        assert price_proximity_score(100_001, 100_000, 0) == 0


class TestSimilarityScorer:
    def test_category_and_price_only(self):
        result = SimilarityScorer().score(_make_vehicle(), _criteria())
        assert result.score == 60
        assert [c.criterion for c in result.matching_criteria] == ["category", "price"]

    def test_brand_omitted_when_not_targeted(self):
        result = SimilarityScorer().score(_make_vehicle(brand="Fiat"), _criteria())
        assert all(c.criterion != "brand" for c in result.matching_criteria)
        assert result.score == 60

    def test_brand_match_is_case_and_accent_insensitive(self):
        result = SimilarityScorer().score(_make_vehicle(brand="Citroën"), _criteria(target_brand="CITROEN"))
        assert result.score == 85

    def test_brand_mismatch(self):
        result = SimilarityScorer().score(_make_vehicle(brand="Fiat"), _criteria(target_brand="Chevrolet"))
        brand = next(c for c in result.matching_criteria if c.criterion == "brand")
        assert not brand.matched
        assert result.score == 60

    def test_perfect_match(self):
        criteria = _criteria(target_brand="Chevrolet", target_transmission="manual", target_fuel="flex")
        result = SimilarityScorer().score(_make_vehicle(), criteria)
        assert result.score == 100
        assert [c.criterion for c in result.matching_criteria] == [
            "category",
            "brand",
            "price",
            "transmission",
            "fuel",
        ]
        assert all(c.matched for c in result.matching_criteria)

    def test_half_of_features_matching(self):
        criteria = _criteria(target_transmission="Automático", target_fuel="Flex")
        result = SimilarityScorer().score(_make_vehicle(), criteria)
        # 40 category + 20 price + 7.5 features
        assert result.score == 68

    def test_category_uses_normalizer(self):
        result = SimilarityScorer().score(_make_vehicle(body_type="Sedã"), _criteria(target_category="sedan"))
        assert result.matching_criteria[0].matched

    def test_different_category(self):
        result = SimilarityScorer().score(_make_vehicle(body_type="SUV"), _criteria())
        assert not result.matching_criteria[0].matched
        assert result.score == 20

    def test_custom_weights(self):
        weights = SimilarityWeights(category=100, brand=0, price=0, features=0)
        result = SimilarityScorer(weights=weights).score(_make_vehicle(price=999_999), _criteria())
        assert result.score == 100

    @pytest.mark.parametrize("price", [0, 1, 50_000, 100_000, 150_000, 10_000_000])
    def test_score_always_in_bounds(self, price):
        weights = SimilarityWeights(category=80, brand=80, price=80, features=80)
        criteria = _criteria(target_brand="Chevrolet", target_fuel="flex")
        result = SimilarityScorer(weights=weights).score(_make_vehicle(price=price), criteria)
        assert isinstance(result.score, int)
        assert 0 <= result.score <= 100

    def test_price_details_use_currency_format(self):
        result = SimilarityScorer().score(_make_vehicle(price=85_000), _criteria())
        price = next(c for c in result.matching_criteria if c.criterion == "price")
        assert price.details == "Similar price: R$ 85.000"

    def test_criteria_carry_only_scored_targets(self):
        assert set(SimilarityCriteria.model_fields) == {
            "target_category",
            "target_brand",
            "target_price",
            "target_transmission",
            "target_fuel",
        }


class TestFormatPrice:
    def test_thousands_separator(self):
        assert format_price(125000) == "R$ 125.000"
        assert format_price(999) == "R$ 999"
