"""
Weighted similarity scoring between a candidate vehicle and a target profile.

score = category + brand + price proximity + features, each term scaled by
its weight (defaults 40/25/20/15). The result is always an int in [0, 100].
"""

from carmatch.schemas.matching import (
    MatchingCriterion,
    SimilarityCriteria,
    SimilarityResult,
    SimilarityWeights,
)
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.utils.category_normalizer import normalize_category
from carmatch.utils.vehicle_normalizer import (
    normalize_brand,
    normalize_fuel,
    normalize_transmission,
)

DEFAULT_PRICE_TOLERANCE_PERCENT = 20.0


def format_price(price: float) -> str:
    return f"R$ {price:,.0f}".replace(",", ".")


def price_proximity_score(vehicle_price: float, target_price: float, tolerance_percent: float) -> float:
    """
    Price proximity term (0-100).

    100 inside target ± tolerance. Outside the band it decays linearly and
    reaches 0 once the price is a further full tolerance width away, i.e. at
    twice the tolerance from the target. A non-positive target is not a
    usable anchor and scores 0.
    """
    if target_price <= 0:
        return 0.0

    tolerance = target_price * (tolerance_percent / 100)
    min_price = target_price - tolerance
    max_price = target_price + tolerance

    if min_price <= vehicle_price <= max_price:
        return 100.0
    if tolerance <= 0:
        return 0.0

    deviation = min_price - vehicle_price if vehicle_price < min_price else vehicle_price - max_price
    return float(round(max(0.0, 100 - (deviation / tolerance) * 100)))


class SimilarityScorer:
    """Scores vehicles against SimilarityCriteria with configurable weights."""

    def __init__(
        self,
        weights: SimilarityWeights | None = None,
        price_tolerance_percent: float = DEFAULT_PRICE_TOLERANCE_PERCENT,
    ):
        self.weights = weights or SimilarityWeights()
        self.price_tolerance_percent = price_tolerance_percent

    def score(self, vehicle: VehicleRecord, criteria: SimilarityCriteria) -> SimilarityResult:
        """Score one vehicle; criteria are reported in evaluation order."""
        matching_criteria: list[MatchingCriterion] = []
        total = 0.0

        # Category
        vehicle_category = normalize_category(vehicle.body_type)
        target_category = normalize_category(criteria.target_category)
        category_matched = vehicle_category == target_category
        matching_criteria.append(
            MatchingCriterion(
                criterion="category",
                matched=category_matched,
                details=(
                    f"Same category: {vehicle_category}"
                    if category_matched
                    else f"Different category: {vehicle_category} vs {target_category}"
                ),
            )
        )
        if category_matched:
            total += self.weights.category

        # Brand - only when a target brand was given
        if criteria.target_brand:
            brand_matched = normalize_brand(vehicle.brand) == normalize_brand(criteria.target_brand)
            matching_criteria.append(
                MatchingCriterion(
                    criterion="brand",
                    matched=brand_matched,
                    details=(
                        f"Same brand: {vehicle.brand}"
                        if brand_matched
                        else f"Different brand: {vehicle.brand} vs {criteria.target_brand}"
                    ),
                )
            )
            if brand_matched:
                total += self.weights.brand

        # Price proximity
        price_term = price_proximity_score(vehicle.price, criteria.target_price, self.price_tolerance_percent)
        matching_criteria.append(
            MatchingCriterion(
                criterion="price",
                matched=price_term > 0,
                details=(
                    f"Similar price: {format_price(vehicle.price)}"
                    if price_term > 0
                    else f"Price out of range: {format_price(vehicle.price)}"
                ),
            )
        )
        total += (price_term / 100) * self.weights.price

        # Features - transmission / fuel, only those the caller specified
        feature_checks: list[tuple[str, bool, str]] = []
        if criteria.target_transmission:
            matched = normalize_transmission(vehicle.transmission) == normalize_transmission(
                criteria.target_transmission
            )
            details = (
                f"Same transmission: {vehicle.transmission}"
                if matched
                else f"Different transmission: {vehicle.transmission} vs {criteria.target_transmission}"
            )
            feature_checks.append(("transmission", matched, details))
        if criteria.target_fuel:
            matched = normalize_fuel(vehicle.fuel) == normalize_fuel(criteria.target_fuel)
            details = (
                f"Same fuel: {vehicle.fuel}"
                if matched
                else f"Different fuel: {vehicle.fuel} vs {criteria.target_fuel}"
            )
            feature_checks.append(("fuel", matched, details))

        if feature_checks:
            matched_count = sum(1 for _, matched, _ in feature_checks if matched)
            total += (matched_count / len(feature_checks)) * self.weights.features
            for kind, matched, details in feature_checks:
                matching_criteria.append(MatchingCriterion(criterion=kind, matched=matched, details=details))

        final_score = min(100, max(0, round(total)))
        return SimilarityResult(score=final_score, matching_criteria=matching_criteria)

