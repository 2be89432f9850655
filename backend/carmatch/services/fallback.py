"""
Fallback chain for when the requested vehicle is not in stock.

Strategies are tried strictly in order and the first one that yields at
least one candidate wins; later strategies are never consulted.

1. year_alternative - same model, other years within max_year_distance
2. same_brand       - same brand and category, similar price, other models
3. same_category    - same category, similar price, any brand
4. price_range      - similar price only
5. no_results
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from carmatch.data.vehicle_profiles import estimate_reference_price, get_model_category
from carmatch.schemas.matching import (
    FallbackConfig,
    FallbackMetadata,
    FallbackResult,
    FallbackType,
    FallbackVehicleMatch,
    MatchingCriterion,
    SimilarityCriteria,
)
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.services.exact_search import inventory_sort_key, year_proximity_score
from carmatch.utils.category_normalizer import DEFAULT_CATEGORY, normalize_category
from carmatch.utils.similarity import SimilarityScorer, format_price
from carmatch.utils.vehicle_normalizer import models_match, normalize_brand, normalize_model_name

logger = logging.getLogger(__name__)

_CATEGORY_DISPLAY_NAMES = {
    "sedan": "sedans",
    "suv": "SUVs",
    "hatch": "hatches",
    "pickup": "pickups",
    "minivan": "minivans",
}


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _offered_years(matches: list[FallbackVehicleMatch]) -> list[int]:
    """Distinct years among the year-alternative candidates, ascending."""
    return sorted({m.vehicle.year for m in matches})


@dataclass(frozen=True)
class FallbackContext:
    """Inputs shared by every strategy for one find_alternatives() call."""

    requested_model: str
    requested_year: int | None
    inventory: tuple[VehicleRecord, ...]  # available vehicles only
    reference_price: float
    category: str
    brand: str | None


@dataclass(frozen=True)
class _Strategy:
    type: FallbackType
    find: Callable[[FallbackContext], list[FallbackVehicleMatch]]
    message: Callable[[FallbackContext, list[FallbackVehicleMatch]], str]


class FallbackService:
    """Finds alternatives through the ordered fallback chain."""

    def __init__(self, config: FallbackConfig | None = None, scorer: SimilarityScorer | None = None):
        self.config = config or FallbackConfig.from_settings()
        self.scorer = scorer or SimilarityScorer(price_tolerance_percent=self.config.price_tolerance_percent)
        self._strategies: tuple[_Strategy, ...] = (
            _Strategy("year_alternative", self._year_alternative_strategy, self._year_alternative_message),
            _Strategy("same_brand", self._same_brand_strategy, self._same_brand_message),
            _Strategy("same_category", self._same_category_strategy, self._same_category_message),
            _Strategy("price_range", self._price_range_strategy, self._price_range_message),
        )

    def find_alternatives(
        self,
        requested_model: str,
        requested_year: int | None,
        inventory: list[VehicleRecord],
        reference_price: float | None = None,
    ) -> FallbackResult:
        start = time.perf_counter()

        if not requested_model or not requested_model.strip():
            return self._no_results("", requested_year, "No model was specified.", start)

        available = tuple(v for v in inventory or () if v.available)
        if not available:
            return self._no_results(requested_model, requested_year, "No vehicles are available right now.", start)

        context = FallbackContext(
            requested_model=requested_model,
            requested_year=requested_year,
            inventory=available,
            reference_price=(
                reference_price if reference_price is not None else estimate_reference_price(requested_model)
            ),
            category=get_model_category(requested_model),
            brand=self.infer_brand(requested_model, available),
        )

        for strategy in self._strategies:
            matches = strategy.find(context)
            if not matches:
                continue
            logger.debug(
                "Fallback for %s %s resolved by %s (%d candidates)",
                requested_model,
                requested_year,
                strategy.type,
                len(matches),
            )
            return FallbackResult(
                type=strategy.type,
                vehicles=matches[: self.config.max_results],
                message=strategy.message(context, matches),
                requested_model=requested_model,
                requested_year=requested_year,
                available_years=(
                    _offered_years(matches) if strategy.type == "year_alternative" else None
                ),
                metadata=self._metadata(strategy.type, len(matches), start),
            )

        return self._no_results(
            requested_model,
            requested_year,
            "We could not find available alternatives right now. Please contact our sales team.",
            start,
        )

    # ── Strategies (each independently callable) ──────────────────

    def find_year_alternatives(
        self,
        model: str,
        requested_year: int,
        inventory: list[VehicleRecord] | tuple[VehicleRecord, ...],
    ) -> list[FallbackVehicleMatch]:
        """Same model, different year within max_year_distance; closest year first."""
        candidates = [
            v
            for v in inventory
            if models_match(v.model, model)
            and v.year != requested_year
            and abs(v.year - requested_year) <= self.config.max_year_distance
        ]

        matches = [
            FallbackVehicleMatch(
                vehicle=v,
                similarity_score=year_proximity_score(v.year, requested_year),
                matching_criteria=self._year_alternative_criteria(v, requested_year),
                reasoning=self._year_alternative_reasoning(v, requested_year),
            )
            for v in candidates
        ]
        matches.sort(key=lambda m: (-m.similarity_score,) + inventory_sort_key(m.vehicle))
        return matches

    def find_same_brand_alternatives(
        self,
        requested_model: str,
        brand: str,
        category: str,
        inventory: list[VehicleRecord] | tuple[VehicleRecord, ...],
        reference_price: float,
    ) -> list[FallbackVehicleMatch]:
        """Same brand and category, price within tolerance, different model."""
        if not self._valid_anchor(reference_price):
            return []

        target_brand = normalize_brand(brand)
        target_category = normalize_category(category)
        requested_key = normalize_model_name(requested_model)

        candidates = [
            v
            for v in inventory
            if normalize_brand(v.brand) == target_brand
            and normalize_category(v.body_type) == target_category
            and self._within_tolerance(v.price, reference_price)
            and normalize_model_name(v.model) != requested_key
        ]
        criteria = SimilarityCriteria(
            target_category=target_category,
            target_brand=brand,
            target_price=reference_price,
        )
        return self._score_candidates(candidates, criteria)

    def find_same_category_alternatives(
        self,
        category: str,
        inventory: list[VehicleRecord] | tuple[VehicleRecord, ...],
        reference_price: float,
    ) -> list[FallbackVehicleMatch]:
        """Same category, any brand, price within tolerance."""
        if not self._valid_anchor(reference_price):
            return []

        target_category = normalize_category(category)
        candidates = [
            v
            for v in inventory
            if normalize_category(v.body_type) == target_category and self._within_tolerance(v.price, reference_price)
        ]
        criteria = SimilarityCriteria(target_category=target_category, target_price=reference_price)
        return self._score_candidates(candidates, criteria)

    def find_price_range_alternatives(
        self,
        inventory: list[VehicleRecord] | tuple[VehicleRecord, ...],
        reference_price: float,
    ) -> list[FallbackVehicleMatch]:
        """Price within tolerance only. The category passed to the scorer is a placeholder, not a filter."""
        if not self._valid_anchor(reference_price):
            return []

        candidates = [v for v in inventory if self._within_tolerance(v.price, reference_price)]
        criteria = SimilarityCriteria(target_category=DEFAULT_CATEGORY, target_price=reference_price)
        return self._score_candidates(
            candidates,
            criteria,
            reasoning=lambda v, _: self._price_range_reasoning(v, reference_price),
        )

    @staticmethod
    def infer_brand(requested_model: str, inventory: list[VehicleRecord] | tuple[VehicleRecord, ...]) -> str | None:
        """Brand of the first vehicle in stock whose model matches the requested one."""
        for vehicle in inventory:
            if models_match(vehicle.model, requested_model):
                return vehicle.brand
        return None

    # ── Chain adapters ────────────────────────────────────────────

    def _year_alternative_strategy(self, ctx: FallbackContext) -> list[FallbackVehicleMatch]:
        if ctx.requested_year is None:
            return []
        return self.find_year_alternatives(ctx.requested_model, ctx.requested_year, ctx.inventory)

    def _same_brand_strategy(self, ctx: FallbackContext) -> list[FallbackVehicleMatch]:
        if not ctx.brand:
            return []
        return self.find_same_brand_alternatives(
            ctx.requested_model, ctx.brand, ctx.category, ctx.inventory, ctx.reference_price
        )

    def _same_category_strategy(self, ctx: FallbackContext) -> list[FallbackVehicleMatch]:
        return self.find_same_category_alternatives(ctx.category, ctx.inventory, ctx.reference_price)

    def _price_range_strategy(self, ctx: FallbackContext) -> list[FallbackVehicleMatch]:
        return self.find_price_range_alternatives(ctx.inventory, ctx.reference_price)

    # ── Helpers ───────────────────────────────────────────────────

    @staticmethod
    def _valid_anchor(reference_price: float) -> bool:
        return reference_price is not None and reference_price > 0

    def _within_tolerance(self, price: float, reference_price: float) -> bool:
        tolerance = reference_price * (self.config.price_tolerance_percent / 100)
        return reference_price - tolerance <= price <= reference_price + tolerance

    def _score_candidates(
        self,
        candidates: list[VehicleRecord],
        criteria: SimilarityCriteria,
        reasoning: Callable[[VehicleRecord, list[MatchingCriterion]], str] | None = None,
    ) -> list[FallbackVehicleMatch]:
        explain = reasoning or self._similar_profile_reasoning
        matches = []
        for vehicle in candidates:
            result = self.scorer.score(vehicle, criteria)
            matches.append(
                FallbackVehicleMatch(
                    vehicle=vehicle,
                    similarity_score=result.score,
                    matching_criteria=result.matching_criteria,
                    reasoning=explain(vehicle, result.matching_criteria),
                )
            )
        # Stable sort: equal scores keep inventory order
        matches.sort(key=lambda m: -m.similarity_score)
        return matches

    def _metadata(self, strategy: FallbackType, total_candidates: int, start: float) -> FallbackMetadata:
        return FallbackMetadata(
            strategy_used=strategy,
            total_candidates=total_candidates,
            processing_time_ms=round((time.perf_counter() - start) * 1000, 3),
        )

    def _no_results(self, requested_model: str, requested_year: int | None, message: str, start: float) -> FallbackResult:
        return FallbackResult(
            type="no_results",
            vehicles=[],
            message=message,
            requested_model=requested_model,
            requested_year=requested_year,
            metadata=self._metadata("no_results", 0, start),
        )

    @staticmethod
    def _year_alternative_criteria(vehicle: VehicleRecord, requested_year: int) -> list[MatchingCriterion]:
        year_diff = abs(vehicle.year - requested_year)
        return [
            MatchingCriterion(
                criterion="year",
                matched=True,
                details=f"Year {vehicle.year} ({_plural(year_diff, 'year')} apart)",
            ),
            MatchingCriterion(criterion="brand", matched=True, details=f"Same brand: {vehicle.brand}"),
            MatchingCriterion(criterion="category", matched=True, details=f"Same model: {vehicle.model}"),
        ]

    @staticmethod
    def _year_alternative_reasoning(vehicle: VehicleRecord, requested_year: int) -> str:
        year_diff = vehicle.year - requested_year
        direction = "newer" if year_diff > 0 else "older"
        return f"{vehicle.display_name} - {_plural(abs(year_diff), 'year')} {direction}"

    @staticmethod
    def _similar_profile_reasoning(vehicle: VehicleRecord, criteria: list[MatchingCriterion]) -> str:
        reasons = [c.details for c in criteria if c.matched][:3]
        return f"{vehicle.display_name} - {', '.join(reasons)}"

    @staticmethod
    def _price_range_reasoning(vehicle: VehicleRecord, reference_price: float) -> str:
        price_diff = vehicle.price - reference_price
        if price_diff == 0:
            return f"{vehicle.display_name} - {format_price(vehicle.price)} (at the reference price)"
        percent = round(abs(price_diff) / reference_price * 100)
        direction = "above" if price_diff > 0 else "below"
        return f"{vehicle.display_name} - {format_price(vehicle.price)} ({percent}% {direction} the reference price)"

    @staticmethod
    def _year_alternative_message(ctx: FallbackContext, matches: list[FallbackVehicleMatch]) -> str:
        years = ", ".join(str(y) for y in _offered_years(matches))
        return (
            f"We don't have the {ctx.requested_model} {ctx.requested_year} available, "
            f"but we have the same model in: {years}"
        )

    @staticmethod
    def _same_brand_message(ctx: FallbackContext, matches: list[FallbackVehicleMatch]) -> str:
        return f"We don't have the {ctx.requested_model} available, but we have other {ctx.brand} options in the same category"

    @staticmethod
    def _same_category_message(ctx: FallbackContext, matches: list[FallbackVehicleMatch]) -> str:
        category = normalize_category(ctx.category)
        name = _CATEGORY_DISPLAY_NAMES.get(category, category)
        return f"We don't have the {ctx.requested_model} available, but we have other {name} in a similar price range"

    @staticmethod
    def _price_range_message(ctx: FallbackContext, matches: list[FallbackVehicleMatch]) -> str:
        return (
            f"We don't have the {ctx.requested_model} available, but we have other options "
            f"around {format_price(ctx.reference_price)}"
        )

