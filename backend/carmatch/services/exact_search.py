"""
Exact vehicle search (model + year).

Three tiers, each entered only when the previous one is empty:

1. exact             - same model, requested year (or inside the year range)
2. year_alternatives - same model, any year, ranked by year proximity
3. suggestions       - different models with the requested model's typical
                       body type and a similar price or year

If all three are empty the result is "unavailable".
"""

import logging
from typing import Iterable

from carmatch.config import settings
from carmatch.data.vehicle_profiles import estimate_reference_price, get_model_category
from carmatch.schemas.matching import ExactSearchResult, ExtractedFilters, VehicleMatch, YearRange
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.utils.category_normalizer import normalize_category
from carmatch.utils.vehicle_normalizer import models_match

logger = logging.getLogger(__name__)


def inventory_sort_key(vehicle: VehicleRecord) -> tuple:
    """Price desc, mileage asc, version asc (case-insensitive)."""
    return (-vehicle.price, vehicle.mileage, (vehicle.version or "").casefold())


def year_proximity_score(vehicle_year: int, requested_year: int) -> int:
    """100 minus 10 per year of distance, never below 50."""
    distance = abs(vehicle_year - requested_year)
    return max(100 - distance * 10, 50)


def available_years(model: str, inventory: Iterable[VehicleRecord]) -> list[int]:
    """Distinct years in stock for a model, ascending."""
    return sorted({v.year for v in inventory if models_match(v.model, model)})


class ExactSearchService:
    """Runs the exact -> year alternative -> suggestion tiers over a snapshot."""

    def __init__(
        self,
        suggestion_price_tolerance_percent: float | None = None,
        suggestion_year_window: int | None = None,
    ):
        self.suggestion_price_tolerance_percent = (
            settings.suggestion_price_tolerance_percent
            if suggestion_price_tolerance_percent is None
            else suggestion_price_tolerance_percent
        )
        self.suggestion_year_window = (
            settings.suggestion_year_window if suggestion_year_window is None else suggestion_year_window
        )

    def search(
        self,
        filters: ExtractedFilters,
        inventory: Iterable[VehicleRecord],
        reference_price: float | None = None,
    ) -> ExactSearchResult:
        model = filters.model
        year = filters.requested_year

        if not model or not year:
            return ExactSearchResult(
                type="unavailable",
                message="Could not identify the requested model and year.",
                requested_model=model or "",
                requested_year=year or 0,
            )

        available = [v for v in inventory if v.available]

        exact = self.find_exact_matches(model, year, available, filters.year_range)
        if exact:
            logger.debug("Exact search %s %s: %d exact matches", model, year, len(exact))
            return ExactSearchResult(
                type="exact",
                vehicles=[
                    VehicleMatch(
                        vehicle=v,
                        match_score=100,
                        reasoning=f"Exact match: {v.display_name}",
                        match_type="exact",
                    )
                    for v in exact
                ],
                message=f"Found {len(exact)} {model} {self._describe_years(year, filters.year_range)} available!",
                requested_model=model,
                requested_year=year,
            )

        alternatives = self.find_year_alternatives(model, year, available)
        if alternatives.vehicles:
            logger.debug("Exact search %s %s: %d year alternatives", model, year, len(alternatives.vehicles))
            return alternatives

        suggestions = self.find_similar_suggestions(model, year, available, reference_price)
        if suggestions.vehicles:
            logger.debug("Exact search %s %s: %d suggestions", model, year, len(suggestions.vehicles))
            return suggestions

        logger.debug("Exact search %s %s: nothing available", model, year)
        return ExactSearchResult(
            type="unavailable",
            message=f"We could not find a {model} {year} available right now.",
            requested_model=model,
            requested_year=year,
        )

    def find_exact_matches(
        self,
        model: str,
        year: int,
        inventory: Iterable[VehicleRecord],
        year_range: YearRange | None = None,
    ) -> list[VehicleRecord]:
        """Same model and year (or inside year_range), best unit first."""
        matches = []
        for vehicle in inventory:
            if not models_match(vehicle.model, model):
                continue
            in_year = year_range.contains(vehicle.year) if year_range else vehicle.year == year
            if in_year:
                matches.append(vehicle)
        return sorted(matches, key=inventory_sort_key)

    def find_year_alternatives(
        self,
        model: str,
        requested_year: int,
        inventory: Iterable[VehicleRecord],
    ) -> ExactSearchResult:
        """Same model in any year, closest year first."""
        same_model = [v for v in inventory if models_match(v.model, model)]
        if not same_model:
            return ExactSearchResult(
                type="unavailable",
                message=f"We could not find a {model} {requested_year} available right now.",
                requested_model=model,
                requested_year=requested_year,
            )

        scored = [(year_proximity_score(v.year, requested_year), v) for v in same_model]
        scored.sort(key=lambda pair: (-pair[0],) + inventory_sort_key(pair[1]))

        return ExactSearchResult(
            type="year_alternatives",
            vehicles=[
                VehicleMatch(
                    vehicle=v,
                    match_score=score,
                    reasoning=f"{v.display_name} - close to the requested year",
                    match_type="year_alternative",
                )
                for score, v in scored
            ],
            message=f"We don't have a {model} {requested_year}, but other years are available. Would you consider one?",
            available_years=available_years(model, same_model),
            requested_model=model,
            requested_year=requested_year,
        )

    def find_similar_suggestions(
        self,
        model: str,
        year: int,
        inventory: Iterable[VehicleRecord],
        reference_price: float | None = None,
    ) -> ExactSearchResult:
        """
        Different models sharing the requested model's typical body type and
        matching its price (±30%) or year (±3). Score: +40 body, +30 price, +30 year.
        """
        target_category = get_model_category(model)
        base_price = reference_price if reference_price is not None else estimate_reference_price(model)
        has_price_anchor = base_price > 0
        tolerance = self.suggestion_price_tolerance_percent / 100
        min_price, max_price = base_price * (1 - tolerance), base_price * (1 + tolerance)
        min_year, max_year = year - self.suggestion_year_window, year + self.suggestion_year_window

        scored: list[VehicleMatch] = []
        for vehicle in inventory:
            if models_match(vehicle.model, model):
                continue
            if normalize_category(vehicle.body_type) != target_category:
                continue
            price_in_range = has_price_anchor and min_price <= vehicle.price <= max_price
            year_in_range = min_year <= vehicle.year <= max_year
            if not (price_in_range or year_in_range):
                continue

            score = 40
            reasons = [f"same body type ({vehicle.body_type})"]
            if price_in_range:
                score += 30
                reasons.append("similar price range")
            if year_in_range:
                score += 30
                reasons.append(f"close year ({vehicle.year})")

            scored.append(
                VehicleMatch(
                    vehicle=vehicle,
                    match_score=score,
                    reasoning=f"{vehicle.display_name} - {', '.join(reasons)}",
                    match_type="suggestion",
                )
            )

        if not scored:
            return ExactSearchResult(
                type="suggestions",
                message=f"We found neither a {model} {year} nor similar vehicles right now. Want to see other options?",
                requested_model=model,
                requested_year=year,
            )

        scored.sort(key=lambda m: (-m.match_score, -m.vehicle.price))
        return ExactSearchResult(
            type="suggestions",
            vehicles=scored,
            message=f"We don't have a {model} available, but we have similar vehicles. Want to take a look?",
            requested_model=model,
            requested_year=year,
        )

    @staticmethod
    def _describe_years(year: int, year_range: YearRange | None) -> str:
        if year_range and year_range.min != year_range.max:
            return f"{year_range.min}-{year_range.max}"
        return str(year)

