"""
Vehicle matching engine.

Entry point for one free-text request against an inventory snapshot:
parse -> exact search -> fallback chain (only when nothing in the exact
tiers is available). Stateless; every call works on the snapshot it is given.
"""

import logging
import re
from typing import Iterable

from carmatch.data.vehicle_profiles import VEHICLE_PROFILES
from carmatch.schemas.matching import (
    ExactSearchResult,
    ExtractedFilters,
    FallbackConfig,
    FallbackResult,
    SearchOutcome,
)
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.services.exact_search import ExactSearchService
from carmatch.services.fallback import FallbackService
from carmatch.utils.brand_matcher import is_brand_word, known_models, match_model
from carmatch.utils.query_analysis import DEFAULT_MODELS, QueryParser, is_trade_in_context

logger = logging.getLogger(__name__)

# Shorter words ("a", "o", "um") fuzzy-match short model names like "Ka"
_MIN_FUZZY_WORD_LENGTH = 3

# Words shorter than this need a closer match ("kia" vs "Ka" scores 80)
_SHORT_WORD_LENGTH = 5
_SHORT_WORD_THRESHOLD = 85


def apply_inventory_filters(
    inventory: Iterable[VehicleRecord],
    max_price: float | None = None,
    min_year: int | None = None,
) -> list[VehicleRecord]:
    """
    Available records within the budget ceiling and minimum year.

    A price of 0 means unknown and is never excluded by the budget.
    """
    filtered = []
    for vehicle in inventory:
        if not vehicle.available:
            continue
        if max_price is not None and vehicle.price > 0 and vehicle.price > max_price:
            continue
        if min_year is not None and vehicle.year < min_year:
            continue
        filtered.append(vehicle)
    return filtered


class VehicleMatchingEngine:
    def __init__(
        self,
        config: FallbackConfig | None = None,
        exact_search: ExactSearchService | None = None,
        current_year: int | None = None,
    ):
        self.config = config or FallbackConfig.from_settings()
        self.exact_search = exact_search or ExactSearchService()
        self.fallback = FallbackService(self.config)
        self.current_year = current_year

    def search(
        self,
        query: str,
        inventory: list[VehicleRecord],
        max_price: float | None = None,
        min_year: int | None = None,
        reference_price: float | None = None,
    ) -> SearchOutcome:
        inventory = list(inventory or [])
        filters = self.build_parser(inventory).parse(query)

        if is_trade_in_context(query):
            logger.info("Trade-in context in query %r, skipping matching", query)
            return SearchOutcome(
                filters=filters,
                exact=ExactSearchResult(
                    type="unavailable",
                    message="Noted, that is the vehicle you want to trade in.",
                    requested_model=filters.model or "",
                    requested_year=filters.requested_year or 0,
                ),
                trade_in=True,
            )

        model_correction = None
        if filters.model is None:
            filters, model_correction = self._recover_model(filters, inventory)

        snapshot = apply_inventory_filters(inventory, max_price=max_price, min_year=min_year)
        exact = self.exact_search.search(filters, snapshot, reference_price=reference_price)

        fallback = None
        if exact.type == "unavailable" and filters.model:
            fallback = self.fallback.find_alternatives(
                filters.model,
                filters.requested_year,
                snapshot,
                reference_price=reference_price,
            )

        logger.debug(
            "Search %r: exact=%s fallback=%s",
            query,
            exact.type,
            fallback.type if fallback else None,
        )
        return SearchOutcome(
            filters=filters,
            exact=exact,
            fallback=fallback,
            model_correction=model_correction,
        )

    def alternatives(
        self,
        requested_model: str,
        requested_year: int | None,
        inventory: list[VehicleRecord],
        reference_price: float | None = None,
    ) -> FallbackResult:
        """Run only the fallback chain."""
        return self.fallback.find_alternatives(requested_model, requested_year, inventory, reference_price)

    def build_parser(self, inventory: list[VehicleRecord]) -> QueryParser:
        """
        Parser over the whole snapshot plus the built-in and profiled models.

        A model filtered out by budget, or not stocked at all, is still
        recognised and can drive the fallback chain.
        """
        parser = QueryParser.from_inventory(inventory, current_year=self.current_year)
        parser.add_models(DEFAULT_MODELS)
        parser.add_models(VEHICLE_PROFILES)
        return parser

    @staticmethod
    def _recover_model(
        filters: ExtractedFilters,
        inventory: list[VehicleRecord],
    ) -> tuple[ExtractedFilters, str | None]:
        """Fuzzy-match non-brand query words against stocked models when the parser found none."""
        models = known_models(inventory)
        for word in re.findall(r"[^\W\d_]+", filters.raw_query):
            if len(word) < _MIN_FUZZY_WORD_LENGTH or is_brand_word(word, inventory):
                continue
            threshold = _SHORT_WORD_THRESHOLD if len(word) < _SHORT_WORD_LENGTH else None
            result = match_model(word, models, threshold)
            if result.matched and result.suggestion:
                logger.debug("Recovered model %r from %r", result.suggestion, word)
                correction = result.suggestion if result.confidence < 1.0 else None
                return filters.model_copy(update={"model": result.suggestion}), correction
        return filters, None


# Default engine built from settings
matching_engine = VehicleMatchingEngine()
