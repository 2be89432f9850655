"""
Typo-tolerant brand and model matching against an inventory snapshot.

"Toiota" -> "Toyota", "Volksvagen" -> "Volkswagen", "corola" -> "Corolla".
Exact case-insensitive matches win outright; otherwise the closest
rapidfuzz ratio above the configured threshold is suggested.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from rapidfuzz import fuzz, process

from carmatch.config import settings
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.utils.vehicle_normalizer import normalize_text

logger = logging.getLogger(__name__)

# Brands sold in Brazil, including the common shorthands
COMMON_BRANDS: tuple[str, ...] = (
    "Chevrolet", "GM", "Citroen", "Fiat", "Ford", "Honda", "Hyundai", "Jeep",
    "Kia", "Mitsubishi", "Nissan", "Peugeot", "Renault", "Toyota", "Volkswagen", "VW",
)


@dataclass(frozen=True)
class FuzzyMatchResult:
    matched: bool
    original: str
    suggestion: str | None = None
    confidence: float = 0.0  # 0-1


def _distinct(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            out.append(value)
    return sorted(out)


def known_brands(inventory: Iterable[VehicleRecord]) -> list[str]:
    return _distinct(v.brand for v in inventory if v.available)


def is_brand_word(word: str, inventory: Iterable[VehicleRecord] = ()) -> bool:
    """True if the word names a stocked brand or one of COMMON_BRANDS."""
    normalized = normalize_text(word)
    if not normalized:
        return False
    brands = known_brands(inventory) + list(COMMON_BRANDS)
    return any(normalize_text(b) == normalized for b in brands)


def known_models(inventory: Iterable[VehicleRecord]) -> list[str]:
    return _distinct(v.model for v in inventory if v.available)


def _best_match(value: str, choices: list[str], threshold: float | None) -> FuzzyMatchResult:
    if not value or not value.strip() or not choices:
        return FuzzyMatchResult(matched=False, original=value)

    cutoff = settings.fuzzy_match_threshold if threshold is None else threshold
    normalized = normalize_text(value)
    normalized_choices = [normalize_text(c) for c in choices]

    for choice, norm_choice in zip(choices, normalized_choices):
        if norm_choice == normalized:
            return FuzzyMatchResult(matched=True, original=value, suggestion=choice, confidence=1.0)

    best = process.extractOne(normalized, normalized_choices, scorer=fuzz.ratio)
    if best is None:
        return FuzzyMatchResult(matched=False, original=value)

    _, score, index = best
    confidence = round(score / 100, 4)
    if score >= cutoff:
        logger.debug("Fuzzy match %r -> %r (%.1f)", value, choices[index], score)
        return FuzzyMatchResult(matched=True, original=value, suggestion=choices[index], confidence=confidence)
    return FuzzyMatchResult(matched=False, original=value, confidence=confidence)


def match_brand(value: str, brands: list[str], threshold: float | None = None) -> FuzzyMatchResult:
    """Match a possibly misspelled brand against known brands."""
    return _best_match(value, brands, threshold)


def match_model(value: str, models: list[str], threshold: float | None = None) -> FuzzyMatchResult:
    """Match a possibly misspelled model against known models."""
    return _best_match(value, models, threshold)


def match_brand_and_model(
    query: str,
    brands: list[str],
    models: list[str],
    threshold: float | None = None,
) -> tuple[FuzzyMatchResult | None, FuzzyMatchResult | None]:
    """
    Treat the first word of the query as a brand and the second as a model
    ("Toiota Corola 2020"). Unmatched parts come back as None.
    """
    words = query.split()
    if not words:
        return None, None

    brand = match_brand(words[0], brands, threshold)
    model = match_model(words[1], models, threshold) if len(words) > 1 else None
    return (brand if brand.matched else None), (model if model and model.matched else None)


def confirmation_message(
    brand: FuzzyMatchResult | None = None,
    model: FuzzyMatchResult | None = None,
) -> str | None:
    """'Did you mean ...?' prompt for corrected (non-exact) matches, else None."""
    parts = [
        f"**{m.suggestion}**"
        for m in (brand, model)
        if m is not None and m.matched and m.suggestion and m.confidence < 1.0
    ]
    if not parts:
        return None
    return f"Did you mean {' '.join(parts)}?"
