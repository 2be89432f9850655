"""
Pydantic schemas for parsed queries, scores and search results.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from carmatch.config import settings
from carmatch.schemas.vehicle import VehicleRecord

CriterionKind = Literal["category", "brand", "price", "transmission", "fuel", "year"]
MatchType = Literal["exact", "year_alternative", "suggestion"]
ExactSearchResultType = Literal["exact", "year_alternatives", "suggestions", "unavailable"]
FallbackType = Literal["year_alternative", "same_brand", "same_category", "price_range", "no_results"]

FALLBACK_TYPES: tuple[str, ...] = ("year_alternative", "same_brand", "same_category", "price_range", "no_results")


# ── Query parsing ──────────────────────────────────────────────────


class YearRange(BaseModel):
    """Inclusive year range; min <= max."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode="after")
    def _check_order(self):
        if self.min > self.max:
            raise ValueError(f"year range min {self.min} is greater than max {self.max}")
        return self

    def contains(self, year: int) -> bool:
        return self.min <= year <= self.max


class ExtractedFilters(BaseModel):
    """Model and year filters extracted from one free-text query."""

    model_config = ConfigDict(frozen=True)

    model: str | None = None
    year: int | None = None
    year_range: YearRange | None = None
    raw_query: str = ""

    @model_validator(mode="after")
    def _year_xor_range(self):
        if self.year is not None and self.year_range is not None:
            raise ValueError("year and year_range are mutually exclusive")
        return self

    @property
    def requested_year(self) -> int | None:
        """Single year, or the lower bound of the range."""
        if self.year is not None:
            return self.year
        if self.year_range is not None:
            return self.year_range.min
        return None


# ── Scoring ────────────────────────────────────────────────────────


class MatchingCriterion(BaseModel):
    """One evaluated dimension of a match with a human-readable explanation."""

    model_config = ConfigDict(frozen=True)

    criterion: CriterionKind
    matched: bool
    details: str


class SimilarityCriteria(BaseModel):
    """Target profile a candidate vehicle is scored against."""

    model_config = ConfigDict(frozen=True)

    target_category: str
    target_brand: str | None = None
    target_price: float
    target_transmission: str | None = None
    target_fuel: str | None = None


class SimilarityWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: float = Field(default=40, ge=0)
    brand: float = Field(default=25, ge=0)
    price: float = Field(default=20, ge=0)
    features: float = Field(default=15, ge=0)


class SimilarityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    matching_criteria: list[MatchingCriterion] = Field(default_factory=list)


# ── Exact search ───────────────────────────────────────────────────


class VehicleMatch(BaseModel):
    """Vehicle returned by the exact matcher."""

    vehicle: VehicleRecord
    match_score: int = Field(ge=0, le=100)
    reasoning: str
    match_type: MatchType


class ExactSearchResult(BaseModel):
    """Outcome of an exact (model + year) search."""

    type: ExactSearchResultType
    vehicles: list[VehicleMatch] = Field(default_factory=list)
    message: str
    requested_model: str = ""
    requested_year: int = 0  # 0 when the query carried no usable year
    available_years: list[int] | None = None


# ── Fallback chain ─────────────────────────────────────────────────


class FallbackConfig(BaseModel):
    """Per-engine fallback configuration; immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    max_results: int = Field(default=5, ge=1)
    price_tolerance_percent: float = Field(default=20.0, ge=0)
    max_year_distance: int = Field(default=5, ge=0)

    @classmethod
    def from_settings(cls) -> "FallbackConfig":
        return cls(
            max_results=settings.fallback_max_results,
            price_tolerance_percent=settings.fallback_price_tolerance_percent,
            max_year_distance=settings.fallback_max_year_distance,
        )


class FallbackVehicleMatch(BaseModel):
    """Alternative vehicle with its similarity score and evaluated criteria."""

    vehicle: VehicleRecord
    similarity_score: int = Field(ge=0, le=100)
    matching_criteria: list[MatchingCriterion] = Field(default_factory=list)
    reasoning: str


class FallbackMetadata(BaseModel):
    strategy_used: FallbackType
    total_candidates: int = Field(default=0, ge=0)
    processing_time_ms: float = Field(default=0.0, ge=0)


class FallbackResult(BaseModel):
    """Outcome of the fallback chain."""

    type: FallbackType
    vehicles: list[FallbackVehicleMatch] = Field(default_factory=list)
    message: str
    requested_model: str
    requested_year: int | None = None
    available_years: list[int] | None = None
    metadata: FallbackMetadata

    @model_validator(mode="after")
    def _no_results_is_empty(self):
        if self.type == "no_results" and self.vehicles:
            raise ValueError("a no_results fallback result cannot carry vehicles")
        return self


# ── Engine facade ──────────────────────────────────────────────────


class SearchOutcome(BaseModel):
    """Everything a presentation layer needs from one engine search."""

    filters: ExtractedFilters
    exact: ExactSearchResult
    fallback: FallbackResult | None = None
    trade_in: bool = False
    model_correction: str | None = None  # set when a typo was corrected
