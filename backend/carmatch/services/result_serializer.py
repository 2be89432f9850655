"""
JSON wire format for exact-search and fallback results.

Envelope:

    {
      "type": "...",
      "vehicles": [...],
      "message": "...",
      "metadata": {
        "requested_model": "Onix",
        "requested_year": 2019,
        "available_years": [2018, 2020],   # optional
        "timestamp": "2026-01-01T12:00:00+00:00",
        # fallback results only
        "strategy_used": "...", "total_candidates": 3, "processing_time_ms": 0.4
      }
    }

Decoding validates the type discriminator and the required metadata and
raises ResultSerializationError instead of returning a partial object.
"""

import logging
from datetime import UTC, datetime

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from carmatch.schemas.matching import (
    ExactSearchResult,
    ExactSearchResultType,
    FallbackMetadata,
    FallbackResult,
    FallbackType,
    FallbackVehicleMatch,
    VehicleMatch,
)

logger = logging.getLogger(__name__)


class ResultSerializationError(ValueError):
    """Raised when a result payload cannot be encoded or decoded."""


class _ExactMetadata(BaseModel):
    requested_model: StrictStr
    requested_year: StrictInt
    available_years: list[int] | None = None
    timestamp: str | None = None


class _ExactEnvelope(BaseModel):
    type: ExactSearchResultType
    vehicles: list[VehicleMatch] = Field(default_factory=list)
    message: str
    metadata: _ExactMetadata


class _FallbackMetadata(BaseModel):
    requested_model: StrictStr
    # Required key; null when the query carried no year
    requested_year: StrictInt | None
    available_years: list[int] | None = None
    timestamp: str | None = None
    strategy_used: FallbackType
    total_candidates: int = Field(ge=0)
    processing_time_ms: float = Field(ge=0)


class _FallbackEnvelope(BaseModel):
    type: FallbackType
    vehicles: list[FallbackVehicleMatch] = Field(default_factory=list)
    message: str
    metadata: _FallbackMetadata


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def _describe(exc: ValidationError) -> str:
    details = []
    for error in exc.errors()[:5]:
        location = ".".join(str(part) for part in error["loc"]) or "payload"
        details.append(f"{location}: {error['msg']}")
    return "; ".join(details)


def _omit_missing_years(available_years: list[int] | None) -> dict | None:
    return {"metadata": {"available_years"}} if available_years is None else None


def _check_payload(payload: str | bytes, kind: str) -> None:
    if not isinstance(payload, (str, bytes, bytearray)):
        raise ResultSerializationError(f"{kind} payload must be a JSON string, got {type(payload).__name__}")
    if not payload or not payload.strip():
        raise ResultSerializationError(f"{kind} payload is empty")


def serialize_exact_result(result: ExactSearchResult) -> str:
    envelope = _ExactEnvelope(
        type=result.type,
        vehicles=result.vehicles,
        message=result.message,
        metadata=_ExactMetadata(
            requested_model=result.requested_model,
            requested_year=result.requested_year,
            available_years=result.available_years,
            timestamp=_timestamp(),
        ),
    )
    return envelope.model_dump_json(exclude=_omit_missing_years(result.available_years))


def deserialize_exact_result(payload: str | bytes) -> ExactSearchResult:
    _check_payload(payload, "Exact search result")
    try:
        envelope = _ExactEnvelope.model_validate_json(payload)
        return ExactSearchResult(
            type=envelope.type,
            vehicles=envelope.vehicles,
            message=envelope.message,
            requested_model=envelope.metadata.requested_model,
            requested_year=envelope.metadata.requested_year,
            available_years=envelope.metadata.available_years,
        )
    except ValidationError as e:
        logger.debug("Rejected exact search payload: %s", e)
        raise ResultSerializationError(f"Invalid exact search result: {_describe(e)}") from e


def serialize_fallback_result(result: FallbackResult) -> str:
    envelope = _FallbackEnvelope(
        type=result.type,
        vehicles=result.vehicles,
        message=result.message,
        metadata=_FallbackMetadata(
            requested_model=result.requested_model,
            requested_year=result.requested_year,
            available_years=result.available_years,
            timestamp=_timestamp(),
            strategy_used=result.metadata.strategy_used,
            total_candidates=result.metadata.total_candidates,
            processing_time_ms=result.metadata.processing_time_ms,
        ),
    )
    # requested_year stays on the wire even when null
    return envelope.model_dump_json(exclude=_omit_missing_years(result.available_years))


def deserialize_fallback_result(payload: str | bytes) -> FallbackResult:
    _check_payload(payload, "Fallback result")
    try:
        envelope = _FallbackEnvelope.model_validate_json(payload)
        metadata = envelope.metadata
        return FallbackResult(
            type=envelope.type,
            vehicles=envelope.vehicles,
            message=envelope.message,
            requested_model=metadata.requested_model,
            requested_year=metadata.requested_year,
            available_years=metadata.available_years,
            metadata=FallbackMetadata(
                strategy_used=metadata.strategy_used,
                total_candidates=metadata.total_candidates,
                processing_time_ms=metadata.processing_time_ms,
            ),
        )
    except ValidationError as e:
        logger.debug("Rejected fallback payload: %s", e)
        raise ResultSerializationError(f"Invalid fallback result: {_describe(e)}") from e
