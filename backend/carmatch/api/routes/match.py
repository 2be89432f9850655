"""
Vehicle matching API routes.

The inventory snapshot always travels in the request body; nothing is stored.
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from carmatch.schemas.matching import ExtractedFilters, FallbackResult, SearchOutcome
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.services.matching_engine import matching_engine
from carmatch.services.result_serializer import (
    ResultSerializationError,
    deserialize_exact_result,
    deserialize_fallback_result,
)
from carmatch.utils.query_analysis import is_trade_in_context, parse_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match", tags=["match"])


# ── Request / Response Models ───────────────────────────────────────


class ParseRequest(BaseModel):
    query: str
    models: list[str] | None = None


class ParseResponse(BaseModel):
    filters: ExtractedFilters
    trade_in: bool


class SearchRequest(BaseModel):
    query: str
    inventory: list[VehicleRecord] = Field(default_factory=list)
    max_price: float | None = Field(default=None, ge=0)
    min_year: int | None = None
    reference_price: float | None = None


class AlternativesRequest(BaseModel):
    model: str
    year: int | None = None
    inventory: list[VehicleRecord] = Field(default_factory=list)
    reference_price: float | None = None


class DecodeRequest(BaseModel):
    payload: str
    kind: Literal["exact", "fallback"]


# ── Routes ──────────────────────────────────────────────────────────


@router.post("/parse", response_model=ParseResponse)
async def parse_endpoint(req: ParseRequest):
    """Extract model and year filters from a free-text query."""
    return ParseResponse(
        filters=parse_query(req.query, req.models),
        trade_in=is_trade_in_context(req.query),
    )


@router.post("/search", response_model=SearchOutcome)
async def search_endpoint(req: SearchRequest):
    """Exact search with the fallback chain when nothing matches."""
    logger.info("Match search: %r over %d vehicles", req.query, len(req.inventory))
    return matching_engine.search(
        req.query,
        req.inventory,
        max_price=req.max_price,
        min_year=req.min_year,
        reference_price=req.reference_price,
    )


@router.post("/alternatives", response_model=FallbackResult)
async def alternatives_endpoint(req: AlternativesRequest):
    """Run only the fallback chain for a model that is not in stock."""
    return matching_engine.alternatives(req.model, req.year, req.inventory, req.reference_price)


@router.post("/decode")
async def decode_endpoint(req: DecodeRequest):
    """Validate a serialized result and return it decoded."""
    try:
        if req.kind == "exact":
            result = deserialize_exact_result(req.payload)
        else:
            result = deserialize_fallback_result(req.payload)
    except ResultSerializationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"kind": req.kind, "result": result.model_dump(mode="json")}
