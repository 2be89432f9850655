"""Tests for the result wire format."""

import json

import pytest

from carmatch.schemas.matching import ExtractedFilters
from carmatch.schemas.vehicle import VehicleRecord
from carmatch.services.exact_search import ExactSearchService
from carmatch.services.fallback import FallbackService
from carmatch.services.result_serializer import (
    ResultSerializationError,
    deserialize_exact_result,
    deserialize_fallback_result,
    serialize_exact_result,
    serialize_fallback_result,
)


def _make_vehicle(**kwargs) -> VehicleRecord:
    defaults = {
        "id": "v1",
        "brand": "Chevrolet",
        "model": "Onix",
        "version": "1.0 LT",
        "year": 2021,
        "mileage": 18_000,
        "price": 89_000,
        "color": "Prata",
        "body_type": "Hatch",
        "fuel": "Flex",
        "transmission": "Manual",
        "photo_url": "https://example.com/onix.jpg",
    }
    defaults.update(kwargs)
    return VehicleRecord(**defaults)


@pytest.fixture
def exact_result():
    filters = ExtractedFilters(model="Onix", year=2019, raw_query="onix 2019")
    return ExactSearchService().search(filters, [_make_vehicle()])


@pytest.fixture
def fallback_result():
    inventory = [_make_vehicle(id="hb20", brand="Hyundai", model="HB20", price=90_000)]
    return FallbackService().find_alternatives("Zeta", 2019, inventory)


class TestExactRoundTrip:
    def test_round_trip_preserves_every_field(self, exact_result):
        assert exact_result.type == "year_alternatives"
        decoded = deserialize_exact_result(serialize_exact_result(exact_result))
        assert decoded == exact_result

    def test_wire_shape(self, exact_result):
        data = json.loads(serialize_exact_result(exact_result))
        assert set(data) == {"type", "vehicles", "message", "metadata"}
        assert data["metadata"]["requested_model"] == "Onix"
        assert data["metadata"]["requested_year"] == 2019
        assert data["metadata"]["available_years"] == [2021]
        assert data["metadata"]["timestamp"]

    def test_available_years_omitted_when_absent(self):
        filters = ExtractedFilters(model="Onix", year=2021)
        result = ExactSearchService().search(filters, [_make_vehicle()])
        data = json.loads(serialize_exact_result(result))
        assert "available_years" not in data["metadata"]
        assert deserialize_exact_result(json.dumps(data)) == result


class TestFallbackRoundTrip:
    def test_round_trip_preserves_every_field(self, fallback_result):
        assert fallback_result.type == "same_category"
        decoded = deserialize_fallback_result(serialize_fallback_result(fallback_result))
        assert decoded == fallback_result

    def test_metadata_on_the_wire(self, fallback_result):
        metadata = json.loads(serialize_fallback_result(fallback_result))["metadata"]
        assert metadata["strategy_used"] == "same_category"
        assert metadata["total_candidates"] == 1
        assert "processing_time_ms" in metadata
        assert "timestamp" in metadata

    def test_null_requested_year(self):
        result = FallbackService().find_alternatives("Onix", None, [])
        payload = serialize_fallback_result(result)
        assert json.loads(payload)["metadata"]["requested_year"] is None
        assert deserialize_fallback_result(payload) == result


class TestRejections:
    def test_malformed_json(self):
        with pytest.raises(ResultSerializationError):
            deserialize_exact_result("{not json")

    def test_empty_payload(self):
        with pytest.raises(ResultSerializationError, match="empty"):
            deserialize_fallback_result("")

    def test_non_string_payload(self):
        with pytest.raises(ResultSerializationError):
            deserialize_exact_result({"type": "exact"})

    def test_unknown_type(self, exact_result):
        data = json.loads(serialize_exact_result(exact_result))
        data["type"] = "maybe"
        with pytest.raises(ResultSerializationError, match="type"):
            deserialize_exact_result(json.dumps(data))

    def test_fallback_type_rejected_for_exact(self, fallback_result):
        with pytest.raises(ResultSerializationError):
            deserialize_exact_result(serialize_fallback_result(fallback_result))

    def test_missing_requested_model(self, exact_result):
        data = json.loads(serialize_exact_result(exact_result))
        del data["metadata"]["requested_model"]
        with pytest.raises(ResultSerializationError, match="requested_model"):
            deserialize_exact_result(json.dumps(data))

    def test_requested_year_must_be_a_number(self, exact_result):
        data = json.loads(serialize_exact_result(exact_result))
        data["metadata"]["requested_year"] = "2019"
        with pytest.raises(ResultSerializationError, match="requested_year"):
            deserialize_exact_result(json.dumps(data))

    def test_missing_metadata(self, fallback_result):
        data = json.loads(serialize_fallback_result(fallback_result))
        del data["metadata"]
        with pytest.raises(ResultSerializationError):
            deserialize_fallback_result(json.dumps(data))

    def test_no_results_with_vehicles(self, fallback_result):
        data = json.loads(serialize_fallback_result(fallback_result))
        data["type"] = "no_results"
        with pytest.raises(ResultSerializationError):
            deserialize_fallback_result(json.dumps(data))

    def test_error_is_a_value_error_with_cause(self):
        with pytest.raises(ValueError) as exc_info:
            deserialize_fallback_result("[]")
        assert exc_info.value.__cause__ is not None
