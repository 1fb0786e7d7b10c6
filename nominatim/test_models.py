"""
Unit tests for Nominatim data models
"""

import datetime
import json

import pytest

from .exceptions import DecodeError
from .models import Address, Result, ServiceErrorPayload, Status


def test_status_round_trip():
    """Test Status survives encoding to JSON and decoding back, dood!"""
    status = Status(
        status=0,
        message="OK",
        data_updated=datetime.datetime(2022, 3, 18, 9, 21, 17, tzinfo=datetime.timezone.utc),
        software_version="4.0.1",
        database_version="4.0.1",
    )

    decoded = Status.fromDict(json.loads(json.dumps(status.toDict())))

    assert decoded == status


def test_status_round_trip_without_timestamp():
    """Test Status without data_updated round-trips too, dood!"""
    status = Status(status=704, message="No value")

    assert Status.fromDict(status.toDict()) == status


def test_status_invalid_timestamp():
    """Test unparseable timestamp is a decode failure, dood!"""
    with pytest.raises(DecodeError):
        Status.fromDict({"status": 0, "data_updated": "yesterday"})


def test_result_round_trip():
    """Test Result survives toDict()/fromDict(), dood!"""
    result = Result(
        place_id=1,
        osm_type="node",
        osm_id=2,
        lat="38.69",
        lon="-9.32",
        importance=0.5,
        display_name="Estoril",
        address=Address(city="Cascais", country_code="pt"),
        bounding_box=["1", "2", "3", "4"],
    )

    assert Result.fromDict(result.toDict()) == result


def test_result_accepts_both_bounding_box_spellings():
    """Test bounding box is read from boundingbox or bounding_box, dood!"""
    assert Result.fromDict({"boundingbox": ["1", "2"]}).bounding_box == ["1", "2"]
    assert Result.fromDict({"bounding_box": ["3", "4"]}).bounding_box == ["3", "4"]


def test_result_null_fields_take_zero_values():
    """Test nulls decode into zero values, dood!"""
    result = Result.fromDict({"place_id": None, "name": None, "address": None, "importance": None})

    assert result == Result()


def test_result_integer_importance():
    """Test integer importance is accepted as float, dood!"""
    assert Result.fromDict({"importance": 1}).importance == 1.0


@pytest.mark.parametrize(
    "data",
    [
        {"place_id": "1"},
        {"place_id": True},
        {"lat": 38.69},
        {"importance": "high"},
        {"address": []},
        {"address": {"city": 1}},
        {"boundingbox": "1,2,3,4"},
        {"boundingbox": [1, 2]},
    ],
)
def test_result_wrong_types_are_decode_errors(data):
    """Test incompatible JSON types are rejected, dood!"""
    with pytest.raises(DecodeError):
        Result.fromDict(data)


def test_result_requires_object():
    """Test non-object payload is rejected, dood!"""
    with pytest.raises(DecodeError):
        Result.fromDict([])


def test_service_error_payload():
    """Test error payload decoding, dood!"""
    payload = ServiceErrorPayload.fromDict({"code": 704, "message": "No value"})

    assert payload == ServiceErrorPayload(704, "No value")
    assert payload.toDict() == {"code": 704, "message": "No value"}
