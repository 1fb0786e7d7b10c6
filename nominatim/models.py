"""
Nominatim API Data Models

This module defines dataclass models for the Nominatim API responses.
Models are immutable snapshots, built from decoded JSON with strict
type checks: a field with an incompatible JSON type raises DecodeError,
while absent or null fields take their zero values, dood!
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Self

from .exceptions import DecodeError


def _expectObject(data: Any, modelName: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{modelName}: expected JSON object, got {type(data).__name__}", data)
    return data


def _getStr(data: Dict[str, Any], key: str, modelName: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"{modelName}.{key}: expected string, got {type(value).__name__}", data)
    return value


def _getInt(data: Dict[str, Any], key: str, modelName: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass, but JSON true/false is not a number
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{modelName}.{key}: expected integer, got {type(value).__name__}", data)
    return value


def _getFloat(data: Dict[str, Any], key: str, modelName: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"{modelName}.{key}: expected number, got {type(value).__name__}", data)
    return float(value)


def _getStrList(data: Dict[str, Any], key: str, modelName: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise DecodeError(f"{modelName}.{key}: expected list of strings", data)
    return list(value)


def _getDatetime(data: Dict[str, Any], key: str, modelName: str) -> Optional[datetime.datetime]:
    value = _getStr(data, key, modelName)
    if not value:
        return None
    try:
        return datetime.datetime.fromisoformat(value)
    except ValueError as e:
        raise DecodeError(f"{modelName}.{key}: invalid timestamp {value!r}: {e}", data) from e


@dataclass(frozen=True, slots=True)
class Address:
    """Structured address components of a result.

    Every component is an empty string when the service didn't return it.
    """

    city: str = ""
    city_district: str = ""
    construction: str = ""
    continent: str = ""
    country: str = ""
    country_code: str = ""
    house_number: str = ""
    neighbourhood: str = ""
    postcode: str = ""
    public_building: str = ""
    state: str = ""
    suburb: str = ""

    @classmethod
    def fromDict(cls, data: Any) -> Self:
        """Create Address from decoded JSON object."""
        data = _expectObject(data, cls.__name__)
        return cls(
            city=_getStr(data, "city", cls.__name__),
            city_district=_getStr(data, "city_district", cls.__name__),
            construction=_getStr(data, "construction", cls.__name__),
            continent=_getStr(data, "continent", cls.__name__),
            country=_getStr(data, "country", cls.__name__),
            country_code=_getStr(data, "country_code", cls.__name__),
            house_number=_getStr(data, "house_number", cls.__name__),
            neighbourhood=_getStr(data, "neighbourhood", cls.__name__),
            postcode=_getStr(data, "postcode", cls.__name__),
            public_building=_getStr(data, "public_building", cls.__name__),
            state=_getStr(data, "state", cls.__name__),
            suburb=_getStr(data, "suburb", cls.__name__),
        )

    def toDict(self) -> Dict[str, Any]:
        """Convert to the API JSON shape."""
        return {
            "city": self.city,
            "city_district": self.city_district,
            "construction": self.construction,
            "continent": self.continent,
            "country": self.country,
            "country_code": self.country_code,
            "house_number": self.house_number,
            "neighbourhood": self.neighbourhood,
            "postcode": self.postcode,
            "public_building": self.public_building,
            "state": self.state,
            "suburb": self.suburb,
        }


@dataclass(frozen=True, slots=True)
class Result:
    """Single geocoded place from /search or /reverse, dood!

    Coordinates stay strings, exactly as the service sends them.
    ``Result()`` is the zero-valued result.
    """

    place_id: int = 0
    """Unique place identifier"""
    licence: str = ""
    """Data licence information"""
    osm_type: str = ""
    """OSM object type (node/way/relation)"""
    osm_id: int = 0
    """OSM object ID"""
    lat: str = ""
    lon: str = ""
    place_rank: int = 0
    category: str = ""
    type: str = ""
    importance: float = 0.0
    addresstype: str = ""
    display_name: str = ""
    name: str = ""
    address: Address = field(default_factory=Address)
    bounding_box: List[str] = field(default_factory=list)
    """Bounding box [min_lat, max_lat, min_lon, max_lon]"""

    @classmethod
    def fromDict(cls, data: Any) -> Self:
        """Create Result from decoded JSON object.

        Raises:
            DecodeError: If data is not an object or a field has a wrong type
        """
        data = _expectObject(data, cls.__name__)
        address = data.get("address")
        # The service spells it "boundingbox", older clients used "bounding_box"
        boxKey = "boundingbox" if "boundingbox" in data else "bounding_box"
        return cls(
            place_id=_getInt(data, "place_id", cls.__name__),
            licence=_getStr(data, "licence", cls.__name__),
            osm_type=_getStr(data, "osm_type", cls.__name__),
            osm_id=_getInt(data, "osm_id", cls.__name__),
            lat=_getStr(data, "lat", cls.__name__),
            lon=_getStr(data, "lon", cls.__name__),
            place_rank=_getInt(data, "place_rank", cls.__name__),
            category=_getStr(data, "category", cls.__name__),
            type=_getStr(data, "type", cls.__name__),
            importance=_getFloat(data, "importance", cls.__name__),
            addresstype=_getStr(data, "addresstype", cls.__name__),
            display_name=_getStr(data, "display_name", cls.__name__),
            name=_getStr(data, "name", cls.__name__),
            address=Address() if address is None else Address.fromDict(address),
            bounding_box=_getStrList(data, boxKey, cls.__name__),
        )

    def toDict(self) -> Dict[str, Any]:
        """Convert to the API JSON shape."""
        return {
            "place_id": self.place_id,
            "licence": self.licence,
            "osm_type": self.osm_type,
            "osm_id": self.osm_id,
            "lat": self.lat,
            "lon": self.lon,
            "place_rank": self.place_rank,
            "category": self.category,
            "type": self.type,
            "importance": self.importance,
            "addresstype": self.addresstype,
            "display_name": self.display_name,
            "name": self.name,
            "address": self.address.toDict(),
            "boundingbox": list(self.bounding_box),
        }


@dataclass(frozen=True, slots=True)
class Status:
    """Health snapshot from /status endpoint, dood!"""

    status: int = 0
    """Service status code, 0 means OK"""
    message: str = ""
    data_updated: Optional[datetime.datetime] = None
    """Timestamp of the last data import"""
    software_version: str = ""
    database_version: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0

    @classmethod
    def fromDict(cls, data: Any) -> Self:
        """Create Status from decoded JSON object."""
        data = _expectObject(data, cls.__name__)
        return cls(
            status=_getInt(data, "status", cls.__name__),
            message=_getStr(data, "message", cls.__name__),
            data_updated=_getDatetime(data, "data_updated", cls.__name__),
            software_version=_getStr(data, "software_version", cls.__name__),
            database_version=_getStr(data, "database_version", cls.__name__),
        )

    def toDict(self) -> Dict[str, Any]:
        """Convert to the API JSON shape."""
        return {
            "status": self.status,
            "message": self.message,
            "data_updated": self.data_updated.isoformat() if self.data_updated is not None else None,
            "software_version": self.software_version,
            "database_version": self.database_version,
        }


@dataclass(frozen=True, slots=True)
class ServiceErrorPayload:
    """Error object embedded by the service into a response: {code, message}."""

    code: int = 0
    message: str = ""

    @classmethod
    def fromDict(cls, data: Any) -> Self:
        """Create ServiceErrorPayload from decoded JSON object."""
        data = _expectObject(data, cls.__name__)
        return cls(
            code=_getInt(data, "code", cls.__name__),
            message=_getStr(data, "message", cls.__name__),
        )

    def toDict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}
