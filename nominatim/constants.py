"""
Nominatim API Constants

This module contains all constants and enums for the Nominatim client.
"""

from enum import IntEnum
from typing import Final, List

VERSION: Final[str] = "0.1.0"

# API Configuration
DEFAULT_BASE_URL: Final[str] = "http://localhost:8080"
DEFAULT_TIMEOUT: Final[float] = 10.0
DEFAULT_USER_AGENT: Final[str] = f"nominatim-client/{VERSION}"

# Output formats
DEFAULT_FORMAT: Final[str] = "jsonv2"
STATUS_FORMAT: Final[str] = "json"

# API Endpoints
ENDPOINT_SEARCH: Final[str] = "search"
ENDPOINT_REVERSE: Final[str] = "reverse"
ENDPOINT_STATUS: Final[str] = "status"

# Query defaults
DEFAULT_LANGUAGE: Final[str] = "en"
DEFAULT_ACCEPT_LANGUAGE: Final[List[str]] = [DEFAULT_LANGUAGE]
DEFAULT_LIMIT: Final[int] = 10
MAX_LIMIT: Final[int] = 50

# Wire query keys
KEY_FORMAT: Final[str] = "format"
KEY_FREE_FORM_QUERY: Final[str] = "q"
KEY_STREET: Final[str] = "street"
KEY_CITY: Final[str] = "city"
KEY_COUNTY: Final[str] = "county"
KEY_STATE: Final[str] = "state"
KEY_COUNTRY: Final[str] = "country"
KEY_POSTAL_CODE: Final[str] = "postalcode"
KEY_ADDRESS_DETAILS: Final[str] = "addressdetails"
KEY_EXTRA_TAGS: Final[str] = "extratags"
KEY_NAME_DETAILS: Final[str] = "namedetails"
KEY_ACCEPT_LANGUAGE: Final[str] = "accept-language"
KEY_EXCLUDE_PLACES: Final[str] = "exclude_place_ids"
KEY_LIMIT: Final[str] = "limit"
KEY_LATITUDE: Final[str] = "lat"
KEY_LONGITUDE: Final[str] = "lon"

# Key of the embedded error object in service responses
KEY_ERROR: Final[str] = "error"

FLAG_ON: Final[str] = "1"
FLAG_OFF: Final[str] = "0"


class ServiceStatusCode(IntEnum):
    """Status codes reported by the Nominatim service itself, dood!

    These travel inside the response body and are unrelated to HTTP status codes.
    """

    OK = 0
    NO_DATABASE = 700
    MODULE_FAILED = 701
    MODULE_CALL_FAILED = 702
    QUERY_FAILED = 703
    NO_VALUE = 704
