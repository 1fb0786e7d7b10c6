"""
Nominatim Query Builders

Search and reverse query objects and their canonical wire form.
Building parameters never fails: out-of-range values are remapped,
never rejected, and the output order is stable so equal queries always
produce byte-identical query strings, dood!

Example:
    >>> query = newSearchQuery()
    >>> query.freeFormQuery = "lisboa"
    >>> query.buildQueryString()
    'accept-language=en&addressdetails=1&extratags=0&format=jsonv2&limit=10&namedetails=0&q=lisboa'
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import List, Self, Tuple
from urllib.parse import urlencode

from .constants import (
    DEFAULT_ACCEPT_LANGUAGE,
    DEFAULT_FORMAT,
    DEFAULT_LIMIT,
    FLAG_OFF,
    FLAG_ON,
    KEY_ACCEPT_LANGUAGE,
    KEY_ADDRESS_DETAILS,
    KEY_CITY,
    KEY_COUNTRY,
    KEY_COUNTY,
    KEY_EXCLUDE_PLACES,
    KEY_EXTRA_TAGS,
    KEY_FORMAT,
    KEY_FREE_FORM_QUERY,
    KEY_LATITUDE,
    KEY_LIMIT,
    KEY_LONGITUDE,
    KEY_NAME_DETAILS,
    KEY_POSTAL_CODE,
    KEY_STATE,
    KEY_STREET,
    MAX_LIMIT,
)

logger = logging.getLogger(__name__)

QueryParams = List[Tuple[str, str]]


def encodeFlag(value: bool) -> str:
    """Encode boolean modifier as the "1"/"0" literal the service expects."""
    return FLAG_ON if value else FLAG_OFF


def clampLimit(limit: int) -> int:
    """Remap limit into [1, MAX_LIMIT]: negatives become DEFAULT_LIMIT, too big becomes MAX_LIMIT.

    Zero is "not set" and handled by the caller (the limit key is omitted).
    """
    if limit < 0:
        return DEFAULT_LIMIT
    if limit > MAX_LIMIT:
        return MAX_LIMIT
    return limit


def _sortedParams(params: QueryParams) -> QueryParams:
    # Keys are unique, so sorting by key gives a total order
    return sorted(params, key=lambda item: item[0])


@dataclass
class SearchStructuredQuery:
    """Address split into discrete fields for a structured search."""

    street: str = ""
    city: str = ""
    county: str = ""
    state: str = ""
    country: str = ""
    postalCode: str = ""

    def structuredParams(self) -> QueryParams:
        """Return (key, value) pairs of all non-empty structured fields."""
        fields = [
            (KEY_STREET, self.street),
            (KEY_CITY, self.city),
            (KEY_COUNTY, self.county),
            (KEY_STATE, self.state),
            (KEY_COUNTRY, self.country),
            (KEY_POSTAL_CODE, self.postalCode),
        ]
        return [(key, value) for key, value in fields if value]


@dataclass
class SearchQuery(SearchStructuredQuery):
    """Parameters of a /search request, dood!

    Either ``freeFormQuery`` or the structured fields describe the place.
    When free-form text is set, structured fields are ignored entirely.

    A bare ``SearchQuery()`` carries zero values; use ``newSearchQuery()``
    to get one with the usual defaults applied.

    Attributes:
        freeFormQuery: Free-form text, e.g. "Avenida da República, Lisboa"
        addressDetails: Include address breakdown
        extraTags: Include extra OSM tags
        nameDetails: Include name translations
        acceptLanguage: Preferred result languages, most preferred first
        excludedPlaces: Place IDs to skip in results
        limit: Max results, 1..50 (0 means "service default")
    """

    freeFormQuery: str = ""
    addressDetails: bool = False
    extraTags: bool = False
    nameDetails: bool = False
    acceptLanguage: List[str] = field(default_factory=list)
    excludedPlaces: List[str] = field(default_factory=list)
    limit: int = 0

    def hasFreeForm(self) -> bool:
        """Whether free-form text is set (and thus wins over structured fields)."""
        return self.freeFormQuery != ""

    def isStructured(self) -> bool:
        """Whether this query will be sent as a structured query."""
        return not self.hasFreeForm() and len(self.structuredParams()) > 0

    def copy(self) -> Self:
        """Return independent snapshot of the query."""
        return copy.deepcopy(self)

    def buildParams(self) -> QueryParams:
        """Build canonical wire parameters, sorted by key.

        Returns:
            List of (key, value) string pairs, always including format
        """
        params: QueryParams = [(KEY_FORMAT, DEFAULT_FORMAT)]

        if self.hasFreeForm():
            params.append((KEY_FREE_FORM_QUERY, self.freeFormQuery))
        else:
            params.extend(self.structuredParams())

        params.append((KEY_ADDRESS_DETAILS, encodeFlag(self.addressDetails)))
        params.append((KEY_EXTRA_TAGS, encodeFlag(self.extraTags)))
        params.append((KEY_NAME_DETAILS, encodeFlag(self.nameDetails)))

        if self.acceptLanguage:
            params.append((KEY_ACCEPT_LANGUAGE, ",".join(self.acceptLanguage)))
        if self.excludedPlaces:
            params.append((KEY_EXCLUDE_PLACES, ",".join(self.excludedPlaces)))

        if self.limit != 0:
            limit = clampLimit(self.limit)
            if limit != self.limit:
                logger.debug(f"Search limit {self.limit} remapped to {limit}")
            params.append((KEY_LIMIT, str(limit)))

        return _sortedParams(params)

    def buildQueryString(self) -> str:
        """Build URL-encoded query string from buildParams()."""
        return urlencode(self.buildParams())


@dataclass
class ReverseQuery:
    """Parameters of a /reverse request.

    Latitude and longitude are passed through verbatim, the service
    validates them (and reports an error for an invalid pair).
    """

    latitude: str = ""
    longitude: str = ""
    addressDetails: bool = False
    extraTags: bool = False
    nameDetails: bool = False
    acceptLanguage: List[str] = field(default_factory=list)

    def copy(self) -> Self:
        """Return independent snapshot of the query."""
        return copy.deepcopy(self)

    def buildParams(self) -> QueryParams:
        """Build canonical wire parameters, sorted by key."""
        params: QueryParams = [
            (KEY_FORMAT, DEFAULT_FORMAT),
            (KEY_LATITUDE, self.latitude),
            (KEY_LONGITUDE, self.longitude),
            (KEY_ADDRESS_DETAILS, encodeFlag(self.addressDetails)),
            (KEY_EXTRA_TAGS, encodeFlag(self.extraTags)),
            (KEY_NAME_DETAILS, encodeFlag(self.nameDetails)),
        ]
        if self.acceptLanguage:
            params.append((KEY_ACCEPT_LANGUAGE, ",".join(self.acceptLanguage)))
        return _sortedParams(params)

    def buildQueryString(self) -> str:
        """Build URL-encoded query string from buildParams()."""
        return urlencode(self.buildParams())


def newSearchQuery() -> SearchQuery:
    """Create SearchQuery with default values, ready to be populated, dood!"""
    return SearchQuery(
        addressDetails=True,
        acceptLanguage=list(DEFAULT_ACCEPT_LANGUAGE),
        limit=DEFAULT_LIMIT,
    )


def newReverseQuery(latitude: str, longitude: str) -> ReverseQuery:
    """Create ReverseQuery for the given coordinates with default values."""
    return ReverseQuery(
        latitude=latitude,
        longitude=longitude,
        addressDetails=True,
        acceptLanguage=list(DEFAULT_ACCEPT_LANGUAGE),
    )
