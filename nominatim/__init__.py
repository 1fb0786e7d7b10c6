"""
Nominatim API Client Library

This module provides a Python async client library for the Nominatim geocoding
service: free-form and structured search, reverse geocoding and status checks.
Every call is raced against a caller-supplied CallContext (explicit cancel and
optional deadline), dood!

Example usage:
    import httpx
    from nominatim import CallContext, NominatimClient, newReverseQuery, newSearchQuery

    async with httpx.AsyncClient(timeout=5) as http:
        client = NominatimClient("http://localhost:8080", http)

        # Forward geocoding
        query = newSearchQuery()
        query.freeFormQuery = "avenida da república, lisboa"
        results = await client.search(CallContext.withTimeout(10), query)

        # Reverse geocoding
        location = await client.reverse(None, newReverseQuery("38.6945252", "-9.3221278"))

        # Service health
        status = await client.checkStatus(None)
"""

from .client import NominatimClient
from .constants import ServiceStatusCode
from .context import CallContext
from .exceptions import (
    CallCancelledError,
    CallTimeoutError,
    CancellationError,
    ConfigurationError,
    DecodeError,
    HTTPStatusError,
    NominatimError,
    ServiceError,
    TransportError,
)
from .executor import CallExecutor, CallOutcome, OutcomeKind
from .models import Address, Result, ServiceErrorPayload, Status
from .query import (
    ReverseQuery,
    SearchQuery,
    SearchStructuredQuery,
    newReverseQuery,
    newSearchQuery,
)

__all__ = [
    "NominatimClient",
    "CallContext",
    "CallExecutor",
    "CallOutcome",
    "OutcomeKind",
    "SearchStructuredQuery",
    "SearchQuery",
    "ReverseQuery",
    "newSearchQuery",
    "newReverseQuery",
    "Address",
    "Result",
    "Status",
    "ServiceErrorPayload",
    "ServiceStatusCode",
    "NominatimError",
    "CancellationError",
    "CallCancelledError",
    "CallTimeoutError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "ServiceError",
    "ConfigurationError",
]
