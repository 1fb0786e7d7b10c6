"""
Pytest configuration and common fixtures for Nominatim client tests.

Fixtures load recorded service responses from tests/testdata and build
clients backed by httpx.MockTransport. All fixtures follow camelCase
naming convention.
"""

from typing import Any, AsyncGenerator, Dict, List

import httpx
import pytest

from nominatim import NominatimClient
from tests.utils import loadTestData

# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest.fixture
def validSearchResults() -> bytes:
    """Recorded /search response with two results."""
    return loadTestData("valid_search_results.json")


@pytest.fixture
def validReverseResult() -> bytes:
    """Recorded /reverse response for a point in Estoril."""
    return loadTestData("valid_reverse_result.json")


@pytest.fixture
def invalidReverseResult() -> bytes:
    """Recorded /reverse response for a point without address (error 704)."""
    return loadTestData("invalid_reverse_result.json")


@pytest.fixture
def validStatus() -> bytes:
    """Recorded /status response of a healthy service."""
    return loadTestData("valid_status.json")


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def requestLog() -> List[httpx.Request]:
    """Requests received by the stub service."""
    return []


@pytest.fixture
def stubRoutes() -> Dict[str, Any]:
    """Mapping of URL path to (status code, body bytes) served by the stub service.

    Tests fill it in before making calls.
    """
    return {}


@pytest.fixture
async def stubClient(stubRoutes, requestLog) -> AsyncGenerator[NominatimClient, None]:
    """NominatimClient talking to a stub service built from stubRoutes."""

    def handler(request: httpx.Request) -> httpx.Response:
        requestLog.append(request)
        if request.url.path not in stubRoutes:
            return httpx.Response(404, content=b"Not Found")
        statusCode, body = stubRoutes[request.url.path]
        return httpx.Response(statusCode, content=body, headers={"Content-Type": "application/json"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as httpClient:
        async with NominatimClient("http://nominatim.test", httpClient) as client:
            yield client
