"""
End-to-end tests of the public API against recorded service responses.
"""

import pytest

from nominatim import (
    CallContext,
    DecodeError,
    HTTPStatusError,
    Result,
    ServiceError,
    ServiceStatusCode,
    newReverseQuery,
    newSearchQuery,
)
from tests.utils import parseJson


@pytest.mark.asyncio
async def testSearchReturnsRecordedResults(stubClient, stubRoutes, validSearchResults, requestLog):
    """Test search results are exactly the recorded array, dood!"""
    stubRoutes["/search"] = (200, validSearchResults)
    query = newSearchQuery()
    query.freeFormQuery = "test"

    results = await stubClient.search(CallContext.withTimeout(5), query)

    assert results == [Result.fromDict(item) for item in parseJson(validSearchResults)]
    assert len(results) == 2
    assert requestLog[0].url.params["q"] == "test"


@pytest.mark.asyncio
async def testStructuredSearch(stubClient, stubRoutes, requestLog):
    """Test structured search sends address fields and no q, dood!"""
    stubRoutes["/search"] = (200, b"[]")
    query = newSearchQuery()
    query.city = "Lisboa"
    query.postalCode = "1000-001"

    assert await stubClient.search(None, query) == []

    params = requestLog[0].url.params
    assert "q" not in params
    assert params["city"] == "Lisboa"
    assert params["postalcode"] == "1000-001"


@pytest.mark.asyncio
async def testReverseReturnsRecordedResult(stubClient, stubRoutes, validReverseResult):
    """Test reverse result matches the recorded object."""
    stubRoutes["/reverse"] = (200, validReverseResult)

    result = await stubClient.reverse(None, newReverseQuery("38.69", "-9.32"))

    assert result == Result.fromDict(parseJson(validReverseResult))
    assert result.name == "Pastelaria Garrett"
    assert result.address.country_code == "pt"
    assert len(result.bounding_box) == 4


@pytest.mark.asyncio
async def testReverseWithoutValue(stubClient, stubRoutes, invalidReverseResult):
    """Test reverse of a point without address raises 704, dood!"""
    stubRoutes["/reverse"] = (200, invalidReverseResult)

    with pytest.raises(ServiceError) as excInfo:
        await stubClient.reverse(None, newReverseQuery("38.69", "-9.32"))

    assert excInfo.value.code == 704
    assert excInfo.value.knownCode == ServiceStatusCode.NO_VALUE
    assert excInfo.value.message == "No value"


@pytest.mark.asyncio
async def testCheckStatus(stubClient, stubRoutes, validStatus):
    """Test status of a healthy service."""
    stubRoutes["/status"] = (200, validStatus)

    status = await stubClient.checkStatus(None)

    assert status.ok
    assert status.message == "OK"
    assert status.software_version == "4.0.1"
    assert status.data_updated is not None


@pytest.mark.asyncio
async def testUnknownEndpoint(stubClient):
    """Test 404 with non-JSON body is an HTTP error."""
    with pytest.raises(HTTPStatusError) as excInfo:
        await stubClient.checkStatus(None)

    assert excInfo.value.statusCode == 404


@pytest.mark.asyncio
async def testStatusForSearchIsDecodeError(stubClient, stubRoutes, validStatus):
    """Test object body for search is a decode failure."""
    stubRoutes["/search"] = (200, validStatus)

    with pytest.raises(DecodeError):
        await stubClient.search(None, newSearchQuery())
