"""
Nominatim Async Client

This module provides the main NominatimClient class for interacting with a
Nominatim geocoding service: search, reverse geocoding and status checks.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, TypeVar

import httpx

from .classifier import classifyReverse, classifySearch, classifyStatus
from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    ENDPOINT_REVERSE,
    ENDPOINT_SEARCH,
    ENDPOINT_STATUS,
    KEY_FORMAT,
    STATUS_FORMAT,
)
from .context import CallContext
from .exceptions import TransportError
from .executor import CallExecutor
from .models import Result, Status
from .query import QueryParams, ReverseQuery, SearchQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NominatimClient:
    """Async client for the Nominatim geocoding API, dood!

    The HTTP transport is owned by the caller and shared by all calls made
    through the client; the client never closes or reconfigures it.
    Every call runs as its own task raced against the given CallContext,
    see CallExecutor.

    Example:
        >>> async with httpx.AsyncClient(timeout=5) as http:
        ...     client = NominatimClient("http://localhost:8080", http)
        ...     query = newSearchQuery()
        ...     query.freeFormQuery = "avenida da república, lisboa"
        ...     results = await client.search(CallContext.withTimeout(10), query)
        ...     location = await client.reverse(None, newReverseQuery("38.6945252", "-9.3221278"))
        ...     status = await client.checkStatus(None)

    Attributes:
        baseUrl: Service base URL, without trailing slash
        httpClient: Shared HTTP transport
        executor: Executor racing calls against their contexts
    """

    __slots__ = ("baseUrl", "httpClient", "executor", "_ownsHttpClient")

    def __init__(
        self,
        baseUrl: str,
        httpClient: httpx.AsyncClient,
        *,
        abortOnCancel: bool = False,
    ) -> None:
        """Initialize Nominatim client.

        Args:
            baseUrl: Service base URL (e.g. "http://localhost:8080")
            httpClient: HTTP transport to use for all requests
            abortOnCancel: Cancel in-flight requests when the caller's context
                fires first (default: let them finish in background)
        """
        self.baseUrl = baseUrl.rstrip("/")
        self.httpClient = httpClient
        self.executor = CallExecutor(abortOnCancel=abortOnCancel)
        self._ownsHttpClient = False

        logger.debug(f"NominatimClient initialized for {self.baseUrl}")

    @classmethod
    def fromConfig(cls, config: Mapping[str, Any]) -> "NominatimClient":
        """Create client with its own HTTP transport from the [nominatim] config table.

        Args:
            config: Dict with optional keys base-url, timeout, user-agent, abort-on-cancel

        Returns:
            Client which closes its transport on aclose()
        """
        httpClient = httpx.AsyncClient(
            timeout=httpx.Timeout(float(config.get("timeout", DEFAULT_TIMEOUT))),
            headers={"User-Agent": config.get("user-agent", DEFAULT_USER_AGENT)},
        )
        client = cls(
            config.get("base-url", DEFAULT_BASE_URL),
            httpClient,
            abortOnCancel=bool(config.get("abort-on-cancel", False)),
        )
        client._ownsHttpClient = True
        return client

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel abandoned calls and close the HTTP transport if we created it."""
        await self.executor.shutdown(cancel=True)
        if self._ownsHttpClient and not self.httpClient.is_closed:
            await self.httpClient.aclose()
            logger.debug("HTTP client closed")

    async def search(self, ctx: Optional[CallContext], query: SearchQuery) -> List[Result]:
        """Look up a location from a textual description or structured address.

        Args:
            ctx: Call context (None means CallContext.background())
            query: Search parameters, snapshotted when the call starts

        Returns:
            List of results, empty if nothing matched

        Raises:
            CancellationError: Context was cancelled or its deadline passed first
            TransportError: Request could not be completed
            DecodeError: Response is not an array of results
            ServiceError: Service reported an error
        """
        params = query.copy().buildParams()
        return await self._call(ctx, ENDPOINT_SEARCH, params, classifySearch)

    async def reverse(self, ctx: Optional[CallContext], query: ReverseQuery) -> Result:
        """Generate an address from a latitude and longitude, dood!

        Invalid coordinates are reported by the service and raised as ServiceError.

        Raises:
            CancellationError: Context was cancelled or its deadline passed first
            TransportError: Request could not be completed
            DecodeError: Response is not a result object
            ServiceError: Service reported an error (e.g. 704, no value)
        """
        params = query.copy().buildParams()
        return await self._call(ctx, ENDPOINT_REVERSE, params, classifyReverse)

    async def checkStatus(self, ctx: Optional[CallContext]) -> Status:
        """Check if the Nominatim service and its database are running.

        A failing service reports it through Status.status, see ServiceStatusCode.
        """
        return await self._call(ctx, ENDPOINT_STATUS, [(KEY_FORMAT, STATUS_FORMAT)], classifyStatus)

    async def _call(
        self,
        ctx: Optional[CallContext],
        endpoint: str,
        params: QueryParams,
        classify: Callable[[httpx.Response], T],
    ) -> T:
        """Run a single GET round trip through the executor and unwrap its outcome."""
        if ctx is None:
            ctx = CallContext.background()
        url = f"{self.baseUrl}/{endpoint}"

        async def work() -> T:
            return classify(await self._get(url, params))

        outcome = await self.executor.execute(ctx, work, name=f"nominatim-{endpoint}")
        if not outcome.ok:
            errorName = type(outcome.error).__name__
            logger.warning(f"Nominatim {endpoint} failed ({outcome.kind}): {errorName}#{outcome.error}")
        return outcome.unwrap()

    async def _get(self, url: str, params: QueryParams) -> httpx.Response:
        """Perform GET request, turning httpx failures into TransportError."""
        logger.debug(f"Making GET request to {url} with params: {params}")
        try:
            response = await self.httpClient.get(url, params=params)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout: {type(e).__name__}#{e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {type(e).__name__}#{e}") from e
        logger.debug(f"GET {url} finished: {response.status_code}")
        return response
