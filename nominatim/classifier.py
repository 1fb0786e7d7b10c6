"""
Nominatim Response Classifier

Turns a raw httpx.Response into a typed value or one of the failure kinds:
DecodeError (body doesn't match the expected shape), ServiceError (the
service reported a failure inside a well-formed body) or HTTPStatusError
(unclassifiable body with an HTTP error status).

The HTTP status is never used to detect success: the service may report a
logical failure inside a 200 response, and a well-formed body is trusted
over the status line.
"""

import json
import logging
from typing import Any, Callable, List, Optional, TypeVar

import httpx

from .constants import KEY_ERROR
from .exceptions import DecodeError, HTTPStatusError, ServiceError
from .models import Result, ServiceErrorPayload, Status

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decodeBody(response: httpx.Response) -> Any:
    """Decode JSON body of the response.

    Raises:
        DecodeError: If the body is not valid JSON
    """
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Failed to parse JSON response: {e}") from e


def extractServiceError(payload: Any, httpStatus: int) -> Optional[ServiceError]:
    """Return ServiceError embedded in the payload, if there is one.

    The service nests ``{"code": int, "message": str}`` under the ``error``
    key. Older versions send the message alone, as a string: such errors
    carry no service code (code 0), only the HTTP status of the response.
    """
    if not isinstance(payload, dict) or KEY_ERROR not in payload:
        return None

    errorData = payload[KEY_ERROR]
    if isinstance(errorData, str):
        return ServiceError(0, errorData, httpStatus)
    if errorData is None:
        return None

    errorPayload = ServiceErrorPayload.fromDict(errorData)
    if errorPayload.code == 0:
        return None
    return ServiceError(errorPayload.code, errorPayload.message, httpStatus)


def _classify(response: httpx.Response, parse: Callable[[Any], T]) -> T:
    try:
        payload = decodeBody(response)
        serviceError = extractServiceError(payload, response.status_code)
        if serviceError is not None:
            logger.debug(f"Service reported error in HTTP {response.status_code} response: {serviceError}")
            raise serviceError
        return parse(payload)
    except DecodeError as e:
        if response.is_error:
            raise HTTPStatusError(response.status_code, f"HTTP error {response.status_code}: {e}") from e
        raise


def _parseResults(payload: Any) -> List[Result]:
    if not isinstance(payload, list):
        raise DecodeError(f"Search: expected JSON array, got {type(payload).__name__}", payload)
    return [Result.fromDict(item) for item in payload]


def classifySearch(response: httpx.Response) -> List[Result]:
    """Classify /search response: array of results, may be empty, dood!

    Raises:
        DecodeError: Body is not an array of result objects
        ServiceError: Body is an error object
        HTTPStatusError: Body can't be classified and HTTP status is an error
    """
    return _classify(response, _parseResults)


def classifyReverse(response: httpx.Response) -> Result:
    """Classify /reverse response: single result or embedded error.

    A non-zero ``error.code`` always wins over result fields sent along with it.

    Raises:
        DecodeError: Body is not a result object
        ServiceError: Body carries an error object
        HTTPStatusError: Body can't be classified and HTTP status is an error
    """
    return _classify(response, Result.fromDict)


def classifyStatus(response: httpx.Response) -> Status:
    """Classify /status response: single status object.

    A failing service still answers with a status object (non-zero ``status``),
    which is returned as-is.
    """
    return _classify(response, Status.fromDict)

