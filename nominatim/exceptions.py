"""
Nominatim Client Exceptions

This module contains the exception hierarchy raised by the Nominatim client.
Every failed call raises exactly one of these, dood!

    NominatimError
    ├── CancellationError
    │   ├── CallCancelledError
    │   └── CallTimeoutError
    ├── TransportError
    │   └── HTTPStatusError
    ├── DecodeError
    ├── ServiceError
    └── ConfigurationError
"""

from typing import Any, Optional

from .constants import ServiceStatusCode


class NominatimError(Exception):
    """Base exception class for all Nominatim client errors, dood!

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class CancellationError(NominatimError):
    """Raised when the caller's context fired before the call completed.

    The in-flight request may still be running in background, its result is discarded.
    """


class CallCancelledError(CancellationError):
    """Raised when the call context was cancelled explicitly."""

    def __init__(self, message: str = "Call cancelled") -> None:
        super().__init__(message)


class CallTimeoutError(CancellationError):
    """Raised when the call context deadline elapsed."""

    def __init__(self, message: str = "Call deadline exceeded") -> None:
        super().__init__(message)


class TransportError(NominatimError):
    """Raised when the network round trip itself could not complete.

    This includes connection failures, DNS resolution failures and
    timeouts configured on the HTTP client. The original httpx exception
    is kept as ``__cause__``.
    """

    def __init__(self, message: str = "Network error occurred.") -> None:
        super().__init__(message)


class HTTPStatusError(TransportError):
    """Raised when the service answered with an HTTP error and a body we can't classify."""

    def __init__(self, statusCode: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"HTTP error {statusCode}")
        self.statusCode = statusCode


class DecodeError(NominatimError):
    """Raised when a response body does not match the expected JSON shape.

    Attributes:
        body: Decoded payload (if the body was valid JSON at all)
    """

    def __init__(self, message: str, body: Any = None) -> None:
        super().__init__(message)
        self.body = body


class ServiceError(NominatimError):
    """Raised when the service reports a failure inside a well-formed response, dood!

    Known codes are listed in ServiceStatusCode (700..704), but the service
    may report others, so ``code`` stays a plain int. Older services send
    only a message: such errors have ``code`` 0 (no code reported).

    Attributes:
        code: Service error code, 0 if the service didn't send one
        message: Service error message
        httpStatus: HTTP status of the response carrying the error, if known
    """

    def __init__(self, code: int, message: str, httpStatus: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
        self.httpStatus = httpStatus

    @property
    def knownCode(self) -> Optional[ServiceStatusCode]:
        """Return code as ServiceStatusCode, or None for missing or unknown codes."""
        if self.code == 0:
            return None
        try:
            return ServiceStatusCode(self.code)
        except ValueError:
            return None

    def __str__(self) -> str:
        if self.code == 0:
            return self.message
        return f"{self.code}: {self.message}"


class ConfigurationError(NominatimError):
    """Raised when configuration can't be loaded or is invalid."""
