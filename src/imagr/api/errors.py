"""
API Error Types

Every failure of the blog client surfaces as one of these exceptions, so
callers can tell a bad request apart from a network problem, a broken
response, or an error reported by the API itself.
"""

from typing import Optional


class ImagrError(Exception):
    """Base class for all client errors."""


class InvalidUriError(ImagrError):
    """The request URI could not be assembled from its parts."""


class TransportError(ImagrError):
    """The request failed below the API layer (connection, timeout, TLS)."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DecodeError(ImagrError):
    """The response body is not JSON or does not have the expected shape."""


class ApiError(ImagrError):
    """The API answered with a non-success status in its envelope."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


__all__ = [
    "ImagrError",
    "InvalidUriError",
    "TransportError",
    "DecodeError",
    "ApiError",
]
