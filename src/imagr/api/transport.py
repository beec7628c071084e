"""
HTTP Transport Module

The client only needs "GET this URI and give me the body". ``Transport``
is that contract; ``HttpxTransport`` implements it on top of
``httpx.AsyncClient`` and turns every httpx failure into ``TransportError``.
"""

import logging
from typing import Optional, Protocol

import httpx

from ..config import APIConfig
from .errors import TransportError
from .uri import redact_uri


logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Minimal asynchronous GET contract used by the client and downloader."""

    async def get(self, uri: str, *, check_status: bool = False) -> bytes:
        ...


def build_async_client(api_config: Optional[APIConfig] = None) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the configured timeout and headers."""
    api_config = api_config or APIConfig()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(api_config.timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": api_config.user_agent,
            "Accept": "application/json, */*;q=0.8",
        },
    )


class HttpxTransport:
    """
    ``Transport`` backed by an ``httpx.AsyncClient``.

    The wrapped client is closed when the transport is used as an async
    context manager or when ``aclose`` is called.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, api_config: Optional[APIConfig] = None):
        self._client = client or build_async_client(api_config)

    async def get(self, uri: str, *, check_status: bool = False) -> bytes:
        """
        Fetch ``uri`` and return the whole response body.

        Args:
            uri: Absolute URI to fetch.
            check_status: Treat HTTP 4xx/5xx as a failure. Left off for API
                calls, whose envelope carries the authoritative status.

        Returns:
            The response body.

        Raises:
            TransportError: On connection, timeout or protocol failures, and
                on HTTP error statuses when ``check_status`` is set.
        """
        try:
            response = await self._client.get(uri)
            if check_status:
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP {e.response.status_code} for {redact_uri(uri)}")
            raise TransportError(
                f"HTTP {e.response.status_code} for {redact_uri(uri)}", cause=e
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Request to {redact_uri(uri)} failed: {e!r}")
            raise TransportError(f"request failed: {e!r}", cause=e) from e
        except httpx.InvalidURL as e:
            raise TransportError(f"invalid URL {redact_uri(uri)!r}: {e}", cause=e) from e

        logger.debug(f"HTTP {response.status_code} ({len(response.content)} bytes) from {redact_uri(uri)}")
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

