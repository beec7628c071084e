"""
API Client Module

Client for the photo posts of a single blog. Each call is one GET with no
retries; any failure propagates to the caller as an ``ImagrError``.
"""

import logging
from typing import List, Optional, Type, TypeVar

from ..config import APIConfig, Credentials
from .errors import ApiError
from .models import Post, PostsPage, TotalCount
from .response import Payload, ResponseEnvelope, decode_envelope
from .transport import Transport
from .uri import QueryParameters, UriPath, build_uri


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Payload)

PHOTO_POSTS_PATH = UriPath.of("posts", "photo")


class BlogClient:
    """
    Client for the blog API.

    The transport is injected and not owned: closing it is up to the caller.
    """

    def __init__(
        self,
        transport: Transport,
        credentials: Credentials,
        api_config: Optional[APIConfig] = None
    ):
        """Initialize the API client."""
        self._transport = transport
        self._credentials = credentials
        self._api_config = api_config or APIConfig()
        logger.info(
            f"BlogClient initialized (blog: {credentials.blog_identifier}, "
            f"page size: {self.max_page_size})"
        )

    @property
    def blog_identifier(self) -> str:
        return self._credentials.blog_identifier

    @property
    def max_page_size(self) -> int:
        return self._api_config.max_page_size

    async def fetch_total_count(self) -> int:
        """
        Fetch the number of photo posts on the blog.

        Returns:
            Total number of photo posts.

        Raises:
            ImagrError: If the request, decoding or the API call fails.
        """
        params = QueryParameters({"api_key": self._credentials.api_key, "limit": 1})
        envelope = await self._get(PHOTO_POSTS_PATH, params, TotalCount)
        logger.info(f"Blog {self.blog_identifier} has {envelope.response.amount} photo posts")
        return envelope.response.amount

    async def fetch_posts_page(self, offset: int) -> List[Post]:
        """
        Fetch one page of photo posts.

        Args:
            offset: Zero-based index of the first post to return.

        Returns:
            Posts in the order the API returned them (at most ``max_page_size``).

        Raises:
            ValueError: If ``offset`` is negative.
            ImagrError: If the request, decoding or the API call fails.
        """
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")

        params = QueryParameters({
            "api_key": self._credentials.api_key,
            "limit": self.max_page_size,
            "offset": offset,
        })
        envelope = await self._get(PHOTO_POSTS_PATH, params, PostsPage)
        posts = envelope.response.posts
        logger.debug(f"Fetched {len(posts)} posts at offset {offset}")
        return posts

    async def _get(
        self,
        path: UriPath,
        params: QueryParameters,
        payload_type: Type[T]
    ) -> ResponseEnvelope[T]:
        """
        GET a blog resource and decode its envelope.

        Raises:
            InvalidUriError: If the URI cannot be built.
            TransportError: If the request fails.
            DecodeError: If the body does not decode as an envelope of ``payload_type``.
            ApiError: If the envelope reports a non-success status.
        """
        uri = build_uri(
            self.blog_identifier,
            path,
            params,
            base_url=self._api_config.base_url,
            api_version=self._api_config.api_version
        )

        body = await self._transport.get(uri)
        envelope = decode_envelope(body, payload_type)

        if not envelope.is_success():
            logger.warning(
                f"API error for {path}: {envelope.meta.status} {envelope.meta.message}"
            )
            raise ApiError(envelope.meta.message, status=envelope.meta.status)

        return envelope
