"""
URI Builder Module

Builds request URIs for the blog API:

    {base_url}/{version}/blog/{blog_identifier}/{path}?{query}

Query values and the blog identifier are percent-encoded. Parameters keep
their insertion order so the same inputs always produce the same URI.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union
from urllib.parse import quote

import httpx

from .errors import InvalidUriError


DEFAULT_BASE_URL = "https://api.tumblr.com"
DEFAULT_API_VERSION = "v2"


@dataclass(frozen=True)
class UriPath:
    """Ordered path segments below the blog resource, e.g. ``posts/photo``."""
    segments: Tuple[str, ...]

    @classmethod
    def of(cls, *segments: str) -> "UriPath":
        return cls(tuple(segments))

    def __str__(self) -> str:
        return "/".join(quote(segment, safe="") for segment in self.segments)


class QueryParameters:
    """
    Insertion-ordered query parameters with unique names.

    Values are stored as strings; integers are converted on insertion.
    Setting an existing name replaces its value in place.
    """

    def __init__(self, params: Optional[Mapping[str, Union[str, int]]] = None):
        self._params: Dict[str, str] = {}
        for name, value in (params or {}).items():
            self.set(name, value)

    def set(self, name: str, value: Union[str, int]) -> "QueryParameters":
        if not name:
            raise InvalidUriError("query parameter name must not be empty")
        self._params[name] = str(value)
        return self

    def get(self, name: str) -> Optional[str]:
        return self._params.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._params.items())

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParameters):
            return NotImplemented
        return self._params == other._params

    def __repr__(self) -> str:
        return f"QueryParameters({self._params!r})"

    def __str__(self) -> str:
        return "&".join(
            f"{quote(name, safe='')}={quote(value, safe='')}"
            for name, value in self._params.items()
        )


def build_uri(
    blog_identifier: str,
    path: UriPath,
    params: QueryParameters,
    base_url: str = DEFAULT_BASE_URL,
    api_version: str = DEFAULT_API_VERSION
) -> str:
    """
    Build the full request URI for a blog resource.

    Args:
        blog_identifier: Blog name or hostname (e.g. ``staff.tumblr.com``).
        path: Resource path below the blog.
        params: Query parameters.
        base_url: Scheme and host of the API.
        api_version: API version segment.

    Returns:
        The URI as a string.

    Raises:
        InvalidUriError: If any part is empty or the result is not a valid URL.
    """
    if not blog_identifier or not blog_identifier.strip():
        raise InvalidUriError("blog identifier must not be empty")
    if not path.segments:
        raise InvalidUriError("resource path must have at least one segment")
    if any(not segment for segment in path.segments):
        raise InvalidUriError(f"resource path has an empty segment: {path.segments!r}")

    resource = (
        f"{base_url.rstrip('/')}/{api_version}/blog/"
        f"{quote(blog_identifier, safe='')}/{path}"
    )
    query = str(params)
    uri = f"{resource}?{query}" if query else resource

    # Messages name the resource only: the query carries the API key
    try:
        parsed = httpx.URL(uri)
    except httpx.InvalidURL as e:
        raise InvalidUriError(f"invalid URI for {resource!r}: {e}") from e

    if not parsed.scheme or not parsed.host:
        raise InvalidUriError(f"URI is not absolute: {resource!r}")

    return uri


def redact_uri(uri: str) -> str:
    """Hide the api_key query value so it never reaches the logs."""
    try:
        url = httpx.URL(uri)
    except httpx.InvalidURL:
        # Unparseable: drop the whole query
        return uri.split("?", 1)[0]
    if "api_key" not in url.params:
        return uri
    return str(url.copy_set_param("api_key", "***"))
