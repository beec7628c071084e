"""
API Client Module

Provides the typed client for fetching photo posts from the blog API.
"""

from .client import BlogClient
from .errors import ApiError, DecodeError, ImagrError, InvalidUriError, TransportError
from .models import Photo, PhotoSize, Post, PostsPage, TotalCount
from .pagination import PostPaginator, fetch_all_posts
from .response import Meta, ResponseEnvelope, decode_envelope
from .transport import HttpxTransport, Transport
from .uri import QueryParameters, UriPath, build_uri

__all__ = [
    "BlogClient",
    "PostPaginator",
    "fetch_all_posts",
    "HttpxTransport",
    "Transport",
    "Meta",
    "ResponseEnvelope",
    "decode_envelope",
    "QueryParameters",
    "UriPath",
    "build_uri",
    "Photo",
    "PhotoSize",
    "Post",
    "PostsPage",
    "TotalCount",
    "ImagrError",
    "InvalidUriError",
    "TransportError",
    "DecodeError",
    "ApiError",
]
