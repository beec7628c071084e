"""
Payload Models

Typed views of the ``response`` section of API replies. Each model builds
itself from a decoded JSON mapping with ``from_dict`` and raises
``DecodeError`` when a field is missing or has the wrong type.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

import httpx

from .errors import DecodeError


MAX_POST_ID = 2 ** 64 - 1


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"{what}: expected an object, got {type(data).__name__}")
    return data


def _require_int(data: Mapping[str, Any], key: str, what: str, maximum: Optional[int] = None) -> int:
    if key not in data:
        raise DecodeError(f"{what}: missing field '{key}'")
    value = data[key]
    # bool is a subclass of int but never a valid count or id
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{what}.{key}: expected an integer, got {type(value).__name__}")
    if value < 0:
        raise DecodeError(f"{what}.{key}: expected a non-negative integer, got {value}")
    if maximum is not None and value > maximum:
        raise DecodeError(f"{what}.{key}: {value} is out of range")
    return value


def _require_list(data: Mapping[str, Any], key: str, what: str) -> List[Any]:
    if key not in data:
        raise DecodeError(f"{what}: missing field '{key}'")
    value = data[key]
    if not isinstance(value, list):
        raise DecodeError(f"{what}.{key}: expected a list, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class PhotoSize:
    """One rendition of a photo."""
    width: int
    height: int
    url: str

    @property
    def area(self) -> int:
        return self.width * self.height

    @classmethod
    def from_dict(cls, data: Any) -> "PhotoSize":
        data = _require_mapping(data, "photo size")
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise DecodeError("photo size: missing or invalid field 'url'")
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise DecodeError(f"photo size: malformed url {url!r}: {e}") from e
        # httpx percent-encodes characters a hostname cannot hold
        if parsed.scheme not in ("http", "https") or not parsed.host or "%" in parsed.host:
            raise DecodeError(f"photo size: url is not an absolute http(s) URL: {url!r}")
        return cls(
            width=_require_int(data, "width", "photo size"),
            height=_require_int(data, "height", "photo size"),
            url=url
        )


@dataclass(frozen=True)
class Photo:
    """A photo attached to a post, with its available renditions."""
    sizes: List[PhotoSize] = field(default_factory=list)
    original_size: Optional[PhotoSize] = None

    def largest_size(self) -> Optional[PhotoSize]:
        """Return the rendition with the most pixels, or None if there are none."""
        candidates = list(self.sizes)
        if self.original_size is not None:
            candidates.append(self.original_size)
        if not candidates:
            return None
        return max(candidates, key=lambda size: size.area)

    @classmethod
    def from_dict(cls, data: Any) -> "Photo":
        data = _require_mapping(data, "photo")
        original = data.get("original_size")
        return cls(
            sizes=[PhotoSize.from_dict(item) for item in _require_list(data, "alt_sizes", "photo")],
            original_size=PhotoSize.from_dict(original) if original is not None else None
        )


@dataclass(frozen=True)
class Post:
    """A photo post."""
    id: int
    photos: List[Photo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Post":
        data = _require_mapping(data, "post")
        return cls(
            id=_require_int(data, "id", "post", maximum=MAX_POST_ID),
            photos=[Photo.from_dict(item) for item in _require_list(data, "photos", "post")]
        )


@dataclass(frozen=True)
class PostsPage:
    """Payload of a page of posts."""
    posts: List[Post] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "PostsPage":
        data = _require_mapping(data, "posts page")
        return cls(posts=[Post.from_dict(item) for item in _require_list(data, "posts", "posts page")])


@dataclass(frozen=True)
class TotalCount:
    """Payload of a count request: how many posts the blog has."""
    amount: int

    @classmethod
    def from_dict(cls, data: Any) -> "TotalCount":
        data = _require_mapping(data, "total count")
        # The posts endpoint reports `total_posts`; `amount` is accepted too
        key = "total_posts" if "total_posts" in data else "amount"
        return cls(amount=_require_int(data, key, "total count"))
