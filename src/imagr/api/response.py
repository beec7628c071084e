"""
Response Envelope Module

Every API reply is wrapped in the same envelope:

    {"meta": {"status": 200, "msg": "OK"}, "response": {...}}

``meta.status`` decides success, not the HTTP status line: the API may
answer HTTP 200 and still report a failure in the body. The payload is only
decoded for successful replies; on failure ``response`` is left as None and
``meta.message`` carries the API's diagnostic text.
"""

import json
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, Type, TypeVar, Union

from .errors import DecodeError


SUCCESS_STATUS = 200


class Payload(Protocol):
    """Anything that can be built from the decoded ``response`` object."""

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        ...


T = TypeVar("T", bound=Payload)


@dataclass(frozen=True)
class Meta:
    """Status section of the envelope."""
    status: int
    message: str

    def is_success(self) -> bool:
        return self.status == SUCCESS_STATUS

    @classmethod
    def from_dict(cls, data: Any) -> "Meta":
        if not isinstance(data, dict):
            raise DecodeError(f"meta: expected an object, got {type(data).__name__}")

        status = data.get("status")
        if isinstance(status, bool) or not isinstance(status, int):
            raise DecodeError(f"meta.status: expected an integer, got {status!r}")

        message = data.get("msg")
        if not isinstance(message, str):
            raise DecodeError(f"meta.msg: expected a string, got {message!r}")

        return cls(status=status, message=message)


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """Decoded reply: status metadata plus the typed payload."""
    meta: Meta
    response: Optional[T]

    def is_success(self) -> bool:
        """True iff the API reported success; the payload is only trusted then."""
        return self.meta.is_success()


def decode_envelope(data: Union[bytes, str], payload_type: Type[T]) -> ResponseEnvelope[T]:
    """
    Decode a raw reply into a ``ResponseEnvelope``.

    Args:
        data: Raw response body.
        payload_type: Type to build the ``response`` section with.

    Returns:
        The decoded envelope.

    Raises:
        DecodeError: If the body is not JSON or does not match the envelope
            or payload shape.
    """
    try:
        document = json.loads(data)
    except (ValueError, TypeError) as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise DecodeError(f"response is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError(f"envelope: expected an object, got {type(document).__name__}")
    if "meta" not in document:
        raise DecodeError("envelope: missing field 'meta'")

    meta = Meta.from_dict(document["meta"])
    if not meta.is_success():
        return ResponseEnvelope(meta=meta, response=None)

    if "response" not in document:
        raise DecodeError("envelope: missing field 'response'")

    return ResponseEnvelope(meta=meta, response=payload_type.from_dict(document["response"]))
