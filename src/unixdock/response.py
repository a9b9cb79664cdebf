"""
Response decoding and error translation
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Type, TypeVar, get_args

from pydantic import TypeAdapter, ValidationError

from .exceptions import APIError, BodyDecodeError, DeserializationError
from .models import ErrorEnvelope

T = TypeVar('T')

# Statuses whose body is a {"message": ...} envelope
ERROR_STATUSES = frozenset({400, 404, 409, 500})


@dataclass(frozen=True)
class RawResponse:
    """Fully buffered engine response"""

    status: int
    reason: str = ''
    headers: Tuple[Tuple[str, str], ...] = ()
    body: bytes = b''

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a header, matched case-insensitively"""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default


def _shape_name(shape: Any) -> str:
    if get_args(shape):
        return repr(shape).replace('typing.', '')
    return getattr(shape, '__name__', repr(shape))


def decode_text(response: RawResponse) -> str:
    """
    Decode the response body as UTF-8

    Raises:
        BodyDecodeError: If the body is not valid UTF-8
    """
    try:
        return response.body.decode('utf-8')
    except UnicodeDecodeError as e:
        offending = e.object[e.start:e.end]
        raise BodyDecodeError(
            f"Response body is not valid UTF-8: {offending!r} at offset {e.start}",
            body=response.body,
        ) from e


def decode_json(response: RawResponse, shape: Type[T]) -> T:
    """
    Decode the response body as JSON into shape

    Args:
        response: Buffered response
        shape: Model class or typing generic, e.g. List[ImageSummary]

    Returns:
        Validated value of the requested shape

    Raises:
        BodyDecodeError: If the body is not valid UTF-8
        DeserializationError: If the JSON is malformed or does not match shape
    """
    text = decode_text(response)
    try:
        return TypeAdapter(shape).validate_json(text)
    except ValidationError as e:
        raise DeserializationError(_shape_name(shape), str(e)) from e


def raise_for_status(response: RawResponse) -> RawResponse:
    """
    Raise APIError for a classified failure status

    Only 400, 404, 409 and 500 are classified; every other status, including
    other 4xx and 5xx codes, is returned unchanged.

    Raises:
        APIError: With the status and the engine-supplied message
        BodyDecodeError: If a classified response carries no readable envelope
    """
    if response.status not in ERROR_STATUSES:
        return response

    try:
        envelope = decode_json(response, ErrorEnvelope)
    except DeserializationError as e:
        raise BodyDecodeError(
            f"Could not decode error body of {response.status} response: {e.detail}",
            body=response.body,
        ) from e

    raise APIError(response.status, envelope.message, response=response)
