"""
Request building for the Docker Unix socket transport
"""

import re
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple, Union

from .exceptions import MalformedRequestError

METHODS = frozenset({'GET', 'POST', 'DELETE'})

# Only visible ASCII can appear in a request target
_DISALLOWED_TARGET_CHARS = re.compile(r'[^\x21-\x7e]')

# RFC 7230 token
_HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_DISALLOWED_HEADER_VALUE_CHARS = re.compile(r'[\r\n\x00]')

Headers = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


@dataclass(frozen=True)
class Endpoint:
    """Transport-ready request"""

    method: str
    path: str
    query: str = ''
    headers: Tuple[Tuple[str, str], ...] = (('Host', ''),)
    body: bytes = b''

    @property
    def target(self) -> str:
        """Request target as sent on the request line"""
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    def header_values(self, name: str) -> Tuple[str, ...]:
        """All values sent for a header, matched case-insensitively"""
        lowered = name.lower()
        return tuple(value for key, value in self.headers if key.lower() == lowered)


def build_request(method: str, path: str, query: Optional[str] = None,
                  headers: Optional[Headers] = None,
                  body: Optional[bytes] = None) -> Endpoint:
    """
    Build a request for the engine

    The Host header is always sent first and empty, since the peer is a
    socket and not a network host. Caller headers follow in the order
    given, without deduplication.

    Args:
        method: GET, POST or DELETE
        path: Absolute API path, e.g. /images/json
        query: Already-encoded query string, appended verbatim
        headers: Extra headers as a mapping or name/value pairs
        body: Request body, empty when omitted

    Returns:
        Endpoint value

    Raises:
        MalformedRequestError: If the request line cannot be formed
    """
    method = method.upper()
    if method not in METHODS:
        raise MalformedRequestError(f"Unsupported method: {method}")
    if not path.startswith('/'):
        raise MalformedRequestError(f"Path must be absolute: {path!r}")
    if _DISALLOWED_TARGET_CHARS.search(path):
        raise MalformedRequestError(f"Invalid characters in path: {path!r}")
    if query and _DISALLOWED_TARGET_CHARS.search(query):
        raise MalformedRequestError(f"Invalid characters in query: {query!r}")

    all_headers = [('Host', '')]
    if headers:
        items = headers.items() if isinstance(headers, Mapping) else headers
        for key, value in items:
            key, value = str(key), str(value)
            _check_header(key, value)
            all_headers.append((key, value))

    return Endpoint(
        method=method,
        path=path,
        query=query or '',
        headers=tuple(all_headers),
        body=body if body is not None else b'',
    )


def _check_header(name: str, value: str):
    if not _HEADER_NAME.fullmatch(name):
        raise MalformedRequestError(f"Invalid header name: {name!r}")
    if _DISALLOWED_HEADER_VALUE_CHARS.search(value):
        raise MalformedRequestError(f"Invalid characters in header {name}: {value!r}")
    try:
        value.encode('latin-1')
    except UnicodeEncodeError as e:
        raise MalformedRequestError(f"Header {name} is not latin-1 encodable: {value!r}") from e
