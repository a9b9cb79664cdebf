"""
unixdock - Docker Engine API client over a Unix socket
"""

from .client import DockerClient
from .exceptions import (
    APIError,
    BodyDecodeError,
    BuildError,
    DeserializationError,
    DockerConnectionError,
    DockerException,
    ErrorKind,
    MalformedRequestError,
    SerializationError,
    TransportError,
)
from .query import (
    BuildParams,
    BuildParamsBuilder,
    FilterSet,
    ListImagesFilterBuilder,
    SearchImagesFilterBuilder,
)

__all__ = [
    'DockerClient',
    'DockerException',
    'ErrorKind',
    'DockerConnectionError',
    'TransportError',
    'BodyDecodeError',
    'DeserializationError',
    'APIError',
    'SerializationError',
    'MalformedRequestError',
    'BuildError',
    'FilterSet',
    'BuildParams',
    'ListImagesFilterBuilder',
    'SearchImagesFilterBuilder',
    'BuildParamsBuilder',
]

__version__ = '1.0.0'
