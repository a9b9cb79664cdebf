"""
Docker API Exceptions
"""

import enum
from typing import Optional


class ErrorKind(enum.Enum):
    """Failure kind carried by every DockerException"""

    CONNECTION = 'connection'
    TRANSPORT = 'transport'
    BODY_DECODE = 'body_decode'
    DESERIALIZATION = 'deserialization'
    API = 'api'
    SERIALIZATION = 'serialization'
    MALFORMED_REQUEST = 'malformed_request'
    BUILD = 'build'


class DockerException(Exception):
    """Base Docker exception"""

    kind: ErrorKind


class DockerConnectionError(DockerException):
    """Socket could not be dialed or the request could not be written"""

    kind = ErrorKind.CONNECTION

    def __init__(self, message: str, socket_path: Optional[str] = None):
        super().__init__(message)
        self.socket_path = socket_path


class TransportError(DockerException):
    """I/O failure while the request was in flight"""

    kind = ErrorKind.TRANSPORT


class BodyDecodeError(DockerException):
    """Response body is not valid UTF-8 or not the expected structure"""

    kind = ErrorKind.BODY_DECODE

    def __init__(self, message: str, body: bytes = b''):
        super().__init__(message)
        self.body = body


class DeserializationError(DockerException):
    """JSON body could not be turned into the target shape"""

    kind = ErrorKind.DESERIALIZATION

    def __init__(self, shape: str, detail: str):
        super().__init__(f"Could not deserialize response into {shape}: {detail}")
        self.shape = shape
        self.detail = detail


class APIError(DockerException):
    """Docker API error"""

    kind = ErrorKind.API

    def __init__(self, status_code: int, message: str, response=None):
        super().__init__(f"Docker API error ({status_code}): {message}")
        self.status_code = status_code
        self.message = message
        self.response = response


class SerializationError(DockerException):
    """Query value could not be JSON-encoded"""

    kind = ErrorKind.SERIALIZATION


class MalformedRequestError(DockerException):
    """Request line could not be formed"""

    kind = ErrorKind.MALFORMED_REQUEST


class BuildError(DockerException):
    """Image build error"""

    kind = ErrorKind.BUILD

    def __init__(self, message: str, log: str = ''):
        super().__init__(message)
        self.log = log
