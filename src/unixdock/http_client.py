"""
HTTP Client for Docker Unix Socket
Pure Python implementation using http.client and socket
"""

import http.client
import logging
import socket
from typing import Optional

from .exceptions import DockerConnectionError, TransportError
from .request import Endpoint, Headers, build_request
from .response import RawResponse, raise_for_status

logger = logging.getLogger(__name__)


class UnixHTTPConnection(http.client.HTTPConnection):
    """HTTP connection over Unix socket"""

    def __init__(self, socket_path: str, timeout: Optional[float] = None):
        super().__init__('localhost')
        self.socket_path = socket_path
        self.timeout = timeout

    def connect(self):
        """Connect to Unix socket"""
        self.sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.sock.settimeout(self.timeout)
        self.sock.connect(self.socket_path)


class DockerHTTPClient:
    """
    HTTP client for Docker daemon

    Every call dials a fresh connection and closes it once the response is
    read; no idle connection is ever kept around.
    """

    def __init__(self, socket_path: str, timeout: Optional[float] = None):
        """
        Initialize Docker HTTP client

        Args:
            socket_path: Docker socket path, with or without unix:// prefix
            timeout: Socket timeout in seconds, None blocks
        """
        self.socket_path = socket_path.replace('unix://', '', 1)
        self.timeout = timeout

    def send(self, endpoint: Endpoint) -> RawResponse:
        """
        Send a built request and buffer the whole response

        Args:
            endpoint: Request from build_request

        Returns:
            Raw response, status not yet classified

        Raises:
            DockerConnectionError: If the socket cannot be dialed or written
            TransportError: If reading the response fails
        """
        logger.debug(f"{endpoint.method} {endpoint.target} via {self.socket_path}")

        conn = UnixHTTPConnection(self.socket_path, timeout=self.timeout)
        try:
            try:
                conn.connect()
                conn.putrequest(endpoint.method, endpoint.target,
                                skip_host=True, skip_accept_encoding=True)
                for name, value in endpoint.headers:
                    conn.putheader(name, value)
                if not endpoint.header_values('Content-Length'):
                    conn.putheader('Content-Length', str(len(endpoint.body)))
                conn.endheaders(endpoint.body)
            except OSError as e:
                raise DockerConnectionError(
                    f"Cannot reach Docker socket {self.socket_path}: {e}",
                    socket_path=self.socket_path,
                ) from e

            try:
                response = conn.getresponse()
                body = response.read()
            except (OSError, http.client.HTTPException) as e:
                raise TransportError(
                    f"{endpoint.method} {endpoint.path} failed: {e}"
                ) from e

            logger.debug(f"{endpoint.method} {endpoint.path} -> {response.status}")
            return RawResponse(
                status=response.status,
                reason=response.reason,
                headers=tuple(response.getheaders()),
                body=body,
            )
        finally:
            conn.close()

    def request(self, method: str, path: str, query: Optional[str] = None,
                body: Optional[bytes] = None,
                headers: Optional[Headers] = None) -> RawResponse:
        """
        Make HTTP request to Docker daemon

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: API path
            query: Encoded query string
            body: Raw request body
            headers: Extra HTTP headers

        Returns:
            Response whose status is not a classified failure

        Raises:
            APIError: If the engine answered with a classified failure status
        """
        endpoint = build_request(method, path, query=query, headers=headers, body=body)
        return raise_for_status(self.send(endpoint))

    def get(self, path: str, **kwargs) -> RawResponse:
        """Make GET request"""
        return self.request('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> RawResponse:
        """Make POST request"""
        return self.request('POST', path, **kwargs)

    def delete(self, path: str, **kwargs) -> RawResponse:
        """Make DELETE request"""
        return self.request('DELETE', path, **kwargs)
