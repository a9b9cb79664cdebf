"""
Docker Client - Main API entry point
"""

from typing import Optional

from .http_client import DockerHTTPClient
from .images import ImageCollection
from .settings import Settings, resolve_socket_path


class DockerClient:
    """
    Docker API Client over a Unix socket
    """

    def __init__(self, socket_path: Optional[str] = None, timeout: Optional[float] = None,
                 settings: Optional[Settings] = None):
        """
        Initialize Docker client

        Args:
            socket_path: Docker socket path (default: resolved from
                DOCKER_HOST, settings, then platform default)
            timeout: Socket timeout in seconds (default: from settings)
            settings: Settings to resolve defaults from
        """
        if timeout is None and settings is not None:
            timeout = settings.get('timeout')
        self.http = DockerHTTPClient(resolve_socket_path(socket_path, settings), timeout=timeout)
        self.images = ImageCollection(self)

    @property
    def socket_path(self) -> str:
        return self.http.socket_path

    def __repr__(self):
        return f"<DockerClient: {self.socket_path}>"
