"""Shared fixtures: a fake engine serving HTTP over a Unix socket."""

import http.server
import json
import os
import shutil
import socket
import socketserver
import tempfile
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Tuple
from urllib.parse import urlsplit

import pytest

from unixdock import DockerClient


@dataclass
class RecordedRequest:
    """Request as seen by the fake engine."""

    method: str
    path: str
    query: str
    headers: List[Tuple[str, str]]
    body: bytes

    def header(self, name: str) -> List[str]:
        return [value for key, value in self.headers if key.lower() == name.lower()]


@dataclass
class FakeEngine:
    """Scripted engine: responses by (method, path), every request recorded."""

    socket_path: str
    routes: Dict[Tuple[str, str], Tuple[int, bytes]] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)

    def respond(self, method: str, path: str, status: int = 200, body=b"") -> None:
        if not isinstance(body, bytes):
            body = json.dumps(body).encode()
        self.routes[(method, path)] = (status, body)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


class _Handler(http.server.BaseHTTPRequestHandler):
    def _handle(self):
        engine: FakeEngine = self.server.engine
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        target = urlsplit(self.path)
        engine.requests.append(
            RecordedRequest(self.command, target.path, target.query, list(self.headers.items()), body)
        )
        status, payload = engine.routes.get(
            (self.command, target.path), (404, b'{"message":"page not found"}')
        )
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _handle
    do_POST = _handle
    do_DELETE = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def socket_dir():
    """Short temp directory; AF_UNIX paths are limited to ~100 bytes."""
    path = tempfile.mkdtemp(prefix="ud")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def engine(socket_dir):
    """Running fake engine."""
    fake = FakeEngine(socket_path=os.path.join(socket_dir, "engine.sock"))
    server = socketserver.ThreadingUnixStreamServer(fake.socket_path, _Handler)
    server.daemon_threads = True
    server.engine = fake
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield fake
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture
def client(engine):
    """Client bound to the fake engine."""
    return DockerClient(socket_path=engine.socket_path, timeout=5)


@pytest.fixture
def hangup_socket(socket_dir):
    """Socket whose peer reads the request and closes without answering."""
    path = os.path.join(socket_dir, "hangup.sock")
    listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    listener.bind(path)
    listener.listen(1)

    def serve():
        conn, _ = listener.accept()
        with conn:
            data = b""
            while b"\r\n\r\n" not in data:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                data += chunk

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield path
    thread.join(timeout=5)
    listener.close()
