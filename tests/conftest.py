"""
pytest configuration and fixtures.
"""

import io
import socket
import threading
from typing import Callable, Dict, Generator, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from wirehttp import HTTPServer, ServerConfig, Handler
from wirehttp.http import HTTPRequest, HTTPResponse


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /api/users?page=1&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8000\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/plain\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a form body."""
    body = b"name=Ada+Lovelace&lang=en&flag"
    return (
        b"POST /api/users?source=form HTTP/1.1\r\n"
        b"Host: localhost:8000\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def writer() -> io.BytesIO:
    """In-memory stand-in for a connection's write file."""
    return KeepBytesIO()


class KeepBytesIO(io.BytesIO):
    """BytesIO that remembers its contents after close()."""

    def close(self):
        self.written = self.getvalue()
        super().close()


@pytest.fixture
def response_for() -> Callable[[HTTPRequest], HTTPResponse]:
    """Factory for a response bound to a request and an in-memory writer."""
    def factory(request: HTTPRequest = None) -> HTTPResponse:
        return HTTPResponse(request=request, writer=KeepBytesIO())
    return factory


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send(self, raw: bytes) -> bytes:
        """Send raw request bytes and read until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def request(self, method: str, path: str, body: bytes = b"",
                headers: Dict[str, str] = None) -> Tuple[int, Dict[str, str], bytes]:
        lines = [f"{method} {path} HTTP/1.1", "Host: localhost"]
        for name, value in (headers or {}).items():
            lines.append(f"{name}: {value}")
        if body:
            lines.append(f"Content-Length: {len(body)}")
        raw = ("\r\n".join(lines) + "\r\n\r\n").encode() + body
        return split_response(self.send(raw))


def split_response(data: bytes) -> Tuple[int, Dict[str, str], bytes]:
    """Split raw response bytes into (status, headers, body)."""
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode().split("\r\n")
    status = int(lines[0].split(" ")[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return status, headers, body


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server with a small "hello" Handler and a few root routes."""
    server = HTTPServer(config)

    hello = Handler()

    @hello.get("/hello/{name}")
    def say_hello(request, response):
        response.set_body(f"Hello {request.param('name')}")

    @hello.get("/hello/{first}/{last}")
    def say_full_name(request, response):
        response.set_body(f"Hello {request.param('first')} {request.param('last')}")

    @hello.get("/hello/{*}")
    def say_all(request, response):
        response.set_body("Hello " + ",".join(request.varargs))

    @hello.head("/hello/{name}")
    def head_hello(request, response):
        response.set_body(f"Hello {request.param('name')}")

    server.add_handler("hello", hello)

    @server.get("/search")
    def search(request, response):
        response.set_body(f"q={request.param('q')} page={request.param('page')}")

    @server.post("/echo")
    def echo(request, response):
        response.mime_type = "application/octet-stream"
        response.set_body(request.body)

    @server.get("/boom")
    def boom(request, response):
        raise RuntimeError("kaboom")

    @server.get("/empty")
    def empty(request, response):
        pass

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def start_server() -> Generator[Callable[[HTTPServer], TestServer], None, None]:
    """Factory that runs any HTTPServer in the background for one test."""
    started = []

    def factory(server: HTTPServer) -> TestServer:
        srv = TestServer(server)
        srv.start()
        started.append(srv)
        return srv

    yield factory

    for srv in started:
        srv.stop()
