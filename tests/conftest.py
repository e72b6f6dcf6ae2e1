"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator, List
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig
from minihttp.http import HTTPRequest, HTTPResponse, ResponseBuilder, HTTPStatus


@pytest.fixture
def sample_head_lines() -> List[str]:
    """Sample request head, terminators and blank line already stripped."""
    return [
        "GET /index.html?lang=en HTTP/1.1",
        "Host: localhost:8993",
        "User-Agent: pytest",
        "Referer: /home",
        "X-Request-Id: abc123",
    ]


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
    )


@pytest.fixture
def body_file(tmp_path: Path) -> Path:
    """A small HTML file to serve."""
    path = tmp_path / "hello.html"
    path.write_text("<p>hello</p>", encoding="utf-8")
    return path


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send(self, raw: bytes) -> bytes:
        """Send raw bytes, half-close, and read the whole response."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.sendall(raw)
            sock.shutdown(socket.SHUT_WR)
            chunks = []
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(config: ServerConfig, body_file: Path) -> Generator[TestServer, None, None]:
    """A running server answering with body_file."""
    config.body_file = str(body_file)
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def make_server(config: ServerConfig):
    """Factory for running servers with a custom handler or config values."""
    started = []

    def factory(handler=None, **overrides) -> TestServer:
        for name, value in overrides.items():
            setattr(config, name, value)
        test_srv = TestServer(HTTPServer(config, handler=handler))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield factory

    for test_srv in started:
        test_srv.stop()


@pytest.fixture
def echo_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server whose handler echoes the request back."""

    def echo(request: HTTPRequest) -> HTTPResponse:
        referer = request.headers.get("referer", "-")
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("X-Method", request.method.value)
            .text(f"{request.uri} {referer}")
            .build())

    test_srv = TestServer(HTTPServer(config, handler=echo))
    test_srv.start()

    yield test_srv

    test_srv.stop()
