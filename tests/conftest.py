"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, List, Union

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from statichttp import HTTPServer, ServerConfig


INDEX_BODY = b"0123456789"


@pytest.fixture
def doc_root(tmp_path: Path) -> Path:
    """
    Document root laid out as:

        index.html          0123456789
        style.css
        data.bin            (no known extension)
        docs/index.html
        empty/              (directory without an index)
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_BODY)
    (root / "style.css").write_bytes(b"body { color: red; }\n")
    (root / "data.bin").write_bytes(bytes(range(256)))
    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_bytes(b"<h1>docs</h1>")
    (root / "empty").mkdir()
    return root


@pytest.fixture
def config(doc_root: Path) -> ServerConfig:
    """Test configuration bound to an OS-picked port."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        doc_root=str(doc_root),
        idle_timeout=1.0,
        log_level="WARNING",
    )


# =============================================================================
# FAKE CONNECTION
# =============================================================================

Chunk = Union[bytes, BaseException]


class FakeConnection:
    """
    Scripted stand-in for core.connection.Connection.

    recv() hands out the scripted chunks in order; an exception in the
    script is raised instead of returned. Once the script runs out, recv()
    returns b"" (peer closed), or raises socket.timeout if then_timeout.
    """

    def __init__(self, chunks: List[Chunk], then_timeout: bool = False, fail_writes: bool = False):
        self.id = "fake0001"
        self._chunks = list(chunks)
        self.then_timeout = then_timeout
        self.fail_writes = fail_writes
        self.written = bytearray()
        self.deadlines: List[float] = []
        self.closed = False
        self.close_calls = 0

    def set_read_deadline(self, seconds):
        self.deadlines.append(seconds)

    def recv(self, bufsize: int) -> bytes:
        if not self._chunks:
            if self.then_timeout:
                raise socket.timeout("timed out")
            return b""

        chunk = self._chunks.pop(0)
        if isinstance(chunk, BaseException):
            raise chunk
        if len(chunk) > bufsize:
            self._chunks.insert(0, chunk[bufsize:])
            chunk = chunk[:bufsize]
        return chunk

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise BrokenPipeError("peer went away")
        self.written += data

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True

    @property
    def unread(self) -> List[Chunk]:
        return list(self._chunks)


@pytest.fixture
def fake_connection():
    """Factory for FakeConnection objects."""
    return FakeConnection


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def _parse_responses(data: bytes) -> list:
    """
    Split raw bytes into (status_line, headers, body) tuples.

    Headers are split on the first ": " only, so dates survive. Body
    length comes from Content-Length (absent = empty).
    """
    responses = []
    while data:
        head, sep, rest = data.partition(b"\r\n\r\n")
        assert sep, f"Unterminated header block: {data!r}"
        lines = head.decode("iso-8859-1").split("\r\n")
        headers = {}
        for line in lines[1:]:
            name, _, value = line.partition(": ")
            headers[name] = value
        length = int(headers.get("Content-Length", "0"))
        responses.append((lines[0], headers, rest[:length]))
        data = rest[length:]
    return responses


@pytest.fixture
def parse_responses():
    """Function splitting raw response bytes into (status, headers, body)."""
    return _parse_responses


# =============================================================================
# LIVE SERVER
# =============================================================================

class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.server_address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def connect(self, timeout: float = 5.0) -> socket.socket:
        """Open a client socket to the server."""
        return socket.create_connection(("127.0.0.1", self.port), timeout=timeout)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server over the doc_root fixture."""
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
