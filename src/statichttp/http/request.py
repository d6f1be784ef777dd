"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns lines from a LineReader into a validated Request.

=============================================================================
ACCEPTED GRAMMAR
=============================================================================

    GET /path/to/file HTTP/1.1\r\n        ← exactly 3 tokens, single spaces
    Host: example.com\r\n                 ← mandatory
    Connection: close\r\n                 ← optional, only "close" matters
    Accept: */*\r\n                       ← stored under canonical name
    \r\n                                  ← end of header block

Strictness, on purpose:

    - Method must be GET, version must be HTTP/1.1.
    - Target must start with '/'.
    - A header line must contain EXACTLY one ':'.
          "Host: localhost:8080"  → rejected (two colons)
    - Any Connection value other than the exact string "close" means
      keep-alive ("Close", "CLOSE", "keep-alive", "garbage" all keep the
      connection open).

=============================================================================
PARSE RESULTS
=============================================================================

parse() never raises for client mistakes. It returns a ParseResult:

    ┌──────────────────┬─────────────────┬──────────────────────────────┐
    │ request          │ error           │ bytes_received               │
    ├──────────────────┼─────────────────┼──────────────────────────────┤
    │ Request          │ None            │ True                         │
    │ None             │ RequestError    │ False: nothing arrived       │
    │ None             │ RequestError    │ True:  partial / bad request │
    └──────────────────┴─────────────────┴──────────────────────────────┘

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .errors import MalformedRequestError, MissingHostError, RequestError
from .headers import FrozenHeaders, Headers, canonical_header_key

if TYPE_CHECKING:
    from ..core.line_reader import LineReader


logger = logging.getLogger(__name__)

SUPPORTED_METHOD = "GET"
SUPPORTED_VERSION = "HTTP/1.1"


@dataclass(frozen=True)
class Request:
    """
    One parsed client request.

    Attributes:
        method: Always "GET".
        target: Requested path, exactly as sent (starts with '/').
        version: Always "HTTP/1.1".
        headers: Every header except Host and Connection, canonical keys,
                 read-only (FrozenHeaders).
        host: Value of the Host header (never empty).
        close_requested: True iff the Connection header was exactly "close".
    """

    method: str
    target: str
    version: str
    host: str
    headers: Headers = field(default_factory=Headers)
    close_requested: bool = False

    def __post_init__(self):
        # Frozen dataclass: the header map must not change either
        if not isinstance(self.headers, FrozenHeaders):
            object.__setattr__(self, "headers", FrozenHeaders(self.headers))


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one parse attempt."""

    request: Optional[Request] = None
    bytes_received: bool = False
    error: Optional[RequestError] = None

    @property
    def ok(self) -> bool:
        return self.request is not None


class RequestParser:
    """
    Reads exactly one request from a LineReader.

    Usage:
        parser = RequestParser()
        result = parser.parse(reader)
        if result.ok:
            serve(result.request)
    """

    def parse(self, reader: "LineReader") -> ParseResult:
        """
        Parse the next request.

        Args:
            reader: Line source for this connection.

        Returns:
            ParseResult holding either the Request or the RequestError,
            plus whether any bytes of this request were received.
        """
        try:
            request = self._read_request(reader)
        except RequestError as e:
            logger.debug(f"Parse failed ({type(e).__name__}): {e}")
            return ParseResult(bytes_received=e.bytes_received, error=e)
        return ParseResult(request=request, bytes_received=True)

    def _read_request(self, reader: "LineReader") -> Request:
        # Errors on the first line keep their own bytes_received flag:
        # zero bytes here means a clean end of stream.
        request_line = reader.read_line()

        try:
            method, target, version = self._parse_request_line(request_line)

            headers = Headers()
            host = ""
            close_requested = False

            # ─────────────────────────────────────────────────────────────
            # HEADER BLOCK: read until the empty line
            # ─────────────────────────────────────────────────────────────
            while True:
                line = reader.read_line()
                if line == "":
                    break

                name, value = self._parse_header_line(line)
                if name == "Host":
                    host = value
                elif name == "Connection":
                    close_requested = value == "close"
                else:
                    headers[name] = value
        except RequestError as e:
            # Past the first byte, every failure is a bad request.
            e.bytes_received = True
            raise

        if not host:
            raise MissingHostError("Missing Host header", bytes_received=True)

        return Request(
            method=method,
            target=target,
            version=version,
            host=host,
            headers=headers,
            close_requested=close_requested,
        )

    def _parse_request_line(self, line: str) -> tuple:
        """
        Validate "METHOD SP TARGET SP VERSION".

        Returns:
            (method, target, version)

        Raises:
            MalformedRequestError: On any grammar violation.
        """
        parts = line.split(" ")
        if len(parts) != 3:
            raise MalformedRequestError(f"Invalid request line: {line!r}")

        method, target, version = parts
        if method != SUPPORTED_METHOD:
            raise MalformedRequestError(f"Unsupported method: {method!r}")
        if not target.startswith("/"):
            raise MalformedRequestError(f"Target must start with '/': {target!r}")
        if version != SUPPORTED_VERSION:
            raise MalformedRequestError(f"Unsupported version: {version!r}")

        return method, target, version

    def _parse_header_line(self, line: str) -> tuple:
        """
        Split "Name: Value" into its canonical name and trimmed value.

        Raises:
            MalformedRequestError: If the line does not contain exactly one
                colon, or the name is empty.
        """
        parts = line.split(":")
        if len(parts) != 2:
            raise MalformedRequestError(f"Malformed header line: {line!r}")

        name, value = parts[0].strip(), parts[1].strip()
        if not name:
            raise MalformedRequestError(f"Empty header name: {line!r}")

        return canonical_header_key(name), value


def parse_request(reader: "LineReader") -> ParseResult:
    """Convenience wrapper around RequestParser().parse()."""
    return RequestParser().parse(reader)
