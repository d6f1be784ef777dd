"""
=============================================================================
HTTP RESPONSE BUILDING AND WRITING
=============================================================================

Every response this server sends comes from one of three builders and is
serialized by one writer.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─ STATUS LINE ───────────────────────────────────────────────────────┐
    │    HTTP/1.1 200 OK\r\n                                              │
    ├─ HEADERS (sorted by canonical name) ────────────────────────────────┤
    │    Content-Length: 10\r\n                                           │
    │    Content-Type: text/html; charset=utf-8\r\n                       │
    │    Date: Mon, 02 Jan 2006 15:04:05 GMT\r\n                          │
    │    Last-Modified: Mon, 02 Jan 2006 15:04:05 GMT\r\n                 │
    │    \r\n                                ← end of headers             │
    ├─ BODY ──────────────────────────────────────────────────────────────┤
    │    0123456789                          ← file bytes, verbatim       │
    └─────────────────────────────────────────────────────────────────────┘

Headers are written in sorted order so the same response always produces
the same bytes, whatever order the builder inserted them in.

=============================================================================
THE THREE BUILDERS
=============================================================================

    ok(request, resolution)   200, Date, Last-Modified, Content-Type,
                              Content-Length, body = the file,
                              Connection: close if the request asked
    bad_request()             400, HTTP/1.1, Date, Connection: close
                              (always), no body
    not_found(request)        404, Date, Connection: close if the
                              request asked, no body

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Optional, Protocol

from .errors import WriteError
from .headers import Headers
from .mime_types import get_content_type
from .status_codes import HTTPStatus, reason_phrase

if TYPE_CHECKING:
    from .request import Request
    from ..handlers.static import Resolution


DEFAULT_VERSION = "HTTP/1.1"

# Body files are streamed in chunks of this size
BODY_CHUNK_SIZE = 64 * 1024


class Writable(Protocol):
    """Anything bytes can be written to (socket wrapper, BytesIO, ...)."""

    def write(self, data: bytes) -> object:
        ...


@dataclass
class HTTPResponse:
    """
    One response to send back.

    Attributes:
        status: 200, 400 or 404.
        version: Protocol version for the status line.
        headers: Canonical-key header map.
        body_path: File to stream as the body, or None for no body.
    """

    status: int
    version: str = DEFAULT_VERSION
    headers: Headers = field(default_factory=Headers)
    body_path: Optional[Path] = None

    @property
    def status_line(self) -> str:
        """
        Status line without the trailing CRLF.

        Raises:
            UnsupportedStatusError: If status is not 200, 400 or 404.
        """
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    def header_block(self) -> bytes:
        """Status line, sorted headers and the blank line, as wire bytes."""
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers.sorted_items())
        return ("\r\n".join(lines) + "\r\n\r\n").encode("iso-8859-1")

    def write(self, stream: Writable) -> None:
        """Serialize this response onto stream. See write_response()."""
        write_response(self, stream)


# =============================================================================
# WRITER
# =============================================================================

def write_response(response: HTTPResponse, stream: Writable) -> None:
    """
    Write a response byte-exactly: status line, sorted headers, blank
    line, then the body file (if any) streamed verbatim.

    Raises:
        UnsupportedStatusError: Before anything is written, if the status
            code is outside the supported set.
        WriteError: If a write fails or the body file cannot be read.
            Part of the response may already be on the wire.
    """
    # Built up front so an unsupported status fails before any byte is sent
    head = response.header_block()

    try:
        stream.write(head)
    except OSError as e:
        raise WriteError(f"Failed writing response head: {e}") from e

    if response.body_path is not None:
        _write_body(response.body_path, stream)


def _write_body(path: Path, stream: Writable) -> None:
    try:
        body: BinaryIO = open(path, "rb")
    except OSError as e:
        raise WriteError(f"Failed opening body {path}: {e}") from e

    with body:
        while True:
            try:
                chunk = body.read(BODY_CHUNK_SIZE)
            except OSError as e:
                raise WriteError(f"Failed reading body {path}: {e}") from e
            if not chunk:
                return
            try:
                stream.write(chunk)
            except OSError as e:
                raise WriteError(f"Failed writing body: {e}") from e


# =============================================================================
# BUILDERS
# =============================================================================

def ok(
    request: "Request",
    resolution: "Resolution",
    now: Optional[datetime] = None,
) -> HTTPResponse:
    """
    200 OK serving the resolved file.

    Args:
        request: The request being answered.
        resolution: A FILE resolution (path, size and modified set).
        now: Timestamp for the Date header (defaults to the current time).
    """
    headers = Headers()
    headers["Date"] = format_http_date(now or _utcnow())
    headers["Last-Modified"] = format_http_date(resolution.modified)
    headers["Content-Type"] = get_content_type(resolution.path)
    headers["Content-Length"] = str(resolution.size)
    if request.close_requested:
        headers["Connection"] = "close"

    return HTTPResponse(
        status=HTTPStatus.OK,
        version=request.version,
        headers=headers,
        body_path=resolution.path,
    )


def bad_request(now: Optional[datetime] = None) -> HTTPResponse:
    """
    400 Bad Request.

    There may be no valid request to echo a version from, so the version
    is fixed, and the connection is always closed afterwards.
    """
    headers = Headers()
    headers["Date"] = format_http_date(now or _utcnow())
    headers["Connection"] = "close"
    return HTTPResponse(status=HTTPStatus.BAD_REQUEST, version=DEFAULT_VERSION, headers=headers)


def not_found(request: "Request", now: Optional[datetime] = None) -> HTTPResponse:
    """404 Not Found with an empty body."""
    headers = Headers()
    headers["Date"] = format_http_date(now or _utcnow())
    if request.close_requested:
        headers["Connection"] = "close"
    return HTTPResponse(status=HTTPStatus.NOT_FOUND, version=request.version, headers=headers)


# =============================================================================
# DATES
# =============================================================================

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date.

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Mon, 02 Jan 2006 15:04:05 GMT

    Aware datetimes are converted to UTC first; naive ones are taken
    to already be UTC. Output does not depend on the process locale.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
