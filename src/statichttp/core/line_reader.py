"""
=============================================================================
CRLF LINE READER
=============================================================================

TCP is a byte stream: one recv() may return half a line, or three lines
and the start of a fourth. The request parser wants whole lines, so this
module buffers received bytes and hands them out one CRLF-terminated line
at a time.

    recv() chunks:   "GET / HT"  "TP/1.1\r\nHo"  "st: x\r\n\r\n"
                         │            │               │
                         ▼            ▼               ▼
    buffer:          "GET / HT" → "GET / HTTP/1.1\r\nHo" → ...
                                        │
    read_line():                        └──► "GET / HTTP/1.1"

=============================================================================
WHY "BYTES RECEIVED" MATTERS
=============================================================================

When a read fails the caller needs to know whether ANY bytes of the
current line had arrived:

    ┌───────────────────────────┬───────────────────────────────────────┐
    │ nothing buffered, EOF     │ client closed between requests (fine) │
    │ "GET /ind" buffered, EOF  │ client cut a request short (bad)      │
    │ nothing buffered, timeout │ idle keep-alive connection (fine)     │
    │ "GET /ind" buffered, tmo  │ stalled mid-request (bad)             │
    └───────────────────────────┴───────────────────────────────────────┘

Every failure raised from read_line() carries that flag.

The buffer outlives a single request: bytes that arrive after the blank
line ending one request stay buffered for the next read_line() call.

=============================================================================
"""

import socket
import logging
from typing import Protocol

from ..http.errors import (
    IdleTimeoutError,
    MalformedRequestError,
    PrematureEndOfStreamError,
)


logger = logging.getLogger(__name__)

CRLF = b"\r\n"


class ByteSource(Protocol):
    """Anything with a socket-like recv()."""

    def recv(self, bufsize: int) -> bytes:
        ...


class LineReader:
    """
    Reads CRLF-terminated lines from a ByteSource.

    Usage:
        reader = LineReader(conn)
        request_line = reader.read_line()   # "GET / HTTP/1.1"

    Lines are decoded as ISO-8859-1, which maps every byte to exactly one
    character, so decoding never fails on arbitrary client input.
    """

    def __init__(
        self,
        source: ByteSource,
        buffer_size: int = 8192,
        max_line_length: int = 8192,
    ):
        self.source = source
        self.buffer_size = buffer_size
        self.max_line_length = max_line_length
        self._buffer = b""

    @property
    def has_pending(self) -> bool:
        """True if unconsumed bytes are buffered."""
        return bool(self._buffer)

    def read_line(self) -> str:
        """
        Return the next line with its trailing CRLF stripped.

        Raises:
            PrematureEndOfStreamError: The stream ended (or failed) before
                a full line arrived.
            IdleTimeoutError: The source timed out before a full line arrived.
            MalformedRequestError: The line exceeds max_line_length.

            All three carry bytes_received=True iff part of the line had
            already been buffered.
        """
        while True:
            end = self._buffer.find(CRLF)
            if end != -1:
                line = self._buffer[:end]
                self._buffer = self._buffer[end + len(CRLF):]
                return line.decode("iso-8859-1")

            if len(self._buffer) > self.max_line_length:
                raise MalformedRequestError(
                    f"Line exceeds {self.max_line_length} bytes",
                    bytes_received=True,
                )

            self._buffer += self._recv()

    def _recv(self) -> bytes:
        """One recv() call, translated into the error kinds above."""
        partial = self.has_pending
        try:
            chunk = self.source.recv(self.buffer_size)
        except socket.timeout as e:
            raise IdleTimeoutError(f"Read timed out: {e}", bytes_received=partial) from e
        except OSError as e:
            logger.debug(f"Read failed: {e}")
            raise PrematureEndOfStreamError(f"Read failed: {e}", bytes_received=partial) from e

        if not chunk:
            raise PrematureEndOfStreamError("Connection closed by peer", bytes_received=partial)
        return chunk
