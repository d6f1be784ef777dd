"""
=============================================================================
CONNECTION WRAPPER
=============================================================================

Wraps one accepted client socket with the small API the connection
handler needs:

    set_read_deadline(s)  arm an absolute read deadline
    recv(n)               one read, b"" on peer reset
    write(data)           send ALL of data (sendall)
    close()               orderly TCP close, idempotent

Keeping the socket behind this wrapper is what lets the handler's state
machine run against a fake in tests: anything with these four methods
will do.

=============================================================================
TCP CLOSE SEQUENCE
=============================================================================

    Server                              Client
       │   FIN ──────────────────────────► │  (shutdown SHUT_WR)
       │ ◄───────────────────────── ACK   │
       │ ◄───────────────────────── FIN   │  (client closes)
       │   ACK ──────────────────────────► │
    (socket closed)                  (socket closed)

Unread client data is drained briefly before close(); closing with data
still queued makes the kernel send RST, which can destroy a 400 response
the client has not read yet.

=============================================================================
"""

import socket
import time
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)

# How long close() waits for the client's remaining bytes
DRAIN_TIMEOUT = 0.5


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier used to tag log lines.
        created_at: Timestamp when the connection was accepted.
        closed: True once close() has run.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    created_at: float = field(default_factory=time.time)
    closed: bool = False

    # Absolute time.monotonic() value after which reads fail
    _read_deadline: Optional[float] = field(default=None, repr=False)

    def __post_init__(self):
        # Blocking mode; deadlines come from set_read_deadline()
        self.socket.setblocking(True)

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def set_read_deadline(self, seconds: Optional[float]) -> None:
        """
        Arm a read deadline 'seconds' from now (None = no deadline).

        The deadline is absolute: every recv() until the next call gets
        only the time that is left, so a client trickling one byte at a
        time cannot keep a request open past it.
        """
        if seconds is None:
            self._read_deadline = None
        else:
            self._read_deadline = time.monotonic() + seconds

    def recv(self, bufsize: int) -> bytes:
        """
        Receive up to bufsize bytes.

        Returns:
            Received bytes, or b"" if the peer closed or reset the
            connection.

        Raises:
            socket.timeout: If the armed deadline passes.
            OSError: For other socket failures.
        """
        if self._read_deadline is None:
            self.socket.settimeout(None)
        else:
            remaining = self._read_deadline - time.monotonic()
            if remaining <= 0:
                raise socket.timeout("read deadline exceeded")
            self.socket.settimeout(remaining)

        try:
            return self.socket.recv(bufsize)
        except (ConnectionResetError, BrokenPipeError):
            # Client disconnected abruptly
            return b""

    # =========================================================================
    # WRITING
    # =========================================================================

    def write(self, data: bytes) -> None:
        """
        Send all of data.

        Raises:
            OSError: If the peer went away or the send failed.
        """
        # The read deadline does not apply to writes
        self.socket.settimeout(None)
        self.socket.sendall(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self) -> None:
        """Close the connection gracefully. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            self.socket.settimeout(DRAIN_TIMEOUT)
            while time.monotonic() < deadline and self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")
