"""
=============================================================================
CONNECTION HANDLER (STATE MACHINE)
=============================================================================

Owns one accepted connection from first byte to close.

=============================================================================
STATES
=============================================================================

         ┌──────────────────────────────────────────────┐
         │                                              │
         ▼                                              │ keep-alive
       IDLE ──────► PARSING ──────► RESPONDING ─────────┘
   (arm deadline)      │                 │
                       │ silent close    │ close requested, 400 sent,
                       │ or resolve      │ or write failed
                       │ failure         │
                       ▼                 ▼
                     CLOSED ◄────────────┘

Each state has one transition method returning the next state. run()
just applies transitions until CLOSED, then closes the socket.

=============================================================================
DECISION TABLE (decide)
=============================================================================

    ┌───────────────────────────────────────┬──────────────────────────┐
    │ Parse outcome                         │ Action                   │
    ├───────────────────────────────────────┼──────────────────────────┤
    │ end of stream, no bytes               │ CLOSE  (no response)     │
    │ timeout, no bytes                     │ CLOSE  (no response)     │
    │ any failure after bytes arrived       │ REJECT (400, then close) │
    │   malformed line, missing Host,       │                          │
    │   truncated request, stalled request  │                          │
    │ valid request                         │ SERVE  (200 or 404)      │
    └───────────────────────────────────────┴──────────────────────────┘

decide() is a pure function of the ParseResult, so the whole table can be
tested without a socket.

=============================================================================
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Protocol

from ..config import ServerConfig
from ..handlers.static import StaticFileResolver
from ..http.errors import IdleTimeoutError, ResolutionError, WriteError
from ..http.request import ParseResult, Request, RequestParser
from ..http.response import HTTPResponse, bad_request, not_found, ok, write_response
from .line_reader import LineReader


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states."""
    IDLE = "idle"              # Waiting for the next request
    PARSING = "parsing"        # Reading a request
    RESPONDING = "responding"  # Writing the response
    CLOSED = "closed"          # Terminal


class Action(Enum):
    """What to do with a parse outcome."""
    CLOSE = "close"    # Close silently, send nothing
    REJECT = "reject"  # Send 400 Bad Request, then close
    SERVE = "serve"    # Resolve the target and answer it


class ClientConnection(Protocol):
    """What the handler needs from a connection (see core.connection)."""

    id: str

    def set_read_deadline(self, seconds: Optional[float]) -> None:
        ...

    def recv(self, bufsize: int) -> bytes:
        ...

    def write(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...


def decide(result: ParseResult) -> Action:
    """Map a parse outcome to the connection's next action."""
    if result.ok:
        return Action.SERVE
    if result.bytes_received:
        return Action.REJECT
    return Action.CLOSE


class ConnectionHandler:
    """
    Runs the read-parse-respond loop for one connection.

    Usage:
        handler = ConnectionHandler(conn, config)
        handler.run()      # Returns once the connection is closed

    Tests can drive it one transition at a time with step().
    """

    def __init__(
        self,
        conn: ClientConnection,
        config: ServerConfig,
        resolver: Optional[StaticFileResolver] = None,
        parser: Optional[RequestParser] = None,
    ):
        self.conn = conn
        self.config = config
        self.resolver = resolver or StaticFileResolver(config.doc_root, config.index_file)
        self.parser = parser or RequestParser()

        # One reader per connection: bytes past one request stay buffered
        self.reader = LineReader(
            conn,
            buffer_size=config.buffer_size,
            max_line_length=config.max_line_length,
        )

        self.state = ConnectionState.IDLE
        self.requests_handled = 0

        # Set by PARSING, consumed by RESPONDING
        self._request: Optional[Request] = None
        self._response: Optional[HTTPResponse] = None
        self._close_after_response = False

        self._transitions: Dict[ConnectionState, Callable[[], ConnectionState]] = {
            ConnectionState.IDLE: self._on_idle,
            ConnectionState.PARSING: self._on_parsing,
            ConnectionState.RESPONDING: self._on_responding,
        }

    @property
    def _tag(self) -> str:
        return f"[{getattr(self.conn, 'id', '-')}]"

    # =========================================================================
    # DRIVER
    # =========================================================================

    def run(self) -> None:
        """
        Apply transitions until CLOSED.

        The connection is closed on every exit path, including unexpected
        exceptions, which are logged and never propagate.
        """
        try:
            while self.state is not ConnectionState.CLOSED:
                self.step()
        except Exception:
            logger.exception(f"{self._tag} Unexpected error, closing connection")
            self.state = ConnectionState.CLOSED
        finally:
            self.conn.close()

    def step(self) -> ConnectionState:
        """Run the transition for the current state and return the new one."""
        if self.state is ConnectionState.CLOSED:
            return self.state
        self.state = self._transitions[self.state]()
        return self.state

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _on_idle(self) -> ConnectionState:
        # The deadline restarts for every request on the connection
        try:
            self.conn.set_read_deadline(self.config.idle_timeout)
        except OSError as e:
            logger.warning(f"{self._tag} Failed to arm read deadline: {e}")
            return ConnectionState.CLOSED
        return ConnectionState.PARSING

    def _on_parsing(self) -> ConnectionState:
        result = self.parser.parse(self.reader)
        action = decide(result)

        if action is Action.CLOSE:
            if isinstance(result.error, IdleTimeoutError):
                logger.debug(f"{self._tag} Idle timeout, closing")
            else:
                logger.debug(f"{self._tag} Client closed connection")
            return ConnectionState.CLOSED

        if action is Action.REJECT:
            logger.info(f"{self._tag} Bad request: {result.error}")
            self._request = None
            self._response = bad_request()
            self._close_after_response = True
            return ConnectionState.RESPONDING

        request = result.request
        try:
            self._response = self._respond_to(request)
        except ResolutionError as e:
            # No status in the supported set fits; drop the connection
            logger.error(f"{self._tag} Cannot resolve {request.target}: {e}")
            return ConnectionState.CLOSED

        self._request = request
        self._close_after_response = request.close_requested
        return ConnectionState.RESPONDING

    def _on_responding(self) -> ConnectionState:
        response, self._response = self._response, None

        try:
            write_response(response, self.conn)
        except WriteError as e:
            logger.warning(f"{self._tag} {e}")
            return ConnectionState.CLOSED

        self.requests_handled += 1
        self._log_access(response)

        if self._close_after_response:
            return ConnectionState.CLOSED
        return ConnectionState.IDLE

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _respond_to(self, request: Request) -> HTTPResponse:
        """Resolve the target and build a 200 or 404."""
        resolution = self.resolver.resolve(request.target)
        if resolution.is_file:
            return ok(request, resolution)
        return not_found(request)

    def _log_access(self, response: HTTPResponse) -> None:
        if self._request is None:
            request_line = "-"
        else:
            r = self._request
            request_line = f"{r.method} {r.target} {r.version}"
        logger.info(f'{self._tag} "{request_line}" {int(response.status)}')
