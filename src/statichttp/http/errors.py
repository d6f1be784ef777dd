"""
=============================================================================
SERVER ERROR KINDS
=============================================================================

Every failure the server knows how to classify has its own exception class.
The connection handler is the single place that turns these into a
connection decision:

    ┌──────────────────────────────┬─────────────────────────────────────┐
    │ Error                        │ Outcome                             │
    ├──────────────────────────────┼─────────────────────────────────────┤
    │ MalformedRequestError        │ 400 Bad Request, then close         │
    │ MissingHostError             │ 400 Bad Request, then close         │
    │ PrematureEndOfStreamError    │ bytes seen: 400 + close             │
    │                              │ no bytes:   close silently          │
    │ IdleTimeoutError             │ bytes seen: 400 + close             │
    │                              │ no bytes:   close silently          │
    │ ResolutionError              │ logged, close without response      │
    │ WriteError                   │ logged, close                       │
    └──────────────────────────────┴─────────────────────────────────────┘

=============================================================================
"""


class HTTPServerError(Exception):
    """Base class for all errors raised by statichttp."""


class RequestError(HTTPServerError):
    """
    A request could not be read or parsed.

    Carries ``bytes_received`` so the handler can tell a client that went
    away between requests from one that disconnected (or stalled) halfway
    through a request.
    """

    def __init__(self, message: str, bytes_received: bool = True):
        super().__init__(message)
        self.bytes_received = bytes_received


class MalformedRequestError(RequestError):
    """Grammar violation in the request line or a header line."""


class MissingHostError(RequestError):
    """The header block ended without a non-empty Host header."""


class PrematureEndOfStreamError(RequestError):
    """The peer closed the stream (or the read failed) before a full line arrived."""


class IdleTimeoutError(RequestError):
    """No complete line arrived within the read deadline."""


class ResolutionError(HTTPServerError):
    """Filesystem failure other than "does not exist" while resolving a target."""


class WriteError(HTTPServerError):
    """Sending a response to the client failed."""


class UnsupportedStatusError(HTTPServerError, ValueError):
    """A response carried a status code outside the supported set."""

    def __init__(self, status: int):
        super().__init__(f"Unsupported status code: {status}")
        self.status = status
