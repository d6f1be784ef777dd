"""
=============================================================================
HTTP PROTOCOL PACKAGE
=============================================================================

Everything that knows about the HTTP/1.1 wire format, independent of
sockets and threads:

    request.py       Request value + strict GET parser
    response.py      HTTPResponse value, ok/bad_request/not_found builders,
                     byte-exact writer, HTTP-date formatting
    headers.py       Canonical header keys, case-insensitive header map
    status_codes.py  The closed set {200, 400, 404}
    mime_types.py    Extension → Content-Type
    errors.py        Error kinds shared by parser, writer and handler

=============================================================================
"""

from .errors import (
    HTTPServerError,
    RequestError,
    MalformedRequestError,
    MissingHostError,
    PrematureEndOfStreamError,
    IdleTimeoutError,
    ResolutionError,
    WriteError,
    UnsupportedStatusError,
)
from .headers import FrozenHeaders, Headers, canonical_header_key
from .status_codes import HTTPStatus, reason_phrase
from .mime_types import get_mime_type, get_content_type, DEFAULT_MIME_TYPE
from .request import Request, RequestParser, ParseResult, parse_request
from .response import (
    HTTPResponse,
    write_response,
    ok,
    bad_request,
    not_found,
    format_http_date,
)

__all__ = [
    # Errors
    "HTTPServerError",
    "RequestError",
    "MalformedRequestError",
    "MissingHostError",
    "PrematureEndOfStreamError",
    "IdleTimeoutError",
    "ResolutionError",
    "WriteError",
    "UnsupportedStatusError",

    # Headers
    "Headers",
    "FrozenHeaders",
    "canonical_header_key",

    # Status codes
    "HTTPStatus",
    "reason_phrase",

    # MIME types
    "get_mime_type",
    "get_content_type",
    "DEFAULT_MIME_TYPE",

    # Request parsing
    "Request",
    "RequestParser",
    "ParseResult",
    "parse_request",

    # Response building
    "HTTPResponse",
    "write_response",
    "ok",
    "bad_request",
    "not_found",
    "format_http_date",
]
