"""
=============================================================================
HTTP STATUS CODES
=============================================================================

This server only ever answers with three status lines:

    ┌────────┬─────────────────┬──────────────────────────────────────────┐
    │  Code  │ Reason phrase   │ When                                     │
    ├────────┼─────────────────┼──────────────────────────────────────────┤
    │  200   │ OK              │ Target resolved to a regular file        │
    │  400   │ Bad Request     │ Malformed, truncated or Host-less request│
    │  404   │ Not Found       │ Target missing, or a directory           │
    └────────┴─────────────────┴──────────────────────────────────────────┘

The set is CLOSED. Asking for the phrase of any other code raises
UnsupportedStatusError instead of inventing a default, so a programming
error surfaces immediately rather than as a garbled status line.

=============================================================================
"""

from enum import IntEnum

from .errors import UnsupportedStatusError


class HTTPStatus(IntEnum):
    """
    Supported status codes.

    IntEnum, so members compare equal to plain ints:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """Reason phrase used in the status line."""
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
}


def reason_phrase(status: int) -> str:
    """
    Look up the reason phrase for a status code.

    Raises:
        UnsupportedStatusError: If the code is outside the supported set.
    """
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        raise UnsupportedStatusError(status) from None
