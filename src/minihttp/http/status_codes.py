"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The closed set of status codes this server can answer with.

The status line of every response carries the numeric code followed by a
fixed reason phrase:

    HTTP/1.1 404 Not Found
             ─┬─ ────┬────
              │      │
            Code   Reason phrase (from _STATUS_PHRASES)

Reason phrases are static. A handler picks a member of HTTPStatus and the
serializer looks up the phrase; there is no way to send a custom phrase.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Extends IntEnum, so members compare equal to their numeric code:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200                # Request succeeded
    BAD_REQUEST = 400       # Malformed start line or header line
    NOT_FOUND = 404         # Resource doesn't exist
    URI_TOO_LONG = 414      # Request target longer than the server accepts

    # Placeholder, never sent by the bundled handlers
    NOT_IMPLEMENTED = 0

    @property
    def phrase(self) -> str:
        """Get the reason phrase for this status code."""
        return _STATUS_PHRASES[self]

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.URI_TOO_LONG: "URI Too Long",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
