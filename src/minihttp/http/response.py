"""
=============================================================================
HTTP RESPONSE SERIALIZER
=============================================================================

Builds HTTP/1.1 responses and renders them to wire bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─ STATUS LINE ───────────────────────────────────────────────────────┐
    │    HTTP/1.1 200 OK\\r\\n                                              │
    │    ────┬─── ─┬─ ─┬─                                                 │
    │    Protocol Code Phrase                                             │
    └─────────────────────────────────────────────────────────────────────┘
    ┌─ HEADERS ───────────────────────────────────────────────────────────┐
    │    server: minihttp/0.1\\r\\n        ← response.headers, in order     │
    │    content-length: 2                ← always computed, always last  │
    └─────────────────────────────────────────────────────────────────────┘
    ┌─ EMPTY LINE ────────────────────────────────────────────────────────┐
    │    \\r\\n\\r\\n                         ← ends last header + blank line  │
    └─────────────────────────────────────────────────────────────────────┘
    ┌─ BODY ──────────────────────────────────────────────────────────────┐
    │    hi                                                               │
    └─────────────────────────────────────────────────────────────────────┘

Exact format:

    "{protocol} {code} {phrase}\\r\\n{headers joined by \\r\\n}\\r\\n\\r\\n{body}"

Content-Length is never stored on the response. It is computed from the
UTF-8 length of the body every time the response is serialized, so it
always matches what is sent. The whole body is in memory; there is no
chunked or streamed output.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .headers import CONTENT_LENGTH, HeaderKey, HeaderMap, PredefinedName
from .status_codes import HTTPStatus


CRLF = "\r\n"


@dataclass(frozen=True)
class HTTPResponse:
    """
    An HTTP response ready to be sent to the client.

    Immutable once built, but not hashable (the headers are a HeaderMap).
    Use ResponseBuilder for a more convenient way to construct one.

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: str = ""
    protocol: str = "HTTP/1.1"

    __hash__ = None

    @property
    def status_line(self) -> str:
        """
        Get the status line, e.g. "HTTP/1.1 200 OK".

        Format: PROTOCOL SP STATUS-CODE SP REASON-PHRASE
        """
        return f"{self.protocol} {int(self.status)} {self.status.phrase}"

    @property
    def content_length(self) -> int:
        """Length of the encoded body in bytes."""
        return len(self.body.encode("utf-8"))

    def to_bytes(self) -> bytes:
        """
        Serialize the response for sending over a socket.

        Steps:
            1. Compute Content-Length from the encoded body
            2. Put it in a one-entry HeaderMap
            3. Format the status line
            4. Merge response headers and the computed header, CRLF separated
            5. status line + CRLF + headers + CRLF CRLF + body

        The response itself is never modified, so serializing twice gives
        identical bytes.
        """
        computed = HeaderMap()
        computed.insert(PredefinedName.CONTENT_LENGTH, self.content_length)

        header_block = HeaderMap.format_merged(CRLF, self.headers, computed)

        message = self.status_line + CRLF + header_block + CRLF + CRLF + self.body
        return message.encode("utf-8")

    def declares_content_length(self) -> bool:
        """True when the caller put its own Content-Length in ``headers``."""
        return CONTENT_LENGTH in self.headers


def serialize_response(response: HTTPResponse) -> bytes:
    """Render ``response`` to wire bytes. Same as response.to_bytes()."""
    return response.to_bytes()


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .header("X-Reason", "missing")
            .text("Nothing here")
            .build())

    Each method returns ``self`` except build(). Every built response gets
    its own copy of the headers, so the builder can be reused.
    """

    def __init__(self, protocol: str = "HTTP/1.1"):
        self._status = HTTPStatus.OK
        self._headers = HeaderMap()
        self._body = ""
        self._protocol = protocol

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def protocol(self, protocol: str) -> "ResponseBuilder":
        self._protocol = protocol
        return self

    def header(self, name: HeaderKey, value: object) -> "ResponseBuilder":
        """
        Add a single response header.

        A Content-Length set here is sent in addition to the computed one.
        """
        self._headers.insert(name, value)
        return self

    def headers(self, headers: Union[HeaderMap, Dict[HeaderKey, object]]) -> "ResponseBuilder":
        """Add multiple headers at once."""
        for name, value in headers.items():
            self._headers.insert(name, value)
        return self

    def body(self, body: str) -> "ResponseBuilder":
        self._body = body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """Set a plain text body and its Content-Type."""
        self._body = text
        self._headers.insert(PredefinedName.CONTENT_TYPE, "text/plain; charset=utf-8")
        return self

    def html(self, html: str) -> "ResponseBuilder":
        """Set an HTML body and its Content-Type."""
        self._body = html
        self._headers.insert(PredefinedName.CONTENT_TYPE, "text/html; charset=utf-8")
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers.copy(),
            body=self._body,
            protocol=self._protocol,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the server sends most:
#
#     return ok(html)
#     return bad_request("Invalid start line")
#
# =============================================================================

def ok(body: str = "", protocol: str = "HTTP/1.1") -> HTTPResponse:
    """Create a 200 OK response with an HTML body."""
    return ResponseBuilder(protocol).status(HTTPStatus.OK).html(body).build()


def bad_request(message: str = "Bad Request", protocol: str = "HTTP/1.1") -> HTTPResponse:
    """Create a 400 Bad Request response with a plain text message."""
    return ResponseBuilder(protocol).status(HTTPStatus.BAD_REQUEST).text(message).build()


def not_found(message: str = "Not Found", protocol: str = "HTTP/1.1") -> HTTPResponse:
    """Create a 404 Not Found response with a plain text message."""
    return ResponseBuilder(protocol).status(HTTPStatus.NOT_FOUND).text(message).build()


def uri_too_long(message: str = "URI Too Long", protocol: str = "HTTP/1.1") -> HTTPResponse:
    """Create a 414 URI Too Long response with a plain text message."""
    return ResponseBuilder(protocol).status(HTTPStatus.URI_TOO_LONG).text(message).build()
