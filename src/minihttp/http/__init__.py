"""
=============================================================================
HTTP MESSAGE LAYER
=============================================================================

Pure message model: no sockets, no files, no logging.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ INBOUND                                                             │
    │   head lines ──► RequestParser ──► HTTPRequest(method, uri, headers)│
    │                  (request.py)                                       │
    │                       │                                             │
    │                       └──► parse_header_line ──► HeaderMap          │
    │                            (headers.py)                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │ OUTBOUND                                                            │
    │   HTTPResponse ──► to_bytes() ──► bytes for the transport           │
    │   (response.py)    headers + computed content-length                │
    └─────────────────────────────────────────────────────────────────────┘

Everything here is a pure function of its inputs and safe to call from
any number of threads.

=============================================================================
"""

from .errors import (
    HTTPParseError,
    MalformedHeaderLine,
    InvalidStartLine,
    EmptyRequest,
)
from .headers import (
    PredefinedName,
    HeaderKind,
    HeaderName,
    HeaderMap,
    CONTENT_LENGTH,
    parse_header_line,
)
from .request import (
    Method,
    HTTPRequest,
    RequestParser,
    parse_start_line,
    assemble_request,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    serialize_response,
    ok,             # 200 OK
    bad_request,    # 400 Bad Request
    not_found,      # 404 Not Found
    uri_too_long,   # 414 URI Too Long
)
from .status_codes import HTTPStatus

__all__ = [
    # Errors
    "HTTPParseError",
    "MalformedHeaderLine",
    "InvalidStartLine",
    "EmptyRequest",

    # Headers
    "PredefinedName",
    "HeaderKind",
    "HeaderName",
    "HeaderMap",
    "CONTENT_LENGTH",
    "parse_header_line",

    # Request parsing
    "Method",
    "HTTPRequest",
    "RequestParser",
    "parse_start_line",
    "assemble_request",

    # Response serialization
    "HTTPResponse",
    "ResponseBuilder",
    "serialize_response",
    "ok",
    "bad_request",
    "not_found",
    "uri_too_long",

    # Status codes
    "HTTPStatus",
]
