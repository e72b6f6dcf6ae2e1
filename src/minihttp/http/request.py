"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the lines of a request head into a typed HTTPRequest.

The transport hands over the head as a list of text lines with the line
terminators already stripped, ending before the blank line. Nothing after
the blank line (the body) is ever read or interpreted here.

=============================================================================
REQUEST HEAD ANATOMY
=============================================================================

    ┌─ lines[0]: START LINE ──────────────────────────────────────────────┐
    │                                                                     │
    │    GET /index.html?lang=en HTTP/1.1                                 │
    │    ─┬─ ─────────┬───────── ────┬───                                 │
    │     │           │              │                                    │
    │   Method       URI          Protocol                                │
    │   [A-Z]+    /\\S* (raw,       \\S+                                   │
    │             query kept)                                             │
    └─────────────────────────────────────────────────────────────────────┘
    ┌─ lines[1:]: HEADER LINES ───────────────────────────────────────────┐
    │                                                                     │
    │    Host: localhost:8993                                             │
    │    Referer: /home                                                   │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Only the origin form ("/path") is accepted as request target. Absolute
URIs ("http://host/path"), authority form and "*" are rejected.

=============================================================================
WHAT IS AN ERROR AND WHAT IS NOT
=============================================================================

    "PATCH /x HTTP/1.1"    →  (Method.UNKNOWN, "/x")      accepted
    "X-Unknown: 1"         →  CUSTOM("X-Unknown")         accepted
    "GET HTTP/1.1"         →  InvalidStartLine            rejected
    "get / HTTP/1.1"       →  InvalidStartLine            rejected
    "no-colon-here"        →  MalformedHeaderLine         rejected
    []                     →  EmptyRequest                rejected

Unsupported-but-well-formed input is accepted. Deciding how to answer an
UNKNOWN method is the handler's job.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, Tuple
import re

from .errors import EmptyRequest, InvalidStartLine
from .headers import HeaderMap, parse_header_line


class Method(Enum):
    """HTTP request methods the server knows about."""

    GET = "GET"
    POST = "POST"
    UNKNOWN = "UNKNOWN"  # Any other well-formed method token

    @classmethod
    def from_token(cls, token: str) -> "Method":
        """Map a method token to a Method, UNKNOWN when unrecognized."""
        return _METHODS_BY_TOKEN.get(token, cls.UNKNOWN)


_METHODS_BY_TOKEN = {
    "GET": Method.GET,
    "POST": Method.POST,
}


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed request head.

    Built once by RequestParser.assemble() and never modified. Not
    hashable: the headers are a mutable HeaderMap.

        HTTPRequest(
            method=Method.GET,
            uri="/index.html",        # raw target, query string included
            headers=HeaderMap(...),
        )
    """

    method: Method
    uri: str
    headers: HeaderMap = field(default_factory=HeaderMap)

    __hash__ = None


class RequestParser:
    """
    Parses request-head lines into HTTPRequest objects.

    The parser holds no state between calls; one instance can be shared by
    any number of threads.

        Lines
          │
          ▼
        ┌───────────────────────────────────────────────────────────┐
        │  1. No lines?          → EmptyRequest                     │
        │  2. parse_start_line(lines[0])                            │
        │        no match?       → InvalidStartLine                 │
        │  3. parse_headers(lines[1:])                              │
        │        line w/o colon? → MalformedHeaderLine (first one)  │
        │  4. HTTPRequest(method, uri, headers)                     │
        └───────────────────────────────────────────────────────────┘
    """

    # Origin-form request line: METHOD SP /path SP PROTOCOL
    START_LINE_PATTERN = re.compile(
        r"^(?P<method>[A-Z]+) (?P<uri>/\S*) (?P<protocol>\S+)$"
    )

    def parse_start_line(self, line: str) -> Tuple[Method, str]:
        """
        Parse the request start line.

        Args:
            line: The first line of the head, e.g. "GET /index.html HTTP/1.1"

        Returns:
            Tuple of (method, uri). The URI is returned as received, any
            "?query" suffix included.

        Raises:
            InvalidStartLine: If the line does not match the origin form.
        """
        match = self.START_LINE_PATTERN.fullmatch(line)
        if match is None:
            raise InvalidStartLine(line)

        method = match.group("method")
        uri = match.group("uri")
        protocol = match.group("protocol")
        if method is None or uri is None or protocol is None:
            raise InvalidStartLine(line, "one of method, uri or protocol is missing")

        return Method.from_token(method), uri

    def parse_headers(self, lines: Sequence[str]) -> HeaderMap:
        """
        Parse header lines into a HeaderMap.

        Lines are parsed in order and the first malformed one aborts the
        whole head. A repeated header name keeps its last value.
        """
        return HeaderMap.from_entries(parse_header_line(line) for line in lines)

    def assemble(self, lines: Sequence[str]) -> HTTPRequest:
        """
        Build an HTTPRequest from the lines of a request head.

        Raises:
            EmptyRequest: If ``lines`` is empty.
            InvalidStartLine: If the first line is malformed.
            MalformedHeaderLine: If any header line is malformed.
        """
        if not lines:
            raise EmptyRequest()

        method, uri = self.parse_start_line(lines[0])
        headers = self.parse_headers(lines[1:])
        return HTTPRequest(method=method, uri=uri, headers=headers)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_default_parser = RequestParser()


def parse_start_line(line: str) -> Tuple[Method, str]:
    """Parse a request start line with the default parser."""
    return _default_parser.parse_start_line(line)


def assemble_request(lines: Sequence[str]) -> HTTPRequest:
    """Assemble an HTTPRequest from head lines with the default parser."""
    return _default_parser.assemble(lines)
