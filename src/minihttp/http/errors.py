"""
Parse errors raised by the message layer.

Every error here is local and recoverable: it describes one malformed
message, never a broken server. The caller decides what to answer with;
``status_code`` is only a hint (400 for everything the parser rejects).

    HTTPParseError
    ├── MalformedHeaderLine   header line without a colon
    ├── InvalidStartLine      first line is not "METHOD /path PROTOCOL"
    └── EmptyRequest          no lines at all

Unknown methods and unknown header names are NOT errors. Only structural
violations of the two line grammars are.
"""


class HTTPParseError(Exception):
    """
    Raised when an HTTP request head cannot be parsed.

    Carries the HTTP status code a server should reply with.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code  # HTTP status to return


class MalformedHeaderLine(HTTPParseError):
    """A header line has no colon separating name and value."""

    def __init__(self, line: str):
        super().__init__(f"Malformed header line (no colon): {line!r}")
        self.line = line


class InvalidStartLine(HTTPParseError):
    """The start line does not match the origin-form request-line grammar."""

    def __init__(self, line: str, reason: str = "does not match the origin form"):
        super().__init__(f"Invalid start line {line!r}: {reason}")
        self.line = line


class EmptyRequest(HTTPParseError):
    """The request head contained no lines."""

    def __init__(self):
        super().__init__("Empty request head")
