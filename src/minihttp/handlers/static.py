"""
=============================================================================
STATIC BODY HANDLER
=============================================================================

The default request handler: answers every request with the content of a
single file.

    request ──► URI too long?  ──yes──► 414 URI Too Long
                    │
                    no
                    ▼
                path allowed?  ──no───► 404 Not Found      (only if paths set)
                    │
                    yes
                    ▼
                read body_file ──fails─► fallback_body
                    │
                    ▼
                200 OK + Server header

The file is read again for every request, so edits show up without a
restart.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..http.headers import PredefinedName
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder, not_found, uri_too_long
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class StaticBodyHandler:
    """
    Serves one file as the body of every response.

    Usage:
        handler = StaticBodyHandler("hello.html")
        response = handler(request)
    """

    def __init__(
        self,
        body_file: str,
        fallback_body: str = "<p>Error while reading the file!</p>",
        max_uri_length: int = 2048,
        protocol: str = "HTTP/1.1",
        server_name: Optional[str] = None,
        paths: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            body_file: File whose content becomes the response body.
            fallback_body: Body used when the file cannot be read.
            max_uri_length: Longer request targets get 414.
            protocol: Protocol for the status line.
            server_name: Value of the Server header (omitted if None).
            paths: If given, only these paths are served (query string
                   ignored); anything else gets 404.
        """
        self.body_file = Path(body_file)
        self.fallback_body = fallback_body
        self.max_uri_length = max_uri_length
        self.protocol = protocol
        self.server_name = server_name
        self.paths = set(paths) if paths is not None else None

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle(request)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        if len(request.uri) > self.max_uri_length:
            return uri_too_long(protocol=self.protocol)

        if self.paths is not None:
            path = request.uri.split("?", 1)[0]
            if path not in self.paths:
                return not_found(f"Not Found: {path}", protocol=self.protocol)

        builder = (ResponseBuilder(self.protocol)
            .status(HTTPStatus.OK)
            .html(self.read_body()))
        if self.server_name:
            builder.header(PredefinedName.SERVER, self.server_name)
        return builder.build()

    def read_body(self) -> str:
        """Read body_file, or return fallback_body if it can't be read."""
        try:
            return self.body_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {self.body_file}: {e}")
            return self.fallback_body
