"""
=============================================================================
HTTP SERVER
=============================================================================

The host program: wires the transport, the message layer and a handler
together.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    One connection, start to finish                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   SocketServer.accept()                                             │
    │        │                                                            │
    │        ▼                                                            │
    │   conn.read_head()          TransportError ──► log, close           │
    │        │                                                            │
    │        ▼                                                            │
    │   parser.assemble(lines)    EmptyRequest   ──► close silently       │
    │        │                    HTTPParseError ──► 400 Bad Request      │
    │        ▼                                                            │
    │   handler(request)          exception      ──► log, close           │
    │        │                    not a response ──► log, close           │
    │        ▼                                                            │
    │   response.to_bytes()       exception      ──► log, close           │
    │        │                                                            │
    │        ▼                                                            │
    │   conn.send_response(data)                                          │
    │        │                    TransportError ──► log                  │
    │        ▼                                                            │
    │   conn.close()                                                      │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Connections are handled one at a time and closed after a single response.
A failure on one connection is logged and never stops the server.

=============================================================================
"""

import logging
from typing import Callable, Optional, Tuple

from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer, TransportError
from .handlers import StaticBodyHandler
from .http import (
    EmptyRequest,
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    RequestParser,
    bad_request,
)


logger = logging.getLogger(__name__)

Handler = Callable[[HTTPRequest], HTTPResponse]


class HTTPServer:
    """
    Minimal HTTP/1.1 server.

    Usage:
        # Serve hello.html on 127.0.0.1:8993
        HTTPServer().run()

        # Custom handler
        def handler(request):
            return ok(f"<p>You asked for {request.uri}</p>")

        HTTPServer(ServerConfig(port=8080), handler=handler).run()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        handler: Optional[Handler] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Args:
            config: Server configuration. Defaults are used if not provided.
            handler: Request handler. Defaults to a StaticBodyHandler built
                     from the config.
            log: Logger for request and error messages.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.handler = handler or StaticBodyHandler(
            body_file=self.config.body_file,
            fallback_body=self.config.fallback_body,
            max_uri_length=self.config.max_uri_length,
            protocol=self.config.protocol,
            server_name=self.config.server_name,
        )
        self.log = log or logger

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self):
        """Serve connections until shutdown() or Ctrl+C (blocking)."""
        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            self.log.info("Received keyboard interrupt")
        self.log.info("Server stopped")

    def shutdown(self):
        """Ask the accept loop to stop. Returns immediately."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        with conn:
            try:
                lines = conn.read_head()
            except TransportError as e:
                self.log.warning(f"[{conn.id}] {e}")
                return

            response = self._respond(conn, lines)
            if response is None:
                return

            try:
                data = response.to_bytes()
            except Exception:
                self.log.exception(f"[{conn.id}] Could not serialize response")
                return

            try:
                conn.send_response(data)
            except TransportError as e:
                self.log.warning(f"[{conn.id}] {e}")

    def _respond(self, conn: Connection, lines) -> Optional[HTTPResponse]:
        """
        Turn head lines into the response to send.

        Returns None when nothing should be sent back.
        """
        try:
            request = self._parser.assemble(lines)
        except EmptyRequest:
            self.log.debug(f"[{conn.id}] Client sent no request")
            return None
        except HTTPParseError as e:
            self.log.info(f"[{conn.id}] Rejected request from {conn.client_ip}: {e}")
            return bad_request(e.message, protocol=self.config.protocol)

        self.log.info(f"[{conn.id}] {request.method.value} {request.uri}")
        conn.state = ConnectionState.PROCESSING

        try:
            response = self.handler(request)
        except Exception:
            self.log.exception(f"[{conn.id}] Handler error")
            return None

        if not isinstance(response, HTTPResponse):
            self.log.error(
                f"[{conn.id}] Handler returned {type(response).__name__}, not HTTPResponse"
            )
            return None

        if response.declares_content_length():
            self.log.warning(
                f"[{conn.id}] Handler set its own Content-Length; "
                f"the response will carry two content-length headers"
            )
        return response
