"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the host program needs to know before it starts: where to
listen, what file to serve and how to log. The message layer itself takes
no configuration.

Values come from, in increasing priority:

    1. Defaults below
    2. Environment variables (ServerConfig.from_env)
    3. Command-line flags (__main__.py)

Configuration is validated once at startup. A bad value stops the server
before it binds a socket.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    Development:
        ServerConfig(port=8993, log_level="DEBUG")

    Tests:
        ServerConfig(port=0)   # Let the OS pick a free port
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """The IP address to bind to."""

    port: int = 8993
    """The port number to listen on. 0 lets the OS choose."""

    backlog: int = 128
    """Maximum number of queued connections."""

    buffer_size: int = 8192
    """Read buffer size of each connection in bytes."""

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds for reading a request head and writing the
    response. None = blocking (one slow client stalls the server!)
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    max_head_size: int = 64 * 1024
    """Maximum size of a request head (start line + headers) in bytes."""

    max_uri_length: int = 2048
    """Longer request targets are answered with 414 URI Too Long."""

    protocol: str = "HTTP/1.1"
    """Protocol written in the status line of every response."""

    server_name: str = "minihttp/0.1"
    """Value of the Server header."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    body_file: str = "hello.html"
    """File whose content is sent as the body of every response."""

    fallback_body: str = "<p>Error while reading the file!</p>"
    """Body sent when body_file cannot be read."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """'text' for timestamped lines, 'json' for one JSON object per line."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 8993)
        HTTP_TIMEOUT     Socket timeout in seconds (default: 30)
        HTTP_BODY_FILE   File to serve (default: hello.html)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        HTTP_LOG_FORMAT  text or json (default: text)
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8993")),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            body_file=os.getenv("HTTP_BODY_FILE", "hello.html"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_head_size < 1:
            raise ValueError("max_head_size must be >= 1")

        if self.max_uri_length < 1:
            raise ValueError("max_uri_length must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format}. Use 'text' or 'json'.")
