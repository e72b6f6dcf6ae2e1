"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps an accepted client socket and implements the two transport
boundaries of the message layer:

    INBOUND:   read_head()      → ["GET / HTTP/1.1", "Host: x", ...]
    OUTBOUND:  send_response()  ← b"HTTP/1.1 200 OK\\r\\n..."

read_head() reads line by line until the blank line that ends the head
(or until the client stops sending) and returns the lines with their
terminators stripped. The blank line itself is consumed here and never
reaches the parser. Anything after it is left unread: request bodies are
not supported.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    read_head() Flow                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   while True:                                                       │
    │       line = next line from buffer (recv() more when needed)        │
    │       EOF?          → stop                                          │
    │       empty line?   → stop (end of head)                            │
    │       head too big? → TransportError                                │
    │       lines.append(line)                                            │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Every socket failure (timeout, reset, undecodable bytes) becomes a
TransportError, so the server never has to know about socket exceptions.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional
import uuid


logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Reading the request head or writing the response failed."""


class ConnectionState(Enum):
    """Connection lifecycle states, mostly useful in logs."""
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Reading the request head
    PROCESSING = "processing"  # Head parsed, handler is running
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents one client connection.

    One request is read and one response written per connection; there is
    no keep-alive.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192
    timeout: Optional[float] = 30.0
    max_head_size: int = 64 * 1024
    drain_timeout: float = 0.5   # Total time close() spends draining
    drain_limit: int = 64 * 1024  # Bytes close() drains at most

    _buffer: bytes = field(default=b"", repr=False)
    _head_bytes: int = field(default=0, repr=False)

    def __post_init__(self):
        # Accepted sockets may inherit the listening socket's accept timeout
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_head(self) -> List[str]:
        """
        Read the request head.

        Returns:
            The head lines without terminators, up to (not including) the
            first empty line. An empty list when the client closed the
            connection without sending anything.

        Raises:
            TransportError: On timeout, socket error, undecodable bytes or
                a head larger than ``max_head_size``.
        """
        self.state = ConnectionState.READING
        lines: List[str] = []

        try:
            while True:
                line = self._read_line()
                if line is None or line == "":
                    break
                lines.append(line)
        except socket.timeout as e:
            raise TransportError("Timed out reading request head") from e
        except UnicodeDecodeError as e:
            raise TransportError(f"Request head is not valid UTF-8: {e}") from e
        except OSError as e:
            raise TransportError(f"Failed to read request head: {e}") from e

        return lines

    def _read_line(self) -> Optional[str]:
        """
        Return the next line from the socket, or None at EOF.

        Accepts both CRLF and bare LF terminators. A final unterminated
        line before EOF is returned as is.
        """
        while b"\n" not in self._buffer:
            if self._head_bytes + len(self._buffer) > self.max_head_size:
                raise TransportError(f"Request head exceeds {self.max_head_size} bytes")

            chunk = self.socket.recv(self.buffer_size)
            if not chunk:
                if not self._buffer:
                    return None
                raw, self._buffer = self._buffer, b""
                self._head_bytes += len(raw)
                return raw.rstrip(b"\r").decode("utf-8")
            self._buffer += chunk

        raw, _, self._buffer = self._buffer.partition(b"\n")
        self._head_bytes += len(raw) + 1
        if self._head_bytes > self.max_head_size:
            raise TransportError(f"Request head exceeds {self.max_head_size} bytes")
        return raw.rstrip(b"\r").decode("utf-8")

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> None:
        """
        Send a complete response.

        Uses sendall() so the whole buffer goes out or an error is raised.

        Raises:
            TransportError: If the client went away or the write timed out.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
        except OSError as e:
            raise TransportError(f"Failed to send response: {e}") from e

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR) sends FIN so the client sees the end of the
           response
        2. Drain what the client still sends (e.g. an ignored body), for at
           most drain_timeout seconds in total and drain_limit bytes
        3. close() releases the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Client already disconnected

        deadline = time.monotonic() + self.drain_timeout
        drained = 0
        try:
            while drained < self.drain_limit:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(1024)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # Includes socket.timeout

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
