"""
Transport layer: the TCP accept loop and per-connection I/O.

The message layer (minihttp.http) never touches a socket. This package
turns bytes from the network into head lines and response bytes back into
network writes.

    SocketServer ──accept──► Connection ──read_head()──► [lines]
                                  ▲
                                  └──────send_response()── bytes
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, TransportError

__all__ = [
    "SocketServer",     # Accepts connections, one at a time
    "Connection",       # Reads the request head, writes the response
    "ConnectionState",  # Connection lifecycle states
    "TransportError",   # Any socket-level failure
]
