"""
=============================================================================
MINIHTTP - A MINIMAL HTTP/1.1 SERVER
=============================================================================

Turns raw text received from a socket into a typed request, and a typed
response back into wire bytes.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           minihttp                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   server.py        HTTPServer: transport + parser + handler         │
    │   config.py        ServerConfig: defaults, env vars, validation     │
    │   log.py           Timestamped / JSON log formatting                │
    │                                                                     │
    │   core/            TRANSPORT                                        │
    │     socket_server    accept loop, one connection at a time          │
    │     connection       read head lines, write response bytes          │
    │                                                                     │
    │   http/            MESSAGE LAYER (pure, no I/O)                     │
    │     headers          HeaderName, HeaderMap, header-line parser      │
    │     request          start-line parser, request assembler           │
    │     response         response serializer, builder                   │
    │     status_codes     HTTPStatus                                     │
    │     errors           HTTPParseError and friends                     │
    │                                                                     │
    │   handlers/        StaticBodyHandler                                │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Not supported: keep-alive, chunked transfer encoding, request bodies,
query-string parsing, HTTP/2, TLS, concurrent workers.

=============================================================================
QUICK START
=============================================================================

    python -m minihttp --port 8993 --body-file hello.html

    # or from Python
    from minihttp import HTTPServer, ServerConfig
    HTTPServer(ServerConfig(port=8993)).run()

=============================================================================
"""

__version__ = "0.1.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
