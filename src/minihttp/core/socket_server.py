"""
=============================================================================
SOCKET SERVER
=============================================================================

The accept loop. Binds a TCP socket, accepts clients one after another
and hands each one to a callback. The next client is only accepted once
the callback returns, so the server handles exactly one connection at a
time.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │    start(handler)                                                   │
    │        ├──► _create_socket()   socket(), SO_REUSEADDR, TCP_NODELAY  │
    │        ├──► bind(), listen()                                        │
    │        ├──► _setup_signals()   SIGTERM/SIGINT → shutdown()          │
    │        └──► _accept_loop()     blocks here                          │
    │                 while running:                                      │
    │                     accept()          (1 s timeout)                 │
    │                     Connection(...)                                 │
    │                     handler(conn)     one at a time                 │
    │                                                                     │
    │    shutdown()       running = False, loop exits within ~1 s         │
    │    _cleanup()       restore signal handlers, close socket           │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            with conn:
                lines = conn.read_head()
                ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        # Created in start()
        self._socket: Optional[socket.socket] = None
        self._bound_address: Optional[Tuple[str, int]] = None

        self._running = False

        # Set once the socket is listening / once the loop has stopped
        self._ready_event = threading.Event()
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The (ip, port) the server listens on.

        With port 0 in the config this is the port the OS picked, once the
        server is listening.
        """
        if self._bound_address is not None:
            return self._bound_address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoid "Address already in use" when restarting
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Responses are written in one sendall(); send them right away
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up every second to check the running flag
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """
        Install SIGTERM/SIGINT handlers that trigger a graceful shutdown.

        Python only allows this from the main thread; when the server runs
        in a worker thread (tests, embedding) the caller must use
        shutdown() instead.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Start accepting connections. Blocks until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. The
                                next connection is accepted once it returns.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        host, port = self.address
        logger.info(f"Listening on {host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Normal: lets us re-check self._running
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                max_head_size=self.config.max_head_size,
            )
            try:
                connection_handler(conn)
            except Exception:
                logger.exception(f"[{conn.id}] Unhandled error, dropping connection")
                conn.close()

    def shutdown(self):
        """Stop the accept loop. Safe to call from any thread, any number of times."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        self._shutdown_event.set()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until the server is listening. Returns False on timeout."""
        return self._ready_event.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Wait until the accept loop has stopped. Returns False on timeout."""
        return self._shutdown_event.wait(timeout)
