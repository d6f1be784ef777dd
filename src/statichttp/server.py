"""
=============================================================================
STATIC FILE HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌──────────────┐  Connection  ┌───────────────────────────────────────┐
    │ SocketServer │ ───────────► │ thread: ConnectionHandler(conn).run() │
    │ accept loop  │              │   IDLE → PARSING → RESPONDING → ...   │
    └──────────────┘              └───────────────────────────────────────┘
           ▲                                        │
           │ ServerConfig (frozen, shared)          │ StaticFileResolver
           └────────────────────────────────────────┘

=============================================================================
THREADING MODEL
=============================================================================

One thread per connection. The accept loop only accepts and spawns, so a
slow client never delays anyone else's accept. Handler threads are
daemons: they end when their connection closes, or with the process.

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import Connection, ConnectionHandler, SocketServer
from .handlers import StaticFileResolver


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    HTTP/1.1 static file server.

    =========================================================================
    USAGE
    =========================================================================

        config = ServerConfig.from_address(":8080", "./www")
        server = HTTPServer(config)
        server.run()        # Blocks until Ctrl+C / SIGTERM / shutdown()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Validated here, before any socket
                    exists, so a missing document root fails immediately.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._resolver = StaticFileResolver(self.config.doc_root, self.config.index_file)

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    @property
    def server_address(self) -> Tuple[str, int]:
        """Actual bound (host, port); see SocketServer.server_address."""
        return self._socket_server.server_address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, configure_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            configure_logging: Set up root logging from config.log_level.
                               Pass False when embedding in an application
                               that configures logging itself.
        """
        if configure_logging:
            self._setup_logging()

        logger.info(f"Serving {self.config.doc_root} on {self.config.address}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is up. Returns False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def shutdown(self):
        """Stop accepting connections. Open connections finish on their own."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("statichttp").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Spawn a handler thread for a freshly accepted connection."""
        thread = threading.Thread(
            target=self._process_connection,
            args=(conn,),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        thread.start()

    def _process_connection(self, conn: Connection):
        """Runs on the connection's own thread."""
        ConnectionHandler(conn, self.config, resolver=self._resolver).run()


def serve(address: str, doc_root: str, **kwargs) -> None:
    """
    Serve doc_root on a "host:port" address until interrupted.

    Args:
        address: Listen address, e.g. ":8080" or "127.0.0.1:8000".
        doc_root: Existing directory to serve files from.
        **kwargs: Further ServerConfig fields (idle_timeout, log_level, ...).

    Raises:
        ValueError: If the address is malformed or doc_root is not an
                    existing directory. Nothing is bound in that case.
    """
    HTTPServer(ServerConfig.from_address(address, doc_root, **kwargs)).run()
