"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

The socket-facing half of the server:

    socket_server.py   Listening socket and accept loop
    connection.py      Wrapper around one accepted client socket
    line_reader.py     Buffered CRLF line reading over a connection
    handler.py         Per-connection state machine (IDLE → PARSING →
                       RESPONDING → IDLE | CLOSED)

One thread runs the accept loop; every accepted connection gets its own
thread running a ConnectionHandler. Handlers share nothing but the frozen
ServerConfig, so no locks are involved.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection
from .line_reader import LineReader
from .handler import ConnectionHandler, ConnectionState, Action, decide

__all__ = [
    "SocketServer",
    "Connection",
    "LineReader",
    "ConnectionHandler",
    "ConnectionState",
    "Action",
    "decide",
]
