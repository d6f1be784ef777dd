"""
=============================================================================
STATICHTTP - Minimal HTTP/1.1 Static File Server
=============================================================================

Serves files from a document root over raw TCP sockets, speaking a strict
subset of HTTP/1.1:

    - GET only, HTTP/1.1 only, Host header required
    - Persistent connections (Connection: close ends them)
    - Idle read timeout between requests
    - Exactly three answers: 200 OK, 400 Bad Request, 404 Not Found
    - Response headers always written in sorted order

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    statichttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m statichttp)
    ├── server.py            # HTTPServer class, serve()
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets and the connection state machine
    │   ├── socket_server.py
    │   ├── connection.py
    │   ├── line_reader.py
    │   └── handler.py
    ├── http/                # HTTP message handling
    │   ├── request.py
    │   ├── response.py
    │   ├── headers.py
    │   ├── status_codes.py
    │   ├── mime_types.py
    │   └── errors.py
    └── handlers/
        └── static.py        # Target → file resolution

=============================================================================
QUICK START
=============================================================================

    from statichttp import serve
    serve(":8080", "./public")

    # or, with more control
    from statichttp import HTTPServer, ServerConfig
    server = HTTPServer(ServerConfig(port=8080, doc_root="./public"))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, serve
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "serve", "__version__"]
