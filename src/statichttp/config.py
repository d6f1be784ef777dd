"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

One immutable configuration object, built once at startup and handed to
the server and to every connection handler.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m statichttp --addr :8080 --doc-root ./www         │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_ADDRESS=:8080 HTTP_DOC_ROOT=./www                     │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The dataclass is frozen: handlers run on many threads at once and all of
them read this object, so nothing may change it after startup.

=============================================================================
"""

import os
import logging
from dataclasses import dataclass
from typing import Tuple


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split a "host:port" listen address.

    An empty host means all interfaces:

        >>> parse_address("127.0.0.1:8080")
        ('127.0.0.1', 8080)
        >>> parse_address(":0")
        ('', 0)

    Raises:
        ValueError: If there is no ':' or the port is not an integer.
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"Invalid address {address!r}: expected host:port")
    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"Invalid port in address {address!r}") from None


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the static file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size

    HTTP SETTINGS
    - idle_timeout, max_line_length

    STATIC FILES
    - doc_root, index_file

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = ""
    """Interface to bind. "" = all interfaces."""

    port: int = 8080
    """Port to listen on. 0 lets the OS pick a free port."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 8192
    """Bytes requested per recv() call."""

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    idle_timeout: float = 5.0
    """
    Seconds a connection may wait for a complete request line or header
    line. Re-armed before every request on a persistent connection.
    """

    max_line_length: int = 8192
    """Longest request or header line accepted, in bytes."""

    # ─────────────────────────────────────────────────────────────────────
    # STATIC FILES
    # ─────────────────────────────────────────────────────────────────────

    doc_root: str = "."
    """Directory all request targets are resolved against."""

    index_file: str = "index.html"
    """Appended to targets ending in '/'."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    @property
    def address(self) -> str:
        """Listen address as "host:port"."""
        return f"{self.host}:{self.port}"

    @property
    def log_level_value(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_address(cls, address: str, doc_root: str, **kwargs) -> "ServerConfig":
        """
        Build a config from a "host:port" string and a document root.

        Example:
            config = ServerConfig.from_address(":8080", "./www", idle_timeout=2.0)
        """
        host, port = parse_address(address)
        return cls(host=host, port=port, doc_root=doc_root, **kwargs)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_ADDRESS       Listen address (default: :8080)
        HTTP_DOC_ROOT      Document root (default: .)
        HTTP_IDLE_TIMEOUT  Idle read timeout in seconds (default: 5)
        HTTP_LOG_LEVEL     Logging level (default: INFO)

        =====================================================================
        """
        return cls.from_address(
            os.getenv("HTTP_ADDRESS", ":8080"),
            os.getenv("HTTP_DOC_ROOT", "."),
            idle_timeout=float(os.getenv("HTTP_IDLE_TIMEOUT", "5")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called before the listening socket is bound, so a bad document
        root stops the server at startup rather than on the first request.

        Raises:
            ValueError: Describing the first invalid setting found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.idle_timeout <= 0:
            raise ValueError("idle_timeout must be > 0")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.max_line_length < 1:
            raise ValueError("max_line_length must be >= 1")

        if not self.index_file or "/" in self.index_file:
            raise ValueError(f"Invalid index_file: {self.index_file!r}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level!r}")

        if not os.path.exists(self.doc_root):
            raise ValueError(f"Document root does not exist: {self.doc_root}")

        if not os.path.isdir(self.doc_root):
            raise ValueError(f"Document root is not a directory: {self.doc_root}")
