"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve the current directory on port 8080, all interfaces
    python -m statichttp

    # Explicit address and document root
    python -m statichttp --addr 127.0.0.1:8000 --doc-root ./public

    # Or host and port separately
    python -m statichttp --host 0.0.0.0 --port 3000 -d ./public

    # Shorter idle timeout, chattier logs
    python -m statichttp -d ./public --idle-timeout 2 --log-level DEBUG

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, parse_address


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statichttp",
        description="Minimal HTTP/1.1 static file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m statichttp                              # Serve . on :8080
  python -m statichttp --addr 127.0.0.1:8000 -d www # Explicit address
  python -m statichttp --port 3000 -d www           # Only change the port
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--addr", "-a",
        default=None,
        help="Listen address as host:port (default: :8080, all interfaces)",
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (overrides the host part of --addr)",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (overrides the port part of --addr)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # SERVING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--doc-root", "-d",
        default=".",
        help="Directory to serve files from (default: current directory)",
    )

    parser.add_argument(
        "--idle-timeout", "-t",
        type=float,
        default=5.0,
        help="Seconds to wait for a request before closing (default: 5)",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"statichttp {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """
    Translate parsed arguments into a ServerConfig.

    Raises:
        ValueError: If --addr is malformed.
    """
    host, port = parse_address(args.addr or ":8080")
    if args.host is not None:
        host = args.host
    if args.port is not None:
        port = args.port

    return ServerConfig(
        host=host,
        port=port,
        doc_root=args.doc_root,
        idle_timeout=args.idle_timeout,
        log_level=args.log_level,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, build the server and run it. Returns an exit code."""
    args = build_parser().parse_args(argv)

    try:
        server = HTTPServer(config_from_args(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
