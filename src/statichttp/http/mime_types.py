"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps file extensions to the value sent in the Content-Type header.

    ┌────────────────────────────────────────────────────────────────────┐
    │  .html  → text/html; charset=utf-8                                 │
    │  .png   → image/png                                                │
    │  .xyz   → application/octet-stream   (unknown: "just bytes")       │
    └────────────────────────────────────────────────────────────────────┘

Lookups take the extension INCLUDING the leading dot and are
case-insensitive (.PNG and .png are the same type).

=============================================================================
"""

from pathlib import Path
from typing import Union


# =============================================================================
# MIME TYPE DATABASE
# =============================================================================
#
# Keys are lowercase extensions with the dot. Text types carry a charset.
#
# =============================================================================

MIME_TYPES = {
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".mjs": "text/javascript; charset=utf-8",
    ".json": "application/json",
    ".xml": "text/xml; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
    ".csv": "text/csv; charset=utf-8",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".bmp": "image/bmp",

    # -------------------------------------------------------------------------
    # FONT TYPES
    # -------------------------------------------------------------------------
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # -------------------------------------------------------------------------
    # AUDIO / VIDEO TYPES
    # -------------------------------------------------------------------------
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",

    # -------------------------------------------------------------------------
    # DOCUMENT / ARCHIVE TYPES
    # -------------------------------------------------------------------------
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".wasm": "application/wasm",
}

# Default MIME type for unknown extensions
DEFAULT_MIME_TYPE = "application/octet-stream"


def get_mime_type(extension: str) -> str:
    """
    Get the MIME type for a file extension.

    Args:
        extension: Extension with its leading dot, e.g. ".html".
                   An empty string means "no extension".

    Returns:
        The MIME type, or application/octet-stream if unknown.

    Examples:
        >>> get_mime_type(".CSS")
        'text/css; charset=utf-8'
        >>> get_mime_type(".xyz")
        'application/octet-stream'
    """
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)


def get_content_type(path: Union[str, Path]) -> str:
    """Content-Type for a file path, derived from its final suffix."""
    return get_mime_type(Path(path).suffix)
