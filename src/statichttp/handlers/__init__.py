"""
=============================================================================
HANDLERS PACKAGE
=============================================================================

Collaborators the connection handler delegates to.

1. StaticFileResolver
   - Maps request targets onto the document root
   - Appends the index file for targets ending in '/'
   - Reports FILE (with size and mtime), DIRECTORY or NOT_FOUND
   - Keeps targets from escaping the document root

=============================================================================
USAGE
=============================================================================

    from statichttp.handlers import StaticFileResolver

    resolver = StaticFileResolver("/var/www", index_file="index.html")
    found = resolver.resolve("/css/site.css")

=============================================================================
"""

from .static import Resolution, ResolutionKind, StaticFileResolver

__all__ = [
    "Resolution",
    "ResolutionKind",
    "StaticFileResolver",
]
