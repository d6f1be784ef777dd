"""
=============================================================================
STATIC FILE RESOLUTION
=============================================================================

Maps a request target onto the document root and reports what is there.

    Request: GET /docs/
                 │
    1. Ends in '/'? Append the index file    → /docs/index.html
    2. Join with the document root           → /srv/www/docs/index.html
    3. Normalize and check it stays inside   → (outside = not found)
    4. stat() it:
         regular file       → FILE (size, mtime)
         directory          → DIRECTORY
         missing            → NOT_FOUND
         anything else      → ResolutionError

=============================================================================
PATH TRAVERSAL
=============================================================================

    GET /../../etc/passwd

joined naively would escape the document root. We resolve the joined path
and require it to remain under the (resolved) root. A target that escapes
is reported as NOT_FOUND, since this server has no 403 to answer with.

=============================================================================
"""

import os
import stat
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from ..http.errors import ResolutionError


logger = logging.getLogger(__name__)


class ResolutionKind(Enum):
    """What a target turned out to be."""
    FILE = "file"
    DIRECTORY = "directory"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving one target.

    size and modified are only set for FILE.
    """

    kind: ResolutionKind
    path: Path
    size: Optional[int] = None
    modified: Optional[datetime] = None

    @property
    def is_file(self) -> bool:
        return self.kind is ResolutionKind.FILE


class StaticFileResolver:
    """
    Resolves request targets against a document root.

    Usage:
        resolver = StaticFileResolver("/srv/www")
        found = resolver.resolve("/index.html")
        if found.is_file:
            ...
    """

    def __init__(self, root_dir: Union[str, Path], index_file: str = "index.html"):
        # Resolve up front so the containment check compares like with like
        self.root_dir = Path(root_dir).resolve()
        self.index_file = index_file

    def resolve(self, target: str) -> Resolution:
        """
        Resolve a target to a file, a directory, or nothing.

        Args:
            target: Request target, starting with '/'.

        Returns:
            Resolution describing what exists at the target.

        Raises:
            ResolutionError: resolve() or stat() failed for a reason other
                than the path not existing (permissions, symlink loops,
                I/O errors).
        """
        if target.endswith("/"):
            target += self.index_file

        full_path = self.root_dir / target.lstrip("/")

        # ─────────────────────────────────────────────────────────────────
        # SECURITY: stay inside the document root
        # ─────────────────────────────────────────────────────────────────
        # resolve() raises ValueError on embedded NUL bytes, relative_to()
        # raises it when the path landed outside the root. A symlink loop
        # is RuntimeError before Python 3.13.
        try:
            full_path = full_path.resolve()
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Target rejected outside document root: {target!r}")
            return Resolution(ResolutionKind.NOT_FOUND, full_path)
        except (OSError, RuntimeError) as e:
            raise ResolutionError(f"Cannot resolve {full_path}: {e}") from e

        try:
            info = os.stat(full_path)
        except (FileNotFoundError, NotADirectoryError):
            return Resolution(ResolutionKind.NOT_FOUND, full_path)
        except OSError as e:
            raise ResolutionError(f"Cannot stat {full_path}: {e}") from e

        if stat.S_ISDIR(info.st_mode):
            return Resolution(ResolutionKind.DIRECTORY, full_path)

        return Resolution(
            kind=ResolutionKind.FILE,
            path=full_path,
            size=info.st_size,
            modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
        )
