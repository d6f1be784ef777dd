"""
=============================================================================
HTTP HEADER STORAGE
=============================================================================

Header names are case-insensitive on the wire:

    Content-Type: text/html
    content-type: text/html      ← same header
    CONTENT-TYPE: text/html      ← same header

We store every name in ONE canonical spelling so that lookups and
serialization agree no matter how the client (or our own code) spelled it.

=============================================================================
CANONICAL FORM
=============================================================================

    content-type      →  Content-Type
    x-FORWARDED-for   →  X-Forwarded-For
    host              →  Host

First letter and every letter following a '-' upper-cased, the rest
lower-cased. The same function runs on insert AND on lookup.

=============================================================================
"""

from collections.abc import MutableMapping
from typing import Dict, Iterator, List, Tuple


def canonical_header_key(name: str) -> str:
    """
    Return the canonical spelling of a header name.

    Examples:
        >>> canonical_header_key("content-length")
        'Content-Length'
        >>> canonical_header_key("LAST-MODIFIED")
        'Last-Modified'
    """
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


class Headers(MutableMapping):
    """
    Case-insensitive header map with canonical key storage.

    Behaves like a dict, except that every key passes through
    canonical_header_key() first:

        headers = Headers()
        headers["content-type"] = "text/html"
        headers["Content-Type"]          # 'text/html'
        list(headers)                    # ['Content-Type']

    Setting a header twice keeps the last value (no comma folding).
    """

    def __init__(self, initial=None, **kwargs):
        self._store: Dict[str, str] = {}
        if initial is not None:
            self.update(initial)
        if kwargs:
            self.update(kwargs)

    def __setitem__(self, name: str, value: str) -> None:
        self._store[canonical_header_key(name)] = value

    def __getitem__(self, name: str) -> str:
        return self._store[canonical_header_key(name)]

    def __delitem__(self, name: str) -> None:
        del self._store[canonical_header_key(name)]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return canonical_header_key(name) in self._store

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._store == other._store
        if isinstance(other, dict):
            return self == Headers(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._store!r})"

    def sorted_items(self) -> List[Tuple[str, str]]:
        """Return (name, value) pairs sorted by canonical name."""
        return sorted(self._store.items())


class FrozenHeaders(Headers):
    """
    Read-only Headers.

    Built once from another mapping; every later mutation raises
    TypeError. Requests carry their headers in this form.
    """

    def __init__(self, initial=None, **kwargs):
        super().__init__()
        self._store = dict(Headers(initial, **kwargs)._store)

    def __setitem__(self, name: str, value: str) -> None:
        raise TypeError("Headers are read-only")

    def __delitem__(self, name: str) -> None:
        raise TypeError("Headers are read-only")
