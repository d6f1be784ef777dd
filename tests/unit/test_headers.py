"""
Unit tests for header storage.
"""

import pytest

from statichttp.http.headers import FrozenHeaders, Headers, canonical_header_key


class TestCanonicalHeaderKey:
    """Tests for canonical_header_key()."""

    @pytest.mark.parametrize("raw,expected", [
        ("host", "Host"),
        ("HOST", "Host"),
        ("content-type", "Content-Type"),
        ("CONTENT-LENGTH", "Content-Length"),
        ("x-FORWARDED-for", "X-Forwarded-For"),
        ("Last-Modified", "Last-Modified"),
    ])
    def test_canonical_spelling(self, raw: str, expected: str):
        """Test canonical spelling of header names."""
        assert canonical_header_key(raw) == expected

    def test_idempotent(self):
        """Test that canonicalizing twice changes nothing."""
        key = canonical_header_key("x-request-id")
        assert canonical_header_key(key) == key


class TestHeaders:
    """Tests for the Headers mapping."""

    def test_case_insensitive_lookup(self):
        """Test case-insensitive lookups."""
        headers = Headers()
        headers["content-type"] = "text/html"

        assert headers["Content-Type"] == "text/html"
        assert headers["CONTENT-TYPE"] == "text/html"
        assert "content-TYPE" in headers
        assert list(headers) == ["Content-Type"]

    def test_last_value_wins(self):
        """Test that setting a header twice keeps the last value."""
        headers = Headers()
        headers["Accept"] = "a"
        headers["accept"] = "b"

        assert len(headers) == 1
        assert headers["Accept"] == "b"

    def test_delete(self):
        """Test deleting a header under any spelling."""
        headers = Headers({"X-Thing": "1"})
        del headers["x-thing"]

        assert "X-Thing" not in headers
        with pytest.raises(KeyError):
            headers["X-Thing"]

    def test_non_string_not_contained(self):
        """Test membership with a non-string key."""
        assert 42 not in Headers({"Host": "x"})

    def test_equality(self):
        """Test comparison with Headers and plain dicts."""
        headers = Headers({"content-length": "10"})

        assert headers == Headers({"Content-Length": "10"})
        assert headers == {"CONTENT-LENGTH": "10"}
        assert headers != {"Content-Length": "11"}

    def test_sorted_items(self):
        """Test sorted iteration by canonical name."""
        headers = Headers()
        headers["last-modified"] = "x"
        headers["date"] = "y"
        headers["content-type"] = "z"

        assert headers.sorted_items() == [
            ("Content-Type", "z"),
            ("Date", "y"),
            ("Last-Modified", "x"),
        ]


class TestFrozenHeaders:
    """Tests for the read-only header map."""

    def test_copies_and_canonicalizes(self):
        """Test building from a mapping with mixed-case names."""
        source = {"user-agent": "pytest"}
        headers = FrozenHeaders(source)
        source["user-agent"] = "changed"

        assert headers["User-Agent"] == "pytest"
        assert headers == {"User-Agent": "pytest"}

    def test_mutation_rejected(self):
        """Test that set, delete and update all raise TypeError."""
        headers = FrozenHeaders({"Accept": "*/*"})

        with pytest.raises(TypeError):
            headers["Accept"] = "text/html"
        with pytest.raises(TypeError):
            del headers["Accept"]
        with pytest.raises(TypeError):
            headers.update({"X-New": "1"})

        assert headers == {"Accept": "*/*"}
