"""
Unit tests for server configuration and the CLI argument mapping.
"""

import logging
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from statichttp.__main__ import build_parser, config_from_args, main
from statichttp.config import ServerConfig, parse_address


class TestParseAddress:

    @pytest.mark.parametrize("address,expected", [
        (":8080", ("", 8080)),
        (":0", ("", 0)),
        ("127.0.0.1:8000", ("127.0.0.1", 8000)),
        ("localhost:80", ("localhost", 80)),
    ])
    def test_valid(self, address: str, expected: tuple):
        """Test splitting well-formed listen addresses."""
        assert parse_address(address) == expected

    @pytest.mark.parametrize("address", ["8080", "localhost", "host:http", ":"])
    def test_invalid(self, address: str):
        """Test that malformed addresses raise ValueError."""
        with pytest.raises(ValueError):
            parse_address(address)


class TestServerConfig:

    def test_defaults(self):
        """Test default configuration values."""
        config = ServerConfig()

        assert config.host == ""
        assert config.port == 8080
        assert config.idle_timeout == 5.0
        assert config.index_file == "index.html"
        assert config.address == ":8080"

    def test_frozen(self):
        """Test that the configuration cannot be modified."""
        with pytest.raises(FrozenInstanceError):
            ServerConfig().port = 1

    def test_from_address(self, doc_root: Path):
        """Test building a config from an address string."""
        config = ServerConfig.from_address("127.0.0.1:9000", str(doc_root), idle_timeout=2.0)

        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.doc_root == str(doc_root)
        assert config.idle_timeout == 2.0

    def test_from_env(self, doc_root: Path, monkeypatch):
        """Test reading configuration from environment variables."""
        monkeypatch.setenv("HTTP_ADDRESS", "127.0.0.1:9001")
        monkeypatch.setenv("HTTP_DOC_ROOT", str(doc_root))
        monkeypatch.setenv("HTTP_IDLE_TIMEOUT", "1.5")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.address == "127.0.0.1:9001"
        assert config.doc_root == str(doc_root)
        assert config.idle_timeout == 1.5
        assert config.log_level_value == logging.DEBUG

    def test_valid_config_passes(self, config: ServerConfig):
        """Test that a valid configuration validates."""
        config.validate()

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"idle_timeout": 0},
        {"backlog": 0},
        {"buffer_size": 512},
        {"max_line_length": 0},
        {"index_file": ""},
        {"index_file": "a/index.html"},
        {"log_level": "LOUD"},
    ])
    def test_invalid_values(self, doc_root: Path, overrides: dict):
        """Test that out-of-range settings are rejected."""
        config = ServerConfig(doc_root=str(doc_root), **overrides)

        with pytest.raises(ValueError):
            config.validate()

    def test_missing_doc_root(self, tmp_path: Path):
        """Test that a missing document root is rejected."""
        with pytest.raises(ValueError, match="does not exist"):
            ServerConfig(doc_root=str(tmp_path / "missing")).validate()

    def test_doc_root_is_a_file(self, doc_root: Path):
        """Test that a document root must be a directory."""
        with pytest.raises(ValueError, match="not a directory"):
            ServerConfig(doc_root=str(doc_root / "index.html")).validate()


class TestCommandLine:

    def test_defaults(self):
        """Test the values used when no option is given."""
        config = config_from_args(build_parser().parse_args([]))

        assert config.address == ":8080"
        assert config.doc_root == "."
        assert config.idle_timeout == 5.0
        assert config.log_level == "INFO"

    def test_addr(self):
        """Test the --addr and --doc-root options."""
        args = build_parser().parse_args(["--addr", "127.0.0.1:8000", "-d", "www"])
        config = config_from_args(args)

        assert config.address == "127.0.0.1:8000"
        assert config.doc_root == "www"

    def test_host_and_port_override_addr(self):
        """Test that --host and --port override --addr."""
        args = build_parser().parse_args(["--addr", "127.0.0.1:8000", "--port", "3000"])
        assert config_from_args(args).address == "127.0.0.1:3000"

        args = build_parser().parse_args(["--host", "0.0.0.0"])
        assert config_from_args(args).address == "0.0.0.0:8080"

    def test_main_rejects_missing_doc_root(self, tmp_path: Path, capsys):
        """Test exit code 1 for a missing document root."""
        code = main(["--addr", "127.0.0.1:0", "--doc-root", str(tmp_path / "missing")])

        assert code == 1
        assert "Document root does not exist" in capsys.readouterr().err

    def test_main_rejects_bad_address(self, doc_root: Path, capsys):
        """Test exit code 1 for a malformed address."""
        assert main(["--addr", "nonsense", "-d", str(doc_root)]) == 1
        assert "Invalid address" in capsys.readouterr().err
