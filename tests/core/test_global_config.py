"""Tests for global config loading."""

from pathlib import Path

import pytest

from dec.core.global_config import (
    DEFAULT_REGISTRY_URL,
    FilesystemGlobalConfigOps,
    GlobalConfig,
)


class TestFilesystemGlobalConfigOps:
    """Tests for the config.toml implementation."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """load_or_default() tolerates an absent config file."""
        ops = FilesystemGlobalConfigOps(tmp_path / "config.toml")

        assert not ops.exists()
        assert ops.load_or_default() == GlobalConfig()

    def test_load_raises_when_missing(self, tmp_path: Path) -> None:
        """load() itself requires the file."""
        with pytest.raises(FileNotFoundError):
            FilesystemGlobalConfigOps(tmp_path / "config.toml").load()

    def test_reads_values(self, tmp_path: Path) -> None:
        """Keys in the TOML file override the defaults."""
        path = tmp_path / "config.toml"
        path.write_text('registry_url = "https://mirror.example/r.json"\nrequest_timeout = 5\n')

        config = FilesystemGlobalConfigOps(path).load()

        assert config.registry_url == "https://mirror.example/r.json"
        assert config.request_timeout == 5.0

    def test_partial_file_keeps_defaults(self, tmp_path: Path) -> None:
        """Absent keys fall back to their defaults."""
        path = tmp_path / "config.toml"
        path.write_text("request_timeout = 10\n")

        assert FilesystemGlobalConfigOps(path).load().registry_url == DEFAULT_REGISTRY_URL

    def test_invalid_toml_is_value_error(self, tmp_path: Path) -> None:
        """Syntax errors surface as ValueError naming the file."""
        path = tmp_path / "config.toml"
        path.write_text("registry_url = \n")

        with pytest.raises(ValueError, match="config.toml"):
            FilesystemGlobalConfigOps(path).load()

    def test_rejects_non_positive_timeout(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("request_timeout = 0\n")

        with pytest.raises(ValueError, match="request_timeout"):
            FilesystemGlobalConfigOps(path).load()

    def test_rejects_empty_registry_url(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('registry_url = "  "\n')

        with pytest.raises(ValueError, match="registry_url"):
            FilesystemGlobalConfigOps(path).load()
