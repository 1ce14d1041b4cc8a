"""Tests for platform executable selection and linking."""

import os
from pathlib import Path

import pytest

from dec.errors import PathTraversalError, UnsupportedPlatformError
from dec.operations.binaries import (
    PerPlatformBin,
    SimpleBin,
    current_platform_key,
    link_binaries,
    parse_bin_spec,
    remove_binary_links,
    resolve_bin_path,
    select_binaries,
)

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX symlinks")


class TestBinSpec:
    """Tests for parsing and resolving bin specs."""

    def test_parse_variants(self) -> None:
        """Strings become SimpleBin, mappings become PerPlatformBin."""
        assert parse_bin_spec("bin/tool") == SimpleBin(path="bin/tool")
        assert parse_bin_spec({"linux-amd64": "bin/tool"}) == PerPlatformBin(
            paths={"linux-amd64": "bin/tool"}
        )

    def test_simple_applies_everywhere(self) -> None:
        assert resolve_bin_path("p", SimpleBin(path="bin/tool"), "windows-arm64") == "bin/tool"

    def test_per_platform_selects_matching_key(self) -> None:
        spec = PerPlatformBin(
            paths={"darwin-arm64": "bin/tool-mac", "linux-amd64": "bin/tool-linux"}
        )

        assert resolve_bin_path("p", spec, "linux-amd64") == "bin/tool-linux"

    def test_unsupported_platform_lists_declared_keys(self) -> None:
        """No matching key raises with the supported platforms."""
        spec = PerPlatformBin(paths={"linux-amd64": "a", "darwin-arm64": "b"})

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_bin_path("tool", spec, "windows-amd64")

        assert exc_info.value.supported == ["darwin-arm64", "linux-amd64"]
        assert "darwin-arm64, linux-amd64" in str(exc_info.value)

    def test_select_binaries_resolves_every_command(self) -> None:
        bin_map = {"b": "bin/b", "a": {"linux-arm64": "bin/a-arm"}}

        assert select_binaries("p", bin_map, "linux-arm64") == {"a": "bin/a-arm", "b": "bin/b"}


@pytest.mark.parametrize(
    ("system", "machine", "expected"),
    [
        ("Darwin", "arm64", "darwin-arm64"),
        ("Linux", "x86_64", "linux-amd64"),
        ("Linux", "aarch64", "linux-arm64"),
        ("Windows", "AMD64", "windows-amd64"),
    ],
)
def test_current_platform_key(system: str, machine: str, expected: str) -> None:
    """OS and architecture names are normalised."""
    assert current_platform_key(system, machine) == expected


class TestLinking:
    """Tests for link_binaries() and remove_binary_links()."""

    @posix_only
    def test_links_and_marks_executable(self, tmp_path: Path) -> None:
        install_dir = tmp_path / "repos" / "tool"
        (install_dir / "bin").mkdir(parents=True)
        executable = install_dir / "bin" / "tool-linux"
        executable.write_text("#!/bin/sh\n")
        executable.chmod(0o644)
        bin_dir = tmp_path / "bin"

        created = link_binaries(install_dir, bin_dir, {"tool": "bin/tool-linux"}, "linux-amd64")

        link = bin_dir / "tool"
        assert created == [link]
        assert link.is_symlink()
        assert link.resolve() == executable.resolve()
        assert os.access(executable, os.X_OK)

    @posix_only
    def test_replaces_existing_link(self, tmp_path: Path) -> None:
        install_dir = tmp_path / "repos" / "tool"
        install_dir.mkdir(parents=True)
        (install_dir / "tool").write_text("new")
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        (bin_dir / "tool").symlink_to(tmp_path / "stale")

        link_binaries(install_dir, bin_dir, {"tool": "tool"}, "linux-amd64")

        assert (bin_dir / "tool").read_text() == "new"

    def test_missing_executable_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="bin/nope"):
            link_binaries(tmp_path, tmp_path / "bin", {"tool": "bin/nope"}, "linux-amd64")

    @pytest.mark.parametrize("relative", ["../../outside.sh", "/etc/outside.sh"])
    def test_executable_outside_package_is_rejected(self, tmp_path: Path, relative: str) -> None:
        """Paths escaping the package are neither chmodded nor linked."""
        install_dir = tmp_path / "repos" / "pkg"
        install_dir.mkdir(parents=True)
        outside = tmp_path / "outside.sh"
        outside.write_text("#!/bin/sh\n")
        outside.chmod(0o644)
        bin_dir = tmp_path / "bin"

        with pytest.raises(PathTraversalError):
            link_binaries(install_dir, bin_dir, {"tool": relative}, "linux-amd64")

        assert outside.stat().st_mode & 0o777 == 0o644
        assert not (bin_dir / "tool").exists()

    @posix_only
    def test_symlink_escaping_package_is_rejected(self, tmp_path: Path) -> None:
        """A packaged symlink that resolves outside the package is refused."""
        install_dir = tmp_path / "repos" / "pkg"
        install_dir.mkdir(parents=True)
        outside = tmp_path / "outside.sh"
        outside.write_text("#!/bin/sh\n")
        outside.chmod(0o644)
        (install_dir / "tool").symlink_to(outside)

        with pytest.raises(PathTraversalError):
            link_binaries(install_dir, tmp_path / "bin", {"tool": "tool"}, "linux-amd64")

        assert outside.stat().st_mode & 0o777 == 0o644

    @posix_only
    def test_remove_only_links_into_package(self, tmp_path: Path) -> None:
        """Links belonging to other packages are left alone."""
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        mine = tmp_path / "repos" / "mine"
        other = tmp_path / "repos" / "other"
        for directory in (mine, other):
            directory.mkdir(parents=True)
            (directory / "exe").write_text("x")
        (bin_dir / "mine").symlink_to(mine / "exe")
        (bin_dir / "other").symlink_to(other / "exe")
        (bin_dir / "plain-file").write_text("not a link")

        removed = remove_binary_links(mine, bin_dir)

        assert removed == [bin_dir / "mine"]
        assert (bin_dir / "other").is_symlink()
        assert (bin_dir / "plain-file").exists()

    def test_remove_without_bin_dir(self, tmp_path: Path) -> None:
        assert remove_binary_links(tmp_path / "repos" / "x", tmp_path / "bin") == []
