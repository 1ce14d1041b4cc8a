"""Selection and linking of package executables.

A package's ``bin`` map names each command it provides. The value is either
one path used on every platform, or a map from platform key
(``<os>-<arch>``, e.g. ``darwin-arm64``) to a path.
"""

import logging
import os
import platform
import stat
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dec.core.paths import contained_path
from dec.errors import UnsupportedPlatformError

logger = logging.getLogger(__name__)

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


@dataclass(frozen=True)
class SimpleBin:
    """Same executable path on every platform."""

    path: str


@dataclass(frozen=True)
class PerPlatformBin:
    """Executable path per platform key."""

    paths: dict[str, str]


BinSpec = SimpleBin | PerPlatformBin


def parse_bin_spec(raw: str | Mapping[str, str]) -> BinSpec:
    if isinstance(raw, str):
        return SimpleBin(path=raw)
    return PerPlatformBin(paths=dict(raw))


def current_platform_key(system: str | None = None, machine: str | None = None) -> str:
    """Platform key for the running interpreter, e.g. ``linux-amd64``."""
    os_name = (system if system is not None else platform.system()).lower()
    raw_arch = (machine if machine is not None else platform.machine()).lower()
    return f"{os_name}-{_ARCH_ALIASES.get(raw_arch, raw_arch)}"


def resolve_bin_path(package: str, spec: BinSpec, platform_key: str) -> str:
    """Pick the executable path for platform_key.

    Raises:
        UnsupportedPlatformError: If a per-platform spec has no entry for platform_key
    """
    if isinstance(spec, SimpleBin):
        return spec.path
    if platform_key in spec.paths:
        return spec.paths[platform_key]
    raise UnsupportedPlatformError(package, platform_key, sorted(spec.paths))


def select_binaries(
    package: str, bin_map: Mapping[str, str | Mapping[str, str]], platform_key: str
) -> dict[str, str]:
    """Resolve every command of a bin map. Returns command name to relative path."""
    return {
        command: resolve_bin_path(package, parse_bin_spec(raw), platform_key)
        for command, raw in sorted(bin_map.items())
    }


def _link_name(command: str, platform_key: str) -> str:
    if platform_key.startswith("windows-") and not command.lower().endswith(".exe"):
        return f"{command}.exe"
    return command


def link_binaries(
    install_dir: Path, bin_dir: Path, selections: Mapping[str, str], platform_key: str
) -> list[Path]:
    """Expose selected executables in the shared bin directory.

    Existing links of the same name are replaced. Platforms that refuse
    symlinks are skipped with a warning.

    Returns:
        Links that were created

    Raises:
        FileNotFoundError: If a selected executable is missing from the package
        PathTraversalError: If a selected path points outside install_dir
    """
    bin_dir.mkdir(parents=True, exist_ok=True)
    created: list[Path] = []
    for command, relative in selections.items():
        executable = contained_path(install_dir, relative)
        if not executable.is_file():
            raise FileNotFoundError(f"Executable '{relative}' for command '{command}' not found")

        mode = executable.stat().st_mode
        executable.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

        link = bin_dir / _link_name(command, platform_key)
        if link.is_symlink() or link.exists():
            link.unlink()
        try:
            os.symlink(executable, link)
        except OSError as e:
            logger.warning("Could not link %s into %s: %s", command, bin_dir, e)
            continue
        created.append(link)
    return created


def remove_binary_links(install_dir: Path, bin_dir: Path) -> list[Path]:
    """Delete every link in bin_dir that points into install_dir."""
    if not bin_dir.is_dir():
        return []

    root = install_dir.resolve()
    removed: list[Path] = []
    for entry in sorted(bin_dir.iterdir()):
        if not entry.is_symlink():
            continue
        target = Path(os.readlink(entry))
        if not target.is_absolute():
            target = entry.parent / target
        if target.resolve().is_relative_to(root):
            entry.unlink()
            removed.append(entry)
    return removed
