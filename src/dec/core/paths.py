"""Filesystem layout for the per-user dec content area.

Everything dec owns lives under one root directory:

    <root>/repos/<name>                       installed packages
    <root>/cache/packages/<name>-<ver>.tar.gz downloaded archives
    <root>/registry/{local,test,official}.json registry tiers
    <root>/bin/                               shared executable links
    <root>/config/config.toml                 global config
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from dec.errors import PathTraversalError

HOME_ENV_VAR = "DEC_HOME"
DEFAULT_DIR_NAME = ".dec"
PROJECT_CONFIG_DIR = Path(".dec") / "config"


@dataclass(frozen=True)
class PathLayout:
    """Deterministic paths derived from a single root directory."""

    root: Path

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "PathLayout":
        """Build the layout from ``$DEC_HOME``, falling back to ``~/.dec``."""
        env = os.environ if environ is None else environ
        override = env.get(HOME_ENV_VAR, "").strip()
        if override:
            return PathLayout(root=Path(override).expanduser())
        return PathLayout(root=Path.home() / DEFAULT_DIR_NAME)

    @property
    def repos_dir(self) -> Path:
        return self.root / "repos"

    @property
    def cache_dir(self) -> Path:
        return self.root / "cache" / "packages"

    @property
    def registry_dir(self) -> Path:
        return self.root / "registry"

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    @property
    def config_dir(self) -> Path:
        return self.root / "config"

    @property
    def global_config_path(self) -> Path:
        return self.config_dir / "config.toml"

    def install_dir(self, name: str) -> Path:
        return self.repos_dir / name

    def cache_path(self, name: str, version: str) -> Path:
        return self.cache_dir / f"{name}-{version}.tar.gz"

    def registry_path(self, tier: str) -> Path:
        return self.registry_dir / f"{tier}.json"

    def ensure_dirs(self) -> None:
        """Create every directory of the layout."""
        for directory in (
            self.repos_dir,
            self.cache_dir,
            self.registry_dir,
            self.bin_dir,
            self.config_dir,
        ):
            directory.mkdir(parents=True, exist_ok=True)


def project_config_dir(project_root: Path) -> Path:
    """Directory holding a project's dec YAML config files."""
    return project_root / PROJECT_CONFIG_DIR


def contained_path(root: Path, relative: str) -> Path:
    """Join a package-relative path onto root, refusing anything outside it.

    Absolute paths and ``..`` components are rejected outright; the joined
    path must also still be inside root once symlinks are resolved.

    Raises:
        PathTraversalError: If relative escapes root
    """
    entry = PurePosixPath(relative)
    if entry.is_absolute() or Path(relative).is_absolute() or ".." in entry.parts:
        raise PathTraversalError(relative, str(root))

    target = root.joinpath(*entry.parts)
    if not target.resolve().is_relative_to(root.resolve()):
        raise PathTraversalError(relative, str(root))
    return target
