"""Install, uninstall and query packages in the per-user content area.

There is no install ledger: a package is installed when ``<root>/repos/<name>``
exists, and its version is whatever that directory's package.json says.
"""

import logging
import shutil
import tarfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from dec.core.downloader import Downloader
from dec.core.paths import PathLayout
from dec.core.version import is_newer
from dec.errors import (
    DecError,
    OperationError,
    PackNotFoundError,
    PartialBatchFailure,
    UnsupportedPlatformError,
)
from dec.io.descriptor import descriptor_path, load_descriptor
from dec.io.json_files import save_json_atomic
from dec.models.pack import PackMetadata
from dec.operations.binaries import (
    current_platform_key,
    link_binaries,
    remove_binary_links,
    select_binaries,
)
from dec.registry.resolver import RegistryResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchInstallResult:
    """Outcome of installing several packages.

    Attributes:
        installed: Packages installed in this run, in install order
        skipped: Packages left alone (up to date or linked)
        failed: Package name to error message
    """

    installed: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.installed) + len(self.skipped) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def raise_for_failures(self) -> None:
        if self.failed:
            raise PartialBatchFailure(self)


class Installer:
    """Turns resolved package metadata into installed directories and bin links."""

    def __init__(
        self,
        paths: PathLayout,
        downloader: Downloader,
        resolver: RegistryResolver,
        platform_key: str | None = None,
    ) -> None:
        self._paths = paths
        self._downloader = downloader
        self._resolver = resolver
        self._platform_key = platform_key if platform_key is not None else current_platform_key()

    def install(self, meta: PackMetadata) -> Path:
        """Download, verify and extract a package, replacing any existing install.

        Args:
            meta: Registry metadata of the package

        Returns:
            The install directory

        Raises:
            UnsupportedPlatformError: If the package has no executable for this platform
            ChecksumMismatchError: If the archive fails verification
            PathTraversalError: If the archive contains unsafe entries
            NetworkError: If the download fails
            OperationError: On any other filesystem or archive failure
            ValueError: If the package is linked or declares no archive
        """
        if meta.is_linked:
            raise ValueError(f"Package '{meta.name}' is linked to {meta.local_path}")
        if meta.dist is None:
            raise ValueError(f"Package '{meta.name}' declares no dist")

        # Fail before touching the existing install
        selections = select_binaries(meta.name, meta.bin, self._platform_key) if meta.bin else None
        url = self._resolver.tarball_url(meta)
        install_dir = self._paths.install_dir(meta.name)

        try:
            self._remove_install(meta.name, install_dir)
            archive = self._downloader.download(url, meta.name, meta.version, meta.dist.sha256)
            self._downloader.extract(archive, install_dir)

            descriptor = load_descriptor(install_dir)
            if descriptor is None:
                save_json_atomic(descriptor_path(install_dir), meta.to_json_dict())
            elif selections is None and descriptor.bin:
                try:
                    selections = select_binaries(meta.name, descriptor.bin, self._platform_key)
                except UnsupportedPlatformError:
                    shutil.rmtree(install_dir)
                    raise

            if selections:
                link_binaries(install_dir, self._paths.bin_dir, selections, self._platform_key)
        except (OSError, tarfile.TarError) as e:
            raise OperationError(f"install {meta.name}", e) from e

        logger.debug("Installed %s %s into %s", meta.name, meta.version, install_dir)
        return install_dir

    def uninstall(self, name: str) -> bool:
        """Remove a package and its bin links.

        Returns:
            False if the package was not installed (nothing is touched)
        """
        install_dir = self._paths.install_dir(name)
        if not install_dir.exists():
            return False

        try:
            self._remove_install(name, install_dir)
        except OSError as e:
            raise OperationError(f"uninstall {name}", e) from e
        return True

    def is_installed(self, name: str) -> bool:
        return self._paths.install_dir(name).is_dir()

    def get_installed_version(self, name: str) -> str | None:
        """Version from the installed package.json, or None when not installed."""
        install_dir = self._paths.install_dir(name)
        if not install_dir.is_dir():
            return None
        descriptor = load_descriptor(install_dir)
        if descriptor is None:
            return None
        return descriptor.version

    def install_many(self, names: Iterable[str], force: bool = False) -> BatchInstallResult:
        """Install packages and their dependencies, continuing past failures.

        Dependencies are installed before their dependents and each package
        at most once. A package is skipped when it is linked, or when it is
        installed and not older than the registry version (unless force).
        """
        installed: list[str] = []
        skipped: list[str] = []
        failed: dict[str, str] = {}

        for name in self._expand_dependencies(names, failed):
            resolved = self._resolver.resolve_pack(name)
            if resolved is None:
                failed[name] = str(PackNotFoundError(name))
                continue

            meta = resolved.metadata
            if meta.is_linked:
                skipped.append(name)
                continue

            if resolved.is_installed and not force:
                current = self.get_installed_version(name)
                if current is not None and not is_newer(meta.version, current):
                    skipped.append(name)
                    continue

            try:
                self.install(meta)
            except (DecError, ValueError) as e:
                logger.debug("Install of %s failed", name, exc_info=True)
                failed[name] = str(e)
                continue
            installed.append(name)

        return BatchInstallResult(
            installed=tuple(installed), skipped=tuple(skipped), failed=failed
        )

    def _expand_dependencies(self, names: Iterable[str], failed: dict[str, str]) -> list[str]:
        order: list[str] = []
        visiting: set[str] = set()

        def visit(name: str) -> None:
            if name in order or name in visiting or name in failed:
                return
            visiting.add(name)
            resolved = self._resolver.resolve_pack(name)
            if resolved is None:
                failed[name] = str(PackNotFoundError(name))
            else:
                for dependency in resolved.metadata.dependencies:
                    visit(dependency)
                order.append(name)
            visiting.discard(name)

        for name in names:
            visit(name)
        return order

    def _remove_install(self, name: str, install_dir: Path) -> None:
        removed = remove_binary_links(install_dir, self._paths.bin_dir)
        for link in removed:
            logger.debug("Removed bin link %s for %s", link, name)
        if install_dir.exists():
            shutil.rmtree(install_dir)
