"""Resolution of package names across the local, test and official registries.

The three tiers are independent JSON files. Lookups always consult them in
the fixed order local > test > official, and a name present in a higher tier
masks the same name in every lower tier.
"""

import logging
import posixpath
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from dec.core.downloader import Downloader
from dec.core.paths import PathLayout
from dec.core.time.abc import Time
from dec.errors import PackNotFoundError
from dec.io.descriptor import load_descriptor
from dec.models.pack import PackMetadata, PackType
from dec.models.registry import TIER_PRIORITY, PackRegistry, RegistryTier, ResolvedPack
from dec.registry.io import load_registry_file, save_registry_file

logger = logging.getLogger(__name__)


def _with_query_param(url: str, key: str, value: str) -> str:
    parts = urlsplit(url)
    query = f"{parts.query}&{key}={value}" if parts.query else f"{key}={value}"
    return urlunsplit(parts._replace(query=query))


class RegistryResolver:
    """Loads every registry tier and answers lookups against them.

    Call load() before querying; link/unlink persist the local tier
    immediately.
    """

    def __init__(
        self,
        paths: PathLayout,
        downloader: Downloader,
        time: Time,
        registry_url: str,
    ) -> None:
        self._paths = paths
        self._downloader = downloader
        self._time = time
        self._registry_url = registry_url
        self._registries: dict[RegistryTier, PackRegistry] = {
            tier: PackRegistry.empty() for tier in TIER_PRIORITY
        }

    def load(self) -> None:
        """Read all tiers from disk. Missing tier files load as empty."""
        for tier in TIER_PRIORITY:
            self._registries[tier] = load_registry_file(self._paths.registry_path(tier))
            logger.debug(
                "Loaded %d pack(s) from %s registry", len(self._registries[tier].packs), tier
            )

    def registry(self, tier: RegistryTier) -> PackRegistry:
        return self._registries[tier]

    def has_official_cache(self) -> bool:
        return self._paths.registry_path("official").exists()

    def _resolved(self, pack: PackMetadata, tier: RegistryTier) -> ResolvedPack:
        if pack.local_path is not None:
            install_path = Path(pack.local_path)
        else:
            install_path = self._paths.install_dir(pack.name)
        return ResolvedPack(
            metadata=pack,
            source=tier,
            install_path=install_path,
            is_installed=install_path.is_dir(),
        )

    def resolve_pack(self, name: str) -> ResolvedPack | None:
        """Find the effective package for a name, or None if no tier has it."""
        for tier in TIER_PRIORITY:
            pack = self._registries[tier].get(name)
            if pack is not None:
                return self._resolved(pack, tier)
        return None

    def require_pack(self, name: str) -> ResolvedPack:
        """Like resolve_pack(), but raises PackNotFoundError."""
        resolved = self.resolve_pack(name)
        if resolved is None:
            raise PackNotFoundError(name)
        return resolved

    def list_all_packs(self) -> list[ResolvedPack]:
        """Every effective package across all tiers, sorted by name."""
        winners: dict[str, ResolvedPack] = {}
        for tier in TIER_PRIORITY:
            for name, pack in self._registries[tier].packs.items():
                if name not in winners:
                    winners[name] = self._resolved(pack, tier)
        return [winners[name] for name in sorted(winners)]

    def search_packs(self, keyword: str) -> list[ResolvedPack]:
        """Effective packages whose name or description contains keyword (case-insensitive)."""
        needle = keyword.strip().lower()
        return [
            resolved
            for resolved in self.list_all_packs()
            if needle in resolved.metadata.name.lower()
            or needle in resolved.metadata.description.lower()
        ]

    def update_official(self) -> PackRegistry:
        """Fetch the remote registry, overwrite the official cache and reload it.

        The document is fetched next to the cache and only replaces it once it
        parses as a registry, so a failed update always keeps the previous cache.

        Raises:
            NetworkError: If the fetch fails
            ValueError: If the fetched document is not a valid registry
        """
        url = _with_query_param(self._registry_url, "t", str(self._time.unix_seconds()))
        official_path = self._paths.registry_path("official")
        staged_path = official_path.with_name(official_path.name + ".download")
        try:
            self._downloader.download_file(url, staged_path)
            registry = load_registry_file(staged_path)
            staged_path.replace(official_path)
        finally:
            if staged_path.exists():
                staged_path.unlink()

        self._registries["official"] = registry
        logger.debug("Official registry has %d pack(s)", len(self._registries["official"].packs))
        return self._registries["official"]

    def tarball_url(self, pack: PackMetadata) -> str:
        """Absolute download URL for a package's archive.

        Raises:
            ValueError: If the package declares no tarball
        """
        if pack.dist is None or not pack.dist.tarball:
            raise ValueError(f"Package '{pack.name}' declares no dist.tarball")

        tarball = pack.dist.tarball
        if urlsplit(tarball).scheme in ("http", "https", "file"):
            return tarball
        if pack.repository:
            version = pack.version if pack.version.startswith("v") else f"v{pack.version}"
            return f"{pack.repository.rstrip('/')}/releases/download/{version}/{tarball}"

        base = urlsplit(self._registry_url)
        directory = posixpath.dirname(base.path)
        return urlunsplit(base._replace(path=posixpath.join(directory, tarball), query=""))

    def link_pack(
        self,
        name: str,
        local_path: Path,
        version: str = "dev",
        pack_type: PackType = "rule",
    ) -> PackMetadata:
        """Point resolution of name at a local development directory.

        Fields from the directory's package.json (rules, mcp, description...)
        are kept when present; name, version, type and path always come from
        the arguments.

        Raises:
            FileNotFoundError: If local_path is not a directory
        """
        resolved_path = local_path.expanduser().resolve()
        if not resolved_path.is_dir():
            raise FileNotFoundError(f"Cannot link '{name}': {resolved_path} is not a directory")

        descriptor = load_descriptor(resolved_path)
        linked_at = self._time.now().isoformat()
        updates = {
            "name": name,
            "version": version,
            "type": pack_type,
            "local_path": str(resolved_path),
            "linked_at": linked_at,
        }
        if descriptor is not None:
            pack = descriptor.model_copy(update=updates)
        else:
            pack = PackMetadata(**updates)

        self._registries["local"] = self._registries["local"].with_pack(pack, linked_at)
        self._save_local()
        return pack

    def unlink_pack(self, name: str) -> None:
        """Remove a linked package from the local tier.

        Raises:
            PackNotFoundError: If name is not linked
        """
        if self._registries["local"].get(name) is None:
            raise PackNotFoundError(name, remediation="it is not linked; see 'dec link --list'")
        self._registries["local"] = self._registries["local"].without_packs(
            {name}, self._time.now().isoformat()
        )
        self._save_local()

    def unlink_all(self) -> int:
        """Remove every linked package. Returns how many were removed."""
        names = set(self._registries["local"].packs)
        if not names:
            return 0
        self._registries["local"] = self._registries["local"].without_packs(
            names, self._time.now().isoformat()
        )
        self._save_local()
        return len(names)

    def list_linked_packs(self) -> list[PackMetadata]:
        local = self._registries["local"].packs
        return [local[name] for name in sorted(local)]

    def _save_local(self) -> None:
        save_registry_file(self._paths.registry_path("local"), self._registries["local"])
