"""Package archive download, verification and extraction.

Archives are cached under ``<root>/cache/packages`` and are only ever trusted
after their SHA256 has been recomputed and matched against the registry's
declared checksum.
"""

import errno
import hashlib
import logging
import os
import shutil
import tarfile
import tempfile
from pathlib import Path, PurePosixPath

from dec.core.http.abc import HttpClient
from dec.core.paths import PathLayout, contained_path
from dec.errors import ChecksumMismatchError, PathTraversalError

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 64 * 1024


def sha256_file(path: Path) -> str:
    """Lowercase hex SHA256 of a file's contents."""
    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _move_into_place(temp_path: Path, final_path: Path) -> None:
    try:
        temp_path.replace(final_path)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        shutil.copyfile(temp_path, final_path)
        temp_path.unlink()


class Downloader:
    """Fetches archives through an HttpClient into the shared cache."""

    def __init__(self, paths: PathLayout, http: HttpClient) -> None:
        self._paths = paths
        self._http = http

    def download(self, url: str, package_id: str, version: str, expected_checksum: str) -> Path:
        """Return a verified local copy of a package archive.

        A cached archive is re-hashed on every call; if it no longer matches it
        is deleted and fetched again. Without a declared checksum the cache is
        never reused and the fetched bytes are not verified.

        Args:
            url: Archive URL
            package_id: Package name, used in the cache filename
            version: Package version, used in the cache filename
            expected_checksum: Declared SHA256 (hex, any case), or "" if none

        Returns:
            Path to the cached archive

        Raises:
            ChecksumMismatchError: If the fetched bytes don't match the declared checksum
            NetworkError: If the fetch fails
        """
        expected = expected_checksum.strip().lower()
        cache_path = self._paths.cache_path(package_id, version)

        if not expected:
            logger.warning("No checksum declared for %s; downloading without verification", url)
            self._fetch(url, cache_path, None)
            return cache_path

        if cache_path.exists():
            actual = sha256_file(cache_path)
            if actual == expected:
                logger.debug("Using cached archive %s", cache_path)
                return cache_path
            logger.warning(
                "Cached archive %s has checksum %s, expected %s; downloading again",
                cache_path,
                actual,
                expected,
            )
            cache_path.unlink()

        self._fetch(url, cache_path, expected)
        return cache_path

    def download_file(self, url: str, dest: Path) -> None:
        """Fetch a URL into dest, replacing it only once the body is complete."""
        self._fetch(url, dest, None)

    def _fetch(self, url: str, dest: Path, expected: str | None) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=dest.parent, prefix=f".{dest.name}.", suffix=".part")
        temp_path = Path(temp_name)
        try:
            digest = hashlib.sha256()
            with os.fdopen(fd, "wb") as out:
                for chunk in self._http.stream(url):
                    out.write(chunk)
                    digest.update(chunk)

            actual = digest.hexdigest()
            if expected is not None and actual != expected:
                raise ChecksumMismatchError(url, expected, actual)

            _move_into_place(temp_path, dest)
            logger.debug("Downloaded %s to %s", url, dest)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    def extract(self, archive_path: Path, dest_dir: Path) -> None:
        extract_archive(archive_path, dest_dir)


def _replace_existing(target: Path) -> None:
    if target.is_symlink() or target.is_file():
        target.unlink()


def extract_archive(archive_path: Path, dest_dir: Path) -> None:
    """Extract a gzip-compressed tar archive entry by entry.

    Entries are validated before anything is written for them. Directories
    and regular files keep their declared permission bits. Symlinks are
    created when the OS allows it and skipped with a warning otherwise.

    Args:
        archive_path: Path to a ``.tar.gz`` file
        dest_dir: Directory to extract into (created if missing)

    Raises:
        PathTraversalError: If any entry (or symlink target) resolves outside dest_dir
        tarfile.TarError: If the archive is corrupt
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    root = dest_dir.resolve()

    with tarfile.open(archive_path, mode="r|gz") as tar:
        for member in tar:
            target = contained_path(root, member.name)
            mode = member.mode & 0o777

            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
                target.chmod(mode or 0o755)
            elif member.isreg():
                source = tar.extractfile(member)
                if source is None:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                _replace_existing(target)
                with target.open("wb") as out:
                    shutil.copyfileobj(source, out)
                target.chmod(mode or 0o644)
            elif member.issym():
                _extract_symlink(root, target, member)
            else:
                logger.warning("Skipping unsupported archive entry %s", member.name)


def _extract_symlink(root: Path, target: Path, member: tarfile.TarInfo) -> None:
    link = PurePosixPath(member.linkname)
    if link.is_absolute():
        raise PathTraversalError(f"{member.name} -> {member.linkname}", str(root))
    if not (target.parent / Path(*link.parts)).resolve().is_relative_to(root):
        raise PathTraversalError(f"{member.name} -> {member.linkname}", str(root))

    target.parent.mkdir(parents=True, exist_ok=True)
    _replace_existing(target)
    try:
        os.symlink(member.linkname, target)
    except OSError as e:
        logger.warning("Skipping symlink %s -> %s: %s", member.name, member.linkname, e)
