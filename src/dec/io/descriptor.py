"""Reading a package's own package.json."""

from pathlib import Path

from dec.models.pack import DESCRIPTOR_FILENAME, PackMetadata


def descriptor_path(package_dir: Path) -> Path:
    return package_dir / DESCRIPTOR_FILENAME


def load_descriptor(package_dir: Path) -> PackMetadata | None:
    """Load ``package.json`` from a package directory.

    Returns None if the file doesn't exist. A malformed descriptor raises
    pydantic.ValidationError (a ValueError).
    """
    path = descriptor_path(package_dir)
    if not path.exists():
        return None
    return PackMetadata.model_validate_json(path.read_text(encoding="utf-8"))
