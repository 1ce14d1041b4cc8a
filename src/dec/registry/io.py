"""Registry file I/O."""

from pathlib import Path

from dec.io.json_files import save_json_atomic
from dec.models.registry import PackRegistry


def load_registry_file(path: Path) -> PackRegistry:
    """Load a registry document.

    Returns an empty registry if the file doesn't exist. Any other read
    failure propagates; malformed JSON raises pydantic.ValidationError.
    """
    if not path.exists():
        return PackRegistry.empty()
    return PackRegistry.model_validate_json(path.read_bytes())


def save_registry_file(path: Path, registry: PackRegistry) -> None:
    """Save a registry document atomically in keyed form."""
    save_json_atomic(path, registry.model_dump(mode="json", exclude_none=True))
