"""Global configuration data structures and loading.

Provides immutable global config data loaded from <root>/config/config.toml.
Loaded once at the CLI entry point; a missing file means defaults. dec never
writes this file; users edit it by hand.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_REGISTRY_URL = (
    "https://github.com/shichao402/Dec/releases/download/registry/registry.json"
)
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Attributes:
        registry_url: Remote URL of the official registry document
        request_timeout: Per-request HTTP timeout in seconds
    """

    registry_url: str = DEFAULT_REGISTRY_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


class FilesystemGlobalConfigOps:
    """Reads config.toml under the dec root."""

    def __init__(self, config_path: Path) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self._config_path.exists()

    def path(self) -> Path:
        """Path to the config file (for error messages and debugging)."""
        return self._config_path

    def load(self) -> GlobalConfig:
        """Load global config.

        Raises:
            FileNotFoundError: If config doesn't exist
            ValueError: If config is malformed
        """
        config_path = self._config_path
        if not config_path.exists():
            raise FileNotFoundError(f"Global config not found at {config_path}")

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

        registry_url = data.get("registry_url", DEFAULT_REGISTRY_URL)
        if not isinstance(registry_url, str) or not registry_url.strip():
            raise ValueError(f"'registry_url' in {config_path} must be a non-empty string")

        timeout = data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
        if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
            raise ValueError(f"'request_timeout' in {config_path} must be a positive number")

        return GlobalConfig(registry_url=registry_url.strip(), request_timeout=float(timeout))

    def load_or_default(self) -> GlobalConfig:
        if not self.exists():
            return GlobalConfig()
        return self.load()
