"""Registry document and resolution result models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dec.models.pack import PackMetadata

RegistryTier = Literal["local", "test", "official"]

# Highest priority first. A name found in an earlier tier masks later tiers.
TIER_PRIORITY: tuple[RegistryTier, ...] = ("local", "test", "official")

REGISTRY_FORMAT_VERSION = "1"


class PackRegistry(BaseModel):
    """A registry document keyed by package name.

    The flat published form (``packages: [...]``) is accepted on load and
    converted to the keyed form.
    """

    model_config = ConfigDict(frozen=True)

    version: str = REGISTRY_FORMAT_VERSION
    updated_at: str = ""
    packs: dict[str, PackMetadata] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def accept_flat_form(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "packages" not in data:
            return data

        converted = {key: value for key, value in data.items() if key != "packages"}
        packs: dict[str, Any] = dict(converted.get("packs") or {})
        for entry in data["packages"] or []:
            if not isinstance(entry, dict) or not entry.get("name"):
                raise ValueError("every entry in 'packages' needs a 'name'")
            packs.setdefault(entry["name"], entry)
        converted["packs"] = packs
        return converted

    @staticmethod
    def empty() -> "PackRegistry":
        return PackRegistry()

    def get(self, name: str) -> PackMetadata | None:
        return self.packs.get(name)

    def with_pack(self, pack: PackMetadata, updated_at: str) -> "PackRegistry":
        packs = dict(self.packs)
        packs[pack.name] = pack
        return PackRegistry(version=self.version, updated_at=updated_at, packs=packs)

    def without_packs(self, names: set[str], updated_at: str) -> "PackRegistry":
        packs = {name: pack for name, pack in self.packs.items() if name not in names}
        return PackRegistry(version=self.version, updated_at=updated_at, packs=packs)


@dataclass(frozen=True)
class ResolvedPack:
    """Effective package for a name after tier resolution. Never persisted."""

    metadata: PackMetadata
    source: RegistryTier
    install_path: Path
    is_installed: bool

    @property
    def name(self) -> str:
        return self.metadata.name
