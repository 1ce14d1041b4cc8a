"""Reads what an installed or linked package directory provides."""

from dataclasses import dataclass
from pathlib import Path

from dec.io.descriptor import load_descriptor
from dec.models.pack import McpLaunchSpec, PackMetadata

RULE_SUFFIXES = (".mdc", ".md")
CORE_CATEGORY = "core"


@dataclass(frozen=True)
class ScannedPackage:
    """Rule files and MCP launch spec found for one package.

    Attributes:
        metadata: package.json if present, otherwise the registry metadata
        install_path: Directory the package lives in
        rule_files: Rule template paths relative to install_path, POSIX style
        mcp: MCP launch spec, if the package provides a server
    """

    metadata: PackMetadata
    install_path: Path
    rule_files: tuple[str, ...]
    mcp: McpLaunchSpec | None

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def is_core(self) -> bool:
        return self.metadata.category == CORE_CATEGORY


def _discover_rule_files(install_path: Path) -> tuple[str, ...]:
    rules_dir = install_path / "rules"
    if not rules_dir.is_dir():
        return ()
    return tuple(
        sorted(
            path.relative_to(install_path).as_posix()
            for path in rules_dir.rglob("*")
            if path.is_file() and path.suffix in RULE_SUFFIXES
        )
    )


def scan_package(install_path: Path, fallback: PackMetadata) -> ScannedPackage:
    """Describe a package directory.

    Declared ``rules`` win; without them every ``.mdc``/``.md`` file under
    ``rules/`` is used. The registry entry's name is kept even when the
    package.json spells it differently.
    """
    descriptor = load_descriptor(install_path)
    if descriptor is None:
        metadata = fallback
    else:
        metadata = descriptor.model_copy(update={"name": fallback.name})
    inherited = {
        key: getattr(fallback, key)
        for key in ("category", "config_schema")
        if not getattr(metadata, key) and getattr(fallback, key)
    }
    if inherited:
        metadata = metadata.model_copy(update=inherited)

    rule_files = tuple(metadata.rules) if metadata.rules else _discover_rule_files(install_path)
    mcp = metadata.mcp if metadata.mcp is not None else fallback.mcp
    return ScannedPackage(
        metadata=metadata,
        install_path=install_path,
        rule_files=rule_files,
        mcp=mcp,
    )
