"""Assemble sync inputs from a project's config and the installed packages."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dec.core.paths import PathLayout
from dec.ide.adapters import get_ide_adapter
from dec.io.descriptor import load_descriptor
from dec.models.pack import PackMetadata
from dec.models.project import ConfigItem, ProjectConfig
from dec.operations.sync import McpPackage, RulePackage, SyncResult, sync_all
from dec.packages.scanner import ScannedPackage, scan_package
from dec.registry.resolver import RegistryResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncInputs:
    """Enabled packages ready for the sync engine.

    Attributes:
        rule_packages: Packages contributing rule files
        mcp_packages: Packages contributing MCP servers
        problems: Enabled package name to the reason it was left out
    """

    rule_packages: tuple[RulePackage, ...]
    mcp_packages: tuple[McpPackage, ...]
    problems: dict[str, str] = field(default_factory=dict)


def merge_vars(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two variable trees; override wins on conflicts."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_vars(current, value)
        else:
            merged[key] = value
    return merged


def _locate(name: str, resolver: RegistryResolver, paths: PathLayout) -> ScannedPackage | None:
    resolved = resolver.resolve_pack(name)
    if resolved is not None:
        if not resolved.is_installed:
            return None
        return scan_package(resolved.install_path, resolved.metadata)

    # Installed, but no longer listed in any registry
    install_dir = paths.install_dir(name)
    if not install_dir.is_dir():
        return None
    descriptor = load_descriptor(install_dir)
    return scan_package(install_dir, descriptor or PackMetadata(name=name))


def collect_sync_inputs(
    config: ProjectConfig, resolver: RegistryResolver, paths: PathLayout
) -> SyncInputs:
    """Resolve every enabled item to an installed package.

    Installed rule packages in the ``core`` category are always enabled.
    Enabled packages that are not installed, or that provide nothing of the
    requested kind, are reported in ``problems`` instead of failing the sync.
    """
    problems: dict[str, str] = {}
    rule_packages: list[RulePackage] = []
    enabled_rules: set[str] = set()

    def add_rules(item: ConfigItem, scanned: ScannedPackage) -> None:
        enabled_rules.add(item.name)
        if not scanned.rule_files:
            problems[item.name] = "package provides no rule files"
            return
        rule_packages.append(
            RulePackage(
                name=item.name,
                install_path=scanned.install_path,
                rule_files=scanned.rule_files,
                vars=merge_vars(scanned.metadata.config_defaults(), item.vars),
            )
        )

    for item in config.enabled_rule_items():
        scanned = _locate(item.name, resolver, paths)
        if scanned is None:
            problems[item.name] = "not installed (run 'dec install')"
            continue
        add_rules(item, scanned)

    for resolved in resolver.list_all_packs():
        if resolved.name in enabled_rules or not resolved.is_installed:
            continue
        scanned = scan_package(resolved.install_path, resolved.metadata)
        if scanned.is_core and scanned.metadata.type == "rule" and scanned.rule_files:
            add_rules(ConfigItem(name=resolved.name), scanned)

    mcp_packages: list[McpPackage] = []
    for item in config.mcps:
        scanned = _locate(item.name, resolver, paths)
        if scanned is None:
            problems[item.name] = "not installed (run 'dec install')"
            continue
        if scanned.mcp is None:
            problems[item.name] = "package declares no MCP server"
            continue
        mcp_packages.append(
            McpPackage(
                name=item.name,
                install_path=scanned.install_path,
                launch=scanned.mcp,
                vars=merge_vars(scanned.metadata.config_defaults(), item.vars),
            )
        )

    for name, reason in sorted(problems.items()):
        logger.debug("Skipping %s during sync: %s", name, reason)

    rule_packages.sort(key=lambda package: package.name)
    mcp_packages.sort(key=lambda package: package.name)
    return SyncInputs(
        rule_packages=tuple(rule_packages),
        mcp_packages=tuple(mcp_packages),
        problems=problems,
    )


def sync_project(
    project_root: Path,
    config: ProjectConfig,
    resolver: RegistryResolver,
    paths: PathLayout,
) -> tuple[list[SyncResult], SyncInputs]:
    """Collect inputs and sync every IDE the project targets."""
    inputs = collect_sync_inputs(config, resolver, paths)
    adapters = [get_ide_adapter(name) for name in config.ides]
    results = sync_all(adapters, project_root, inputs.rule_packages, inputs.mcp_packages)
    return results, inputs
