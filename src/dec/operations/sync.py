"""Regeneration of per-IDE rule files and MCP config from enabled packages.

Every artifact dec generates is "managed": rule files are named
``dec-<package>-<rule path>`` and MCP servers are keyed ``dec-<package>``, plus
the fixed ``dec`` self-entry. A sync first removes all managed artifacts and
then writes the current set, so disabled packages disappear while anything
the user wrote by hand is left alone.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from dec.core.paths import contained_path
from dec.ide.adapters import IdeAdapter
from dec.models.mcp import McpConfig, McpServer
from dec.models.pack import McpLaunchSpec
from dec.packages import placeholder

logger = logging.getLogger(__name__)

MANAGED_PREFIX = "dec-"
SELF_SERVER_NAME = "dec"
SELF_SERVER = McpServer(command="dec", args=["serve"], env={})


@dataclass(frozen=True)
class RulePackage:
    """An enabled package contributing rule files."""

    name: str
    install_path: Path
    rule_files: tuple[str, ...]
    vars: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class McpPackage:
    """An enabled package contributing an MCP server."""

    name: str
    install_path: Path
    launch: McpLaunchSpec
    vars: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SyncResult:
    """What a sync changed for one IDE."""

    ide: str
    rules_written: tuple[Path, ...]
    rules_removed: tuple[Path, ...]
    mcp_servers: tuple[str, ...]
    mcp_config_path: Path


def is_managed_server(key: str) -> bool:
    return key == SELF_SERVER_NAME or key.startswith(MANAGED_PREFIX)


def managed_rule_filename(package: str, rule_path: str) -> str:
    """``dec-<package>-<rule path with separators flattened>``."""
    flattened = "-".join(PurePosixPath(rule_path).parts)
    return f"{MANAGED_PREFIX}{package}-{flattened}"


def managed_server_name(package: str) -> str:
    return f"{MANAGED_PREFIX}{package}"


def render_rules(packages: Sequence[RulePackage]) -> dict[str, str]:
    """Read and substitute every rule template.

    Returns:
        Managed filename to rendered content

    Raises:
        FileNotFoundError: If a declared rule file is missing
        PathTraversalError: If a declared rule path points outside its package
        ValueError: If two rule files map to the same managed filename
    """
    rendered: dict[str, str] = {}
    for package in packages:
        for rule_path in package.rule_files:
            source = contained_path(package.install_path, rule_path)
            if not source.is_file():
                raise FileNotFoundError(
                    f"Rule file '{rule_path}' of package '{package.name}' not found at {source}"
                )
            filename = managed_rule_filename(package.name, rule_path)
            if filename in rendered:
                raise ValueError(f"Rule '{rule_path}' of '{package.name}' collides with {filename}")
            template = source.read_text(encoding="utf-8")
            rendered[filename] = placeholder.replace(template, package.vars)
    return rendered


def _resolve_command(command: str, install_path: Path) -> str:
    if os.path.isabs(command) or ("/" not in command and "\\" not in command):
        return command
    return str(contained_path(install_path, command))


def build_mcp_server(package: McpPackage) -> McpServer:
    """Server entry with command, args and env each substituted independently.

    A relative command that contains a path separator is taken to live inside
    the package and must not point outside it.
    """
    variables = package.vars
    command = placeholder.replace(package.launch.command, variables)
    return McpServer(
        command=_resolve_command(command, package.install_path),
        args=[placeholder.replace(arg, variables) for arg in package.launch.args],
        env={
            key: placeholder.replace(value, variables)
            for key, value in sorted(package.launch.env.items())
        },
    )


def build_mcp_servers(packages: Sequence[McpPackage]) -> dict[str, McpServer]:
    """Managed server entries for the given packages plus the self-entry."""
    servers = {managed_server_name(package.name): build_mcp_server(package) for package in packages}
    servers[SELF_SERVER_NAME] = SELF_SERVER
    return servers


def merge_mcp_config(existing: McpConfig, generated: Mapping[str, McpServer]) -> McpConfig:
    """Generated entries plus every existing entry that is not managed.

    Top-level keys other than ``mcpServers`` are kept as they were.
    """
    merged: dict[str, dict[str, Any]] = {
        key: entry for key, entry in existing.mcpServers.items() if not is_managed_server(key)
    }
    for key, server in generated.items():
        merged[key] = server.model_dump(mode="json")

    data = existing.to_dict()
    data["mcpServers"] = merged
    return McpConfig.model_validate(data)


def sync_ide(
    adapter: IdeAdapter,
    project_root: Path,
    rules: Mapping[str, str],
    servers: Mapping[str, McpServer],
) -> SyncResult:
    """Replace one IDE's managed rule files and MCP entries.

    Args:
        adapter: Target IDE
        project_root: Project directory
        rules: Rendered rule files from render_rules()
        servers: Server entries from build_mcp_servers()
    """
    existing_rules = adapter.list_rule_files(project_root, MANAGED_PREFIX)
    for path in existing_rules:
        path.unlink()

    written = adapter.write_rules(project_root, rules)
    removed = tuple(path for path in existing_rules if path.name not in rules)

    existing_config = adapter.load_mcp_config(project_root)
    merged = merge_mcp_config(existing_config, servers)
    config_path = adapter.write_mcp_config(project_root, merged)

    logger.debug(
        "Synced %s: %d rule(s), %d removed, %d MCP server(s)",
        adapter.name,
        len(written),
        len(removed),
        len(servers),
    )
    return SyncResult(
        ide=adapter.name,
        rules_written=tuple(written),
        rules_removed=removed,
        mcp_servers=tuple(sorted(servers)),
        mcp_config_path=config_path,
    )


def sync_all(
    adapters: Sequence[IdeAdapter],
    project_root: Path,
    rule_packages: Sequence[RulePackage],
    mcp_packages: Sequence[McpPackage],
) -> list[SyncResult]:
    """Render once, then sync every IDE in order.

    Templates are read before any IDE is touched, so a missing rule file
    leaves existing output untouched.
    """
    rules = render_rules(rule_packages)
    servers = build_mcp_servers(mcp_packages)
    return [sync_ide(adapter, project_root, rules, servers) for adapter in adapters]


def clean_ide(adapter: IdeAdapter, project_root: Path) -> SyncResult:
    """Remove every managed rule file and MCP entry, keeping user content.

    The MCP config file is only rewritten when it exists.
    """
    existing_rules = adapter.list_rule_files(project_root, MANAGED_PREFIX)
    for path in existing_rules:
        path.unlink()

    config_path = adapter.mcp_config_path(project_root)
    if config_path.exists():
        merged = merge_mcp_config(adapter.load_mcp_config(project_root), {})
        adapter.write_mcp_config(project_root, merged)

    return SyncResult(
        ide=adapter.name,
        rules_written=(),
        rules_removed=tuple(existing_rules),
        mcp_servers=(),
        mcp_config_path=config_path,
    )
