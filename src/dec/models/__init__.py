"""Data models for dec."""

from dec.models.mcp import McpConfig, McpServer
from dec.models.pack import (
    ConfigField,
    Distribution,
    McpLaunchSpec,
    PackMetadata,
    PackType,
)
from dec.models.project import ConfigItem, ProjectConfig
from dec.models.registry import (
    TIER_PRIORITY,
    PackRegistry,
    RegistryTier,
    ResolvedPack,
)

__all__ = [
    "TIER_PRIORITY",
    "ConfigField",
    "ConfigItem",
    "Distribution",
    "McpConfig",
    "McpLaunchSpec",
    "McpServer",
    "PackMetadata",
    "PackRegistry",
    "PackType",
    "ProjectConfig",
    "RegistryTier",
    "ResolvedPack",
]
