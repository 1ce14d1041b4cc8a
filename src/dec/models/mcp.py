"""Models for an IDE's MCP config JSON."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class McpServer(BaseModel):
    """One generated ``mcpServers`` entry."""

    model_config = ConfigDict(frozen=True)

    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)


class McpConfig(BaseModel):
    """Top-level MCP config file.

    Server entries are kept as raw dicts so hand-written entries survive a
    load/save cycle untouched. Uses extra="allow" to preserve unknown
    top-level keys.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    mcpServers: dict[str, dict[str, Any]] = Field(default_factory=dict)  # noqa: N815

    @staticmethod
    def empty() -> "McpConfig":
        return McpConfig(mcpServers={})

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
