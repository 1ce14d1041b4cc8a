"""Package metadata as found in registries and in a package's own package.json."""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PackType = Literal["rule", "mcp"]

DESCRIPTOR_FILENAME = "package.json"


class Distribution(BaseModel):
    """Where to download a package archive and how to verify it."""

    model_config = ConfigDict(frozen=True)

    tarball: str = ""
    sha256: str = ""
    size: int = 0


class McpLaunchSpec(BaseModel):
    """How an IDE should launch a package's MCP server.

    Every field may contain placeholders.
    """

    model_config = ConfigDict(frozen=True)

    command: str = Field(..., min_length=1)
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)


class ConfigField(BaseModel):
    """One user-configurable variable a package declares."""

    model_config = ConfigDict(frozen=True)

    type: str = "string"
    description: str = ""
    default: Any = None
    required: bool = False


class PackMetadata(BaseModel):
    """Metadata describing one package.

    Unknown fields are preserved so registry files round-trip unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1)
    version: str = ""
    type: PackType = "rule"
    description: str = ""
    category: str = ""
    author: str = ""
    repository: str = ""
    dist: Distribution | None = None
    rules: list[str] = Field(default_factory=list)
    mcp: McpLaunchSpec | None = None
    config_schema: dict[str, ConfigField] = Field(default_factory=dict)
    dependencies: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("dependencies", "requires")
    )
    bin: dict[str, str | dict[str, str]] = Field(default_factory=dict)
    local_path: str | None = None
    linked_at: str | None = None

    @field_validator("repository", mode="before")
    @classmethod
    def flatten_repository(cls, v: Any) -> Any:
        """Accept ``{"type": "git", "url": ...}`` as well as a bare URL."""
        if isinstance(v, dict):
            return v.get("url", "")
        if v is None:
            return ""
        return v

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> Any:
        if v in (None, ""):
            return "rule"
        return v

    @property
    def is_linked(self) -> bool:
        return self.local_path is not None

    def config_defaults(self) -> dict[str, Any]:
        """Defaults declared in config_schema, skipping fields without one."""
        return {
            key: field.default
            for key, field in sorted(self.config_schema.items())
            if field.default is not None
        }

    def to_json_dict(self) -> dict[str, Any]:
        """Serializable form, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)
