"""IDE adapters.

Each supported IDE keeps rule files in a directory inside its own dot
directory and reads MCP servers from a JSON file. Known IDEs are a closed
set; any other name gets GenericIde, which follows the ``.<name>/`` layout.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from dec.io.json_files import save_json_atomic
from dec.models.mcp import McpConfig


class IdeAdapter(ABC):
    """Where an IDE keeps rules and MCP config inside a project."""

    @property
    @abstractmethod
    def name(self) -> str:
        """IDE name as written in project config."""
        ...

    @abstractmethod
    def rules_dir(self, project_root: Path) -> Path:
        """Directory the IDE loads rule files from."""
        ...

    @abstractmethod
    def mcp_config_path(self, project_root: Path) -> Path:
        """JSON file the IDE reads ``mcpServers`` from."""
        ...

    def list_rule_files(self, project_root: Path, prefix: str) -> list[Path]:
        """Rule files whose name starts with prefix, sorted."""
        rules_dir = self.rules_dir(project_root)
        if not rules_dir.is_dir():
            return []
        return sorted(
            entry
            for entry in rules_dir.iterdir()
            if entry.name.startswith(prefix) and (entry.is_file() or entry.is_symlink())
        )

    def write_rules(self, project_root: Path, rules: Mapping[str, str]) -> list[Path]:
        """Write rule files (filename to content) into the rules directory.

        Returns:
            Paths written, in filename order
        """
        rules_dir = self.rules_dir(project_root)
        written: list[Path] = []
        for filename in sorted(rules):
            if "/" in filename or "\\" in filename:
                raise ValueError(f"Rule filename must not contain a path separator: {filename}")
            rules_dir.mkdir(parents=True, exist_ok=True)
            path = rules_dir / filename
            path.write_text(rules[filename], encoding="utf-8")
            written.append(path)
        return written

    def load_mcp_config(self, project_root: Path) -> McpConfig:
        """Load the MCP config, or an empty one if the file doesn't exist."""
        path = self.mcp_config_path(project_root)
        if not path.exists():
            return McpConfig.empty()
        return McpConfig.model_validate_json(path.read_text(encoding="utf-8"))

    def write_mcp_config(self, project_root: Path, config: McpConfig) -> Path:
        """Save the MCP config atomically with sorted keys."""
        path = self.mcp_config_path(project_root)
        save_json_atomic(path, config.to_dict())
        return path


class _DotDirectoryIde(IdeAdapter):
    """IDE whose files live under ``<project>/.<dir_name>/``."""

    dir_name: str = ""
    # Relative to the project root; None means ``.<dir_name>/mcp.json``
    mcp_config_relpath: str | None = None

    def rules_dir(self, project_root: Path) -> Path:
        return project_root / f".{self.dir_name}" / "rules"

    def mcp_config_path(self, project_root: Path) -> Path:
        if self.mcp_config_relpath is not None:
            return project_root / self.mcp_config_relpath
        return project_root / f".{self.dir_name}" / "mcp.json"


class CursorIde(_DotDirectoryIde):
    dir_name = "cursor"

    @property
    def name(self) -> str:
        return "cursor"


class CodeBuddyIde(_DotDirectoryIde):
    """CodeBuddy reads MCP servers from ``.mcp.json`` at the project root."""

    dir_name = "codebuddy"
    mcp_config_relpath = ".mcp.json"

    @property
    def name(self) -> str:
        return "codebuddy"


class WindsurfIde(_DotDirectoryIde):
    dir_name = "windsurf"

    @property
    def name(self) -> str:
        return "windsurf"


class TraeIde(_DotDirectoryIde):
    dir_name = "trae"

    @property
    def name(self) -> str:
        return "trae"


class GenericIde(_DotDirectoryIde):
    """Fallback for IDEs dec has no specific knowledge of."""

    def __init__(self, ide_name: str) -> None:
        if not ide_name or "/" in ide_name or ide_name.startswith("."):
            raise ValueError(f"Invalid IDE name: {ide_name!r}")
        self._name = ide_name
        self.dir_name = ide_name

    @property
    def name(self) -> str:
        return self._name


def get_ide_adapter(name: str) -> IdeAdapter:
    """Adapter for an IDE name; unknown names get the generic layout."""
    match name.strip().lower():
        case "cursor":
            return CursorIde()
        case "codebuddy":
            return CodeBuddyIde()
        case "windsurf":
            return WindsurfIde()
        case "trae":
            return TraeIde()
        case _:
            return GenericIde(name.strip())
