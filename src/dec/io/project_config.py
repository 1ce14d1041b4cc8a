"""Loading a project's ``.dec/config/*.yaml`` files.

Three optional files are read:

    ides.yaml        ides: [cursor, codebuddy]
    technology.yaml  languages: [go, {python: {style: strict}}], frameworks: [...]
    mcp.yaml         mcps: [github, {postgres: {db: {host: localhost}}}]
"""

from pathlib import Path
from typing import Any

import yaml

from dec.core.paths import project_config_dir
from dec.models.project import DEFAULT_IDES, ConfigItem, ProjectConfig

IDES_FILENAME = "ides.yaml"
TECHNOLOGY_FILENAME = "technology.yaml"
MCP_FILENAME = "mcp.yaml"


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    return data


def parse_config_item(raw: Any, where: str) -> ConfigItem:
    """Parse a bare name or a single-key ``{name: vars}`` map.

    Raises:
        ValueError: If the item has any other shape
    """
    if isinstance(raw, str) and raw.strip():
        return ConfigItem(name=raw.strip())

    if isinstance(raw, dict) and len(raw) == 1:
        name, variables = next(iter(raw.items()))
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{where}: item name must be a non-empty string")
        if variables is None:
            variables = {}
        if not isinstance(variables, dict):
            raise ValueError(f"{where}: variables for '{name}' must be a mapping")
        return ConfigItem(name=name.strip(), vars=variables)

    raise ValueError(f"{where}: expected a name or a single-key mapping, got {raw!r}")


def _parse_item_list(raw: Any, where: str) -> tuple[ConfigItem, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValueError(f"{where}: expected a list")
    return tuple(parse_config_item(item, f"{where}[{i}]") for i, item in enumerate(raw))


def load_project_config(project_root: Path) -> ProjectConfig:
    """Load project config, using defaults for any missing file.

    Args:
        project_root: Project directory containing ``.dec/config``

    Raises:
        ValueError: If a file is malformed
    """
    config_dir = project_config_dir(project_root)

    ides_path = config_dir / IDES_FILENAME
    ides_data = _load_yaml_mapping(ides_path)
    raw_ides = ides_data.get("ides")
    if raw_ides is None:
        ides: tuple[str, ...] = DEFAULT_IDES
    elif isinstance(raw_ides, list) and all(isinstance(i, str) and i for i in raw_ides):
        ides = tuple(dict.fromkeys(raw_ides)) or DEFAULT_IDES
    else:
        raise ValueError(f"{ides_path}: 'ides' must be a list of IDE names")

    technology_path = config_dir / TECHNOLOGY_FILENAME
    technology_data = _load_yaml_mapping(technology_path)
    categories = {
        str(category): _parse_item_list(items, f"{technology_path}:{category}")
        for category, items in technology_data.items()
    }

    mcp_path = config_dir / MCP_FILENAME
    mcp_data = _load_yaml_mapping(mcp_path)
    mcps = _parse_item_list(mcp_data.get("mcps"), f"{mcp_path}:mcps")

    return ProjectConfig(ides=ides, categories=categories, mcps=mcps)
