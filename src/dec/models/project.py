"""Project-level configuration: which IDEs to target and which packages are enabled."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_IDES = ("cursor",)
STANDARD_CATEGORIES = ("languages", "frameworks", "platforms", "patterns")


@dataclass(frozen=True)
class ConfigItem:
    """An enabled package with optional variable overrides."""

    name: str
    vars: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectConfig:
    """Loaded from ``.dec/config/*.yaml`` in a project.

    Attributes:
        ides: Target IDE names, in declaration order
        categories: Category name to enabled rule packages
        mcps: Enabled MCP packages
    """

    ides: tuple[str, ...] = DEFAULT_IDES
    categories: dict[str, tuple[ConfigItem, ...]] = field(default_factory=dict)
    mcps: tuple[ConfigItem, ...] = ()

    def enabled_rule_items(self) -> list[ConfigItem]:
        """All rule items, standard categories first, first declaration wins."""
        ordered = [c for c in STANDARD_CATEGORIES if c in self.categories]
        ordered += sorted(c for c in self.categories if c not in STANDARD_CATEGORIES)

        seen: set[str] = set()
        items: list[ConfigItem] = []
        for category in ordered:
            for item in self.categories[category]:
                if item.name in seen:
                    continue
                seen.add(item.name)
                items.append(item)
        return items
