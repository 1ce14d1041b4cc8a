"""Placeholder templating for package rule and MCP templates.

Syntax::

    {{dotted.path}}            value of vars["dotted"]["path"], or ""
    {{dotted.path:-fallback}}  same, but "fallback" when the value is empty

All functions here are pure.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

PLACEHOLDER_PATTERN = re.compile(
    r"\{\{([a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z_][a-zA-Z0-9_]*)*)(?::-([^}]*))?\}\}"
)


@dataclass(frozen=True)
class Placeholder:
    """A single placeholder occurrence.

    Attributes:
        raw: Token exactly as written, e.g. ``{{db.host:-localhost}}``
        path: Dotted variable path, e.g. ``db.host``
        default: Declared default, or None when the token has no ``:-`` part
    """

    raw: str
    path: str
    default: str | None

    @property
    def segments(self) -> list[str]:
        return self.path.split(".")


def parse(content: str) -> list[Placeholder]:
    """List placeholders in order of first appearance, one per path."""
    seen: set[str] = set()
    placeholders: list[Placeholder] = []
    for match in PLACEHOLDER_PATTERN.finditer(content):
        path = match.group(1)
        if path in seen:
            continue
        seen.add(path)
        placeholders.append(Placeholder(raw=match.group(0), path=path, default=match.group(2)))
    return placeholders


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str | int | float):
        return str(value)
    return ""


def resolve(path: str, variables: Mapping[str, Any]) -> str:
    """Walk ``variables`` along a dotted path.

    Any missing key or non-mapping intermediate yields an empty string.
    Only scalar leaves produce a value.
    """
    current: Any = variables
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return ""
        current = current[segment]
    return _stringify(current)


def replace(content: str, variables: Mapping[str, Any]) -> str:
    """Substitute every placeholder in content.

    Each path is resolved once, from its first occurrence, and that value is
    used for every occurrence. Substituted text is never rescanned.
    """
    values: dict[str, str] = {}
    for placeholder in parse(content):
        value = resolve(placeholder.path, variables)
        if value == "" and placeholder.default is not None:
            value = placeholder.default
        values[placeholder.path] = value

    return PLACEHOLDER_PATTERN.sub(lambda match: values[match.group(1)], content)


def extract_default_vars(content: str) -> dict[str, Any]:
    """Nested dict of every declared default, keyed by placeholder path."""
    defaults: dict[str, Any] = {}
    for placeholder in parse(content):
        if placeholder.default is None:
            continue
        node = defaults
        *parents, leaf = placeholder.segments
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = placeholder.default
    return defaults
