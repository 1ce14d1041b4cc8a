"""Deterministic, atomic JSON writes."""

import json
from pathlib import Path
from typing import Any


def dumps_stable(data: Any) -> str:
    """Serialize with sorted keys, 2-space indent and a trailing newline.

    Equal inputs always produce identical text.
    """
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def save_json_atomic(path: Path, data: Any) -> None:
    """Write JSON to a temporary sibling, then rename over the target.

    Creates parent directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(path.name + ".tmp")
    temp_path.write_text(dumps_stable(data), encoding="utf-8")
    temp_path.replace(path)
