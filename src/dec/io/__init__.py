"""I/O operations for dec."""

from dec.io.descriptor import load_descriptor
from dec.io.json_files import save_json_atomic
from dec.io.project_config import load_project_config

__all__ = [
    "load_descriptor",
    "load_project_config",
    "save_json_atomic",
]
