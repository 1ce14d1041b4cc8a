"""Registry loading and tier resolution."""

from dec.registry.io import load_registry_file, save_registry_file
from dec.registry.resolver import RegistryResolver

__all__ = ["RegistryResolver", "load_registry_file", "save_registry_file"]
