"""Per-IDE directory and file conventions."""

from dec.ide.adapters import (
    CodeBuddyIde,
    CursorIde,
    GenericIde,
    IdeAdapter,
    TraeIde,
    WindsurfIde,
    get_ide_adapter,
)

__all__ = [
    "CodeBuddyIde",
    "CursorIde",
    "GenericIde",
    "IdeAdapter",
    "TraeIde",
    "WindsurfIde",
    "get_ide_adapter",
]
