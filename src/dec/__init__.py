"""dec: package manager for IDE rule packs and MCP tool adapters.

Import from submodules:
- version: __version__
- context: DecContext, create_context
"""

from dec.version import __version__ as __version__
