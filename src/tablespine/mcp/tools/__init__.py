"""MCP tools package.

Importing each module registers its tools on the shared server.
"""

from tablespine.mcp.tools import (  # noqa: F401
    crud,
    health,
    notebooks,
    registry,
)
