"""tablespine MCP server.

Model Context Protocol server exposing SQLite tables as AI-callable CRUD
tools.

Usage::

    # stdio mode (default)
    tablespine-mcp

    # HTTP mode
    tablespine-mcp --transport http --port 8100

The database is taken from ``DATABASE_URL``, then ``[database] url`` in
``config.toml``, then ``sqlite://./app.sqlite``.
"""

from tablespine.mcp.server import create_server, mcp, run

__all__ = [
    "create_server",
    "mcp",
    "run",
]
