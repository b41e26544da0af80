"""tablespine -- SQLite CRUD over the Model Context Protocol.

Exposes insert / select / update / delete on any table of a SQLite database
as MCP tools, plus a handful of fixed-schema tools (notebooks, MCP server
registry). Requests carry table names, column/value mappings and bind
parameters; results come back as JSON.

Security note: the ``where`` and ``order_by`` arguments of the CRUD tools
are raw SQL fragments inserted verbatim. Table and column names are
validated, values are always bound, but those two fragments are trusted.
Only expose this server to trusted callers.
"""

__version__ = "0.1.0"
