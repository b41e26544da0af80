"""MCP transport scaffold.

Modules
-------
mcp     create_service_mcp() + run_service_mcp() factory functions
"""
