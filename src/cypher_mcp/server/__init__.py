"""
Neo4j Cypher MCP Server

Main entry point for the MCP server.
Exports the main() function for running the server.
"""

from cypher_mcp.server.core import (
    TOOL_TABLE,
    cleanup_backend,
    get_service,
    handle_call_tool,
    handle_list_tools,
    initialize_backend,
    main,
    run,
    server,
)

__all__ = [
    "TOOL_TABLE",
    "cleanup_backend",
    "get_service",
    "handle_call_tool",
    "handle_list_tools",
    "initialize_backend",
    "main",
    "run",
    "server",
]
