"""
MCP Tool Handlers

Each module implements one or more tools.
All handlers take the tool service and the raw tool arguments.
"""

from cypher_mcp.server.handlers import cypher, schema

__all__ = ["cypher", "schema"]
