"""
Neo4j Cypher MCP Server

Model Context Protocol server exposing a Neo4j database to tool-calling agents
through three tools: read-query, write-query and get-schema.
"""

__version__ = "0.1.0"

# Lazy import to avoid MCP dependency for standalone usage
def __getattr__(name):
    if name == "server":
        from cypher_mcp.server import server
        return server
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = ["server", "__version__"]
