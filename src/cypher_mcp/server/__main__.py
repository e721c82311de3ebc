"""
Entry point for running the Neo4j Cypher MCP server as a module.

Usage:
    python -m cypher_mcp.server
"""

from cypher_mcp.server import run

if __name__ == "__main__":
    run()
