"""
Database client.

Provides the pooled Neo4j connection shared by all tool calls.
"""

from cypher_mcp.clients.neo4j_client import Neo4jClient, PoolConfig

__all__ = ["Neo4jClient", "PoolConfig"]
