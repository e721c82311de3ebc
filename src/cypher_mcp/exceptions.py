"""
Exception hierarchy for the Cypher MCP server.

All errors inherit from CypherMCPError so they can be caught
uniformly at the server boundary.
"""


class CypherMCPError(Exception):
    """Base exception for all server errors."""

    pass


class ConnectivityError(CypherMCPError):
    """Neo4j is unreachable or the client is not connected."""

    pass


class InvalidUsageError(CypherMCPError, ValueError):
    """Query submitted to the wrong tool (write syntax to read-query or vice versa)."""

    pass


class ExecutionError(CypherMCPError):
    """The database rejected or failed a query after it was submitted."""

    def __init__(self, message: str, query: str | None = None, cause: Exception | None = None):
        self.query = query
        self.cause = cause
        super().__init__(message)


class PoolExhaustionError(ExecutionError):
    """No pooled connection became free within the acquisition timeout."""

    pass
