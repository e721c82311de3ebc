"""
Tool facade: the read, write and schema operations exposed over MCP.

Enforces the read/write contract before anything reaches the database and
owns the lifecycle of the connection, executor and schema cache.
"""

import logging
from typing import Any

from cypher_mcp.clients.neo4j_client import Neo4jClient, PoolConfig
from cypher_mcp.config import Settings
from cypher_mcp.constants import DEFAULT_SHUTDOWN_GRACE_PERIOD, ERROR_READ_ONLY, ERROR_WRITE_ONLY
from cypher_mcp.exceptions import InvalidUsageError
from cypher_mcp.schemas import ResultSet
from cypher_mcp.services.cache import CacheService
from cypher_mcp.services.classifier import QueryClassification, classify
from cypher_mcp.services.executor import QueryExecutor
from cypher_mcp.services.schema_introspector import SchemaIntrospector

logger = logging.getLogger(__name__)


class CypherToolService:
    """
    Read/write/schema operations over one Neo4j database.

    Example:
        service = CypherToolService.from_settings(settings)
        await service.start()
        rows = await service.read_query("MATCH (n) RETURN n LIMIT 5")
        await service.close()
    """

    def __init__(
        self,
        client: Neo4jClient,
        executor: QueryExecutor,
        introspector: SchemaIntrospector,
        shutdown_grace_period: float = DEFAULT_SHUTDOWN_GRACE_PERIOD,
    ):
        self.client = client
        self.executor = executor
        self.introspector = introspector
        self.shutdown_grace_period = shutdown_grace_period

    @classmethod
    def from_settings(cls, settings: Settings) -> "CypherToolService":
        """Wire client, executor and introspector from configuration."""
        client = Neo4jClient(
            uri=settings.neo4j_uri,
            username=settings.neo4j_username,
            password=settings.neo4j_password or "",
            database=settings.neo4j_database,
            pool=PoolConfig(
                connection_timeout=settings.neo4j_connection_timeout,
                max_connection_pool_size=settings.neo4j_max_connection_pool_size,
                max_connection_lifetime=settings.neo4j_max_connection_lifetime,
                connection_acquisition_timeout=settings.neo4j_connection_acquisition_timeout,
                max_transaction_retry_time=settings.neo4j_max_transaction_retry_time,
            ),
            connect_attempts=settings.neo4j_connect_attempts,
            route_reads=settings.neo4j_route_reads,
        )
        executor = QueryExecutor(client, raise_errors=settings.raise_execution_errors)
        cache = CacheService(max_size=1, ttl_seconds=settings.schema_cache_ttl_seconds)
        introspector = SchemaIntrospector(executor, cache=cache)
        return cls(
            client,
            executor,
            introspector,
            shutdown_grace_period=settings.shutdown_grace_period,
        )

    async def start(self) -> None:
        """Connect and verify the database; raises ConnectivityError if unreachable."""
        await self.client.connect()

    async def close(self) -> None:
        await self.client.close(grace_period=self.shutdown_grace_period)

    async def read_query(self, query: str, params: dict[str, Any] | None = None) -> ResultSet:
        """
        Execute a read-only Cypher query.

        Raises:
            InvalidUsageError: If the query contains write clauses
        """
        if classify(query) != QueryClassification.READ:
            raise InvalidUsageError(ERROR_READ_ONLY)
        return await self.executor.execute(query, params, QueryClassification.READ)

    async def write_query(self, query: str, params: dict[str, Any] | None = None) -> ResultSet:
        """
        Execute a write Cypher query and return its mutation counters.

        Raises:
            InvalidUsageError: If the query has no write clauses
        """
        if classify(query) != QueryClassification.WRITE:
            raise InvalidUsageError(ERROR_WRITE_ONLY)
        result = await self.executor.execute(query, params, QueryClassification.WRITE)
        if result and result[0].get("containsUpdates"):
            await self.introspector.invalidate()
        return result

    async def get_schema(self) -> ResultSet:
        """List node labels with their attributes and relationships."""
        return await self.introspector.get_schema()

    def get_status(self) -> dict[str, Any]:
        status = self.client.get_status()
        cache = self.introspector.cache
        if cache is not None:
            status["schema_cache"] = cache.get_stats().to_dict()
        return status
