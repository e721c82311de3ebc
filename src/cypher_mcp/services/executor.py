"""
Query execution against Neo4j.

Runs one query per session and shapes the outcome:
- WRITE: the result is consumed and its summary counters returned as one record
- READ: every row is materialized in order

Database errors are logged and turned into an empty result set, unless the
executor was built with ``raise_errors=True``.
"""

import logging
from typing import Any

from neo4j.exceptions import DriverError, Neo4jError

from cypher_mcp.clients.neo4j_client import Neo4jClient
from cypher_mcp.constants import POOL_ACQUISITION_FAILURE
from cypher_mcp.exceptions import ExecutionError, PoolExhaustionError
from cypher_mcp.schemas import ResultSet
from cypher_mcp.services.classifier import QueryClassification, classify
from cypher_mcp.services.normalizer import normalize_counters, normalize_record

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Executes Cypher through a connected Neo4jClient."""

    def __init__(self, client: Neo4jClient, raise_errors: bool = False):
        """
        Args:
            client: Connection manager providing sessions
            raise_errors: Propagate ExecutionError instead of returning []
        """
        self.client = client
        self.raise_errors = raise_errors

    async def execute(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        classification: QueryClassification | None = None,
    ) -> ResultSet:
        """
        Execute a Cypher query and return its normalized result set.

        Args:
            query: Cypher query string
            params: Optional query parameters (never mutated)
            classification: READ or WRITE; derived from the query text if omitted

        Returns:
            For writes, a single record of mutation counters.
            For reads, one record per returned row. Empty on database error.

        Raises:
            ExecutionError: Only when raise_errors is set
        """
        if classification is None:
            classification = classify(query)
        parameters = dict(params) if params else {}

        logger.info(f"Executing query: {query}")
        try:
            return await self._run(query, parameters, classification)
        except ExecutionError as e:
            logger.error(
                f"Database error executing query: {e}\nQuery: {query}",
                exc_info=e.cause,
            )
            if self.raise_errors:
                raise
            return []

    async def _run(
        self,
        query: str,
        parameters: dict[str, Any],
        classification: QueryClassification,
    ) -> ResultSet:
        try:
            async with self.client.session(classification) as session:
                result = await session.run(query, parameters)

                if classification == QueryClassification.WRITE:
                    summary = await result.consume()
                    counters = normalize_counters(summary.counters)
                    logger.debug(f"Write query affected: {counters}")
                    return [counters]

                records = [normalize_record(record) async for record in result]
                logger.info(f"Read query returned {len(records)} rows")
                return records
        except (Neo4jError, DriverError) as e:
            raise _wrap(e, query) from e


def _wrap(error: Exception, query: str) -> ExecutionError:
    message = str(error) or type(error).__name__
    if (
        POOL_ACQUISITION_FAILURE in message.lower()
        or "AcquisitionTimeout" in type(error).__name__
    ):
        return PoolExhaustionError(message, query=query, cause=error)
    return ExecutionError(message, query=query, cause=error)
