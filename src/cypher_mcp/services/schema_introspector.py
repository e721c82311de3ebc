"""
Schema introspection through APOC metadata.

Returns one record per node label (labels starting with ``_`` are internal
and skipped) with its attributes and the labels its relationships point to.
"""

import logging

from cypher_mcp.constants import SCHEMA_CACHE_KEY, SCHEMA_QUERY
from cypher_mcp.schemas import ResultSet, SchemaRecord
from cypher_mcp.services.cache import CacheService
from cypher_mcp.services.classifier import QueryClassification
from cypher_mcp.services.executor import QueryExecutor

logger = logging.getLogger(__name__)


class SchemaIntrospector:
    """
    Runs the canned schema query, optionally caching its result.

    Every invalidation bumps a generation counter; a fetch only stores its
    result if no invalidation happened while it was running.
    """

    def __init__(self, executor: QueryExecutor, cache: CacheService | None = None):
        self.executor = executor
        self.cache = cache
        self._generation = 0

    async def get_schema(self) -> ResultSet:
        """
        Describe every node label in the database.

        Returns:
            Records with exactly the keys label, attributes and relationships
        """
        if self.cache is None:
            return await self._fetch()

        generation = self._generation

        def cacheable(schema: ResultSet) -> bool:
            # Empty results are never cached: they may be a swallowed failure
            if not schema:
                return False
            if generation != self._generation:
                logger.debug("Schema changed during introspection; result not cached")
                return False
            return True

        return await self.cache.get_or_set(SCHEMA_CACHE_KEY, self._fetch, cache_if=cacheable)

    async def invalidate(self) -> None:
        """Drop the cached schema after the graph has changed."""
        self._generation += 1
        if self.cache is not None:
            await self.cache.delete(SCHEMA_CACHE_KEY)

    async def _fetch(self) -> ResultSet:
        rows = await self.executor.execute(
            SCHEMA_QUERY, classification=QueryClassification.READ
        )
        schema = [SchemaRecord.model_validate(row).model_dump() for row in rows]
        logger.debug(f"Schema introspection found {len(schema)} labels")
        return schema
